"""
Root of the e-menu exception hierarchy.
"""


class EMenuException(Exception):
    """
    Domain error of the ordering core.

    The checkout flow catches this class to turn any domain failure into a
    failed CheckoutResultDTO, so every project exception derives from it.

    Attributes:
        message: Text shown in logs
        details: Ids and values of the failing entity (product_id, store_key, field, ...)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        name = type(self).__name__
        if not self.details:
            return f"{name}({self.message!r})"
        details_str = ", ".join(f"{key}={value!r}" for key, value in sorted(self.details.items()))
        return f"{name}({self.message!r}, {details_str})"
