# cart is the customer's pending order on the public QR menu. It lives on the
# client (persisted as a snapshot blob), never in the orders table, and is
# turned into an order payload only at checkout.
#
# note that prices are LOCKED when a line is created: price_at_add and
# price_ledger_id are copied from the price source once and never re-queried,
# so a price change while the customer browses does not move the cart total.
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from enums.order_type import OrderType

CART_SNAPSHOT_VERSION = 0


class CartContextDTO(BaseModel):
    """Restaurant and table the cart is being filled for. table_id None = takeaway."""
    model_config = ConfigDict(frozen=True)

    organization_id: str
    organization_slug: str
    organization_name: str
    table_id: str | None = None
    table_name: str | None = None
    currency: str


class SelectedModifierOptionDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    option_id: str
    option_name: str
    price_adjustment: Decimal = Decimal("0")  # Signed, per unit


class SelectedModifierDTO(BaseModel):
    """
    A modifier group attached to a cart line.

    Carries the group's selection rules as they were when the customer chose,
    so checkout validation does not need the catalog again.
    max_selections = 0 means unbounded.
    """
    model_config = ConfigDict(frozen=True)

    modifier_id: str
    modifier_name: str
    is_required: bool = False
    min_selections: int = 0
    max_selections: int = 0
    selected_options: tuple[SelectedModifierOptionDTO, ...] = ()


class CartItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # product_id + sorted option ids, see utils.cart_totals.generate_cart_item_id
    product_id: str
    product_name: str
    product_description: str | None = None
    image_url: str | None = None
    price_at_add: Decimal  # Locked base unit price
    price_ledger_id: str | None = None  # Price ledger entry active at add time (audit trail)
    currency: str
    quantity: int = Field(gt=0)
    modifiers: tuple[SelectedModifierDTO, ...] = ()
    special_instructions: str | None = None
    added_at: datetime


class CartStateDTO(BaseModel):
    """Whole cart. Every mutation produces a new instance."""
    model_config = ConfigDict(frozen=True)

    items: tuple[CartItemDTO, ...] = ()
    context: CartContextDTO | None = None
    customer_name: str = ""
    customer_phone: str = ""
    customer_notes: str = ""
    is_cart_open: bool = False


class CartSnapshotDTO(BaseModel):
    """Persisted part of the cart state (UI flag excluded)."""
    version: int = CART_SNAPSHOT_VERSION
    items: tuple[CartItemDTO, ...] = ()
    context: CartContextDTO | None = None
    customer_name: str = ""
    customer_phone: str = ""
    customer_notes: str = ""

    @classmethod
    def from_state(cls, state: CartStateDTO) -> "CartSnapshotDTO":
        return cls(
            items=state.items,
            context=state.context,
            customer_name=state.customer_name,
            customer_phone=state.customer_phone,
            customer_notes=state.customer_notes,
        )

    def to_state(self) -> CartStateDTO:
        return CartStateDTO(
            items=self.items,
            context=self.context,
            customer_name=self.customer_name,
            customer_phone=self.customer_phone,
            customer_notes=self.customer_notes,
        )


class AddItemInputDTO(BaseModel):
    """What the menu hands to CartService.add_item()."""
    product_id: str
    product_name: str
    product_description: str | None = None
    image_url: str | None = None
    price: Decimal
    price_ledger_id: str | None = None
    currency: str | None = None
    quantity: int = Field(default=1, gt=0)
    modifiers: tuple[SelectedModifierDTO, ...] = ()
    special_instructions: str | None = None


class CartValidationErrorDTO(BaseModel):
    item_id: str
    product_name: str
    modifier_name: str
    message: str


class CartValidationResultDTO(BaseModel):
    is_valid: bool
    errors: list[CartValidationErrorDTO] = []


class PreparedCartItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    product_description: str | None = None
    product_image_url: str | None = None
    quantity: int
    unit_price: Decimal
    modifier_total: Decimal  # Per unit
    item_total: Decimal
    currency: str
    price_ledger_id: str | None = None
    selected_modifiers: tuple[SelectedModifierDTO, ...] = ()
    special_instructions: str | None = None


class PreparedCartDTO(BaseModel):
    """Immutable order payload handed to the order-creation collaborator."""
    model_config = ConfigDict(frozen=True)

    organization_id: str
    table_id: str | None = None
    table_name: str | None = None
    customer_name: str = ""
    customer_phone: str = ""
    customer_notes: str = ""
    order_type: OrderType
    subtotal: Decimal
    total_amount: Decimal
    currency: str
    items: tuple[PreparedCartItemDTO, ...]


class CartOrgSummaryDTO(BaseModel):
    """Cart badge data for one restaurant page."""
    has_items: bool = False
    item_count: int = 0
    total: Decimal = Decimal("0")
