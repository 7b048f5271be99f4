from enum import Enum


class L10nSection(Enum):
    CART = "cart"
    CHECKOUT = "checkout"
    COMMON = "common"
