"""Payment methods accepted at checkout."""

from enum import Enum


class PaymentMethod(Enum):
    EASYPAISA = "EASYPAISA"
    JAZZCASH = "JAZZCASH"
    BANK_TRANSFER = "BANK_TRANSFER"
