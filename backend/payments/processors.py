"""
Card processor capability.

The engine treats the processor as opaque and synchronous: a charge either
returns a transaction id and fee or raises ProcessorError. The concrete class
is chosen by settings.PAYMENT_CARD_PROCESSOR.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
import logging
import uuid  # For simulated transaction ID

from django.conf import settings
from django.utils.module_loading import import_string

from .money import quantize

logger = logging.getLogger(__name__)


class ProcessorError(Exception):
    """Raised by a processor when a charge or refund is refused."""

    def __init__(self, message, decline_code=None):
        self.decline_code = decline_code
        super().__init__(message)


class ProcessorResult:
    def __init__(self, transaction_id: str, fee: Decimal = Decimal("0.00")):
        self.transaction_id = transaction_id
        self.fee = fee

    def __repr__(self):
        return f"ProcessorResult(transaction_id={self.transaction_id!r}, fee={self.fee})"


class CardProcessor(ABC):
    """
    Interface every card processor integration implements.
    """

    name = ""

    @abstractmethod
    def charge(self, amount: Decimal, tip_amount: Decimal, currency: str, metadata: dict) -> ProcessorResult:
        pass

    @abstractmethod
    def refund(self, transaction_id: str, amount: Decimal, currency: str) -> ProcessorResult:
        pass


class SimulatedCardProcessor(CardProcessor):
    """
    In-process processor for development and tests.

    Fees follow SIMULATED_PROCESSOR_FEE_RATE and SIMULATED_PROCESSOR_FEE_FIXED.
    A card ending in 0002 is declined, mirroring the common test-card convention.
    """

    name = "simulated"
    DECLINED_LAST_FOUR = "0002"

    def __init__(self, fee_rate=None, fee_fixed=None):
        self.fee_rate = Decimal(str(fee_rate if fee_rate is not None else settings.SIMULATED_PROCESSOR_FEE_RATE))
        self.fee_fixed = Decimal(str(fee_fixed if fee_fixed is not None else settings.SIMULATED_PROCESSOR_FEE_FIXED))

    def charge(self, amount, tip_amount, currency, metadata):
        if metadata.get("card_last_four") == self.DECLINED_LAST_FOUR:
            raise ProcessorError("Card declined", decline_code="card_declined")

        fee = quantize((amount + tip_amount) * self.fee_rate + self.fee_fixed, currency)
        return ProcessorResult(transaction_id=f"sim_{uuid.uuid4().hex}", fee=fee)

    def refund(self, transaction_id, amount, currency):
        if not transaction_id:
            raise ProcessorError("Missing original transaction id", decline_code="missing_transaction")
        return ProcessorResult(transaction_id=f"sim_re_{uuid.uuid4().hex}")


def get_card_processor() -> CardProcessor:
    processor_class = import_string(settings.PAYMENT_CARD_PROCESSOR)
    return processor_class()
