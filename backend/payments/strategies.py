from abc import ABC, abstractmethod
from decimal import Decimal
import logging
import re

from core_backend.exceptions import InvalidOperation, PaymentDeclined, ValidationError

from .models import Payment
from .processors import ProcessorError, get_card_processor

logger = logging.getLogger(__name__)

CARD_LAST_FOUR_RE = re.compile(r"^\d{4}$")


class PaymentStrategy(ABC):
    """
    The Abstract Base Class for a payment strategy.
    Defines the common interface for all payment methods.
    """

    def validate(self, payment: Payment):
        """
        Check method-specific metadata before anything is charged.
        Raises ValidationError or InvalidOperation.
        """
        pass

    @abstractmethod
    def process(self, payment: Payment) -> Payment:
        """
        Settle an unsaved payment. Must either fill in settlement details
        or raise; the caller persists the payment afterwards.
        """
        pass

    @abstractmethod
    def refund(self, payment: Payment, amount: Decimal, reason: str = ""):
        """
        Return money for a completed payment. The caller records the refund.
        """
        pass


class CashPaymentStrategy(PaymentStrategy):
    """
    A simple strategy for handling cash payments.
    """

    def process(self, payment):
        # Cash is settled the moment it is recorded
        return payment

    def refund(self, payment, amount, reason=""):
        # Manual payout from the drawer
        logger.info(f"Cash refund of {amount} for payment {payment.id} to be paid out from drawer")


class CheckPaymentStrategy(PaymentStrategy):
    def process(self, payment):
        return payment

    def refund(self, payment, amount, reason=""):
        logger.info(f"Check refund of {amount} for payment {payment.id} to be issued manually")


class GiftCardPaymentStrategy(PaymentStrategy):
    def process(self, payment):
        return payment

    def refund(self, payment, amount, reason=""):
        logger.info(f"Gift card refund of {amount} for payment {payment.id} to be reloaded manually")


class CompPaymentStrategy(PaymentStrategy):
    """
    Comped checks need a reason and the approving manager on record.
    """

    def validate(self, payment):
        if not (payment.comp_reason or "").strip():
            raise InvalidOperation(
                "Comp reason is required for comped payments", code="comp_reason_required"
            )
        if not (payment.comp_by or "").strip():
            raise InvalidOperation(
                "Comp approver is required for comped payments", code="comp_approver_required"
            )

    def process(self, payment):
        return payment

    def refund(self, payment, amount, reason=""):
        # Nothing was collected, so nothing goes back
        logger.info(f"Comp payment {payment.id} reversed ({amount})")


class CardPaymentStrategy(PaymentStrategy):
    """
    Card payments run through the configured processor unless the terminal
    already captured the charge and supplied a processor transaction id.
    """

    def __init__(self, processor=None):
        self._processor = processor

    @property
    def processor(self):
        if self._processor is None:
            self._processor = get_card_processor()
        return self._processor

    def validate(self, payment):
        if payment.card_last_four and not CARD_LAST_FOUR_RE.match(payment.card_last_four):
            raise ValidationError("Card last four must be exactly 4 digits", field="card_last_four")

    def process(self, payment):
        if payment.processor_transaction_id:
            # Captured upstream (card terminal); just record it
            return payment

        currency = payment.venue.currency
        try:
            result = self.processor.charge(
                payment.amount,
                payment.tip_amount,
                currency,
                {
                    "order_id": str(payment.order_id),
                    "card_last_four": payment.card_last_four,
                    "card_brand": payment.card_brand,
                },
            )
        except ProcessorError as e:
            logger.error(
                f"Card charge declined for order {payment.order_id} "
                f"({payment.amount}+{payment.tip_amount}): {e}"
            )
            raise PaymentDeclined(str(e), code=e.decline_code or "payment_declined")

        payment.processor = self.processor.name
        payment.processor_transaction_id = result.transaction_id
        payment.processor_fee = result.fee
        return payment

    def refund(self, payment, amount, reason=""):
        if not payment.processor_transaction_id or payment.processor != self.processor.name:
            # Charged elsewhere; the terminal handles the reversal
            logger.info(f"Card refund for payment {payment.id} recorded without processor call")
            return None

        try:
            result = self.processor.refund(
                payment.processor_transaction_id, amount, payment.venue.currency
            )
        except ProcessorError as e:
            logger.error(f"Card refund failed for payment {payment.id}: {e}")
            raise PaymentDeclined(str(e), code=e.decline_code or "refund_declined")

        payment.refund_transaction_id = result.transaction_id
        return result
