from core_backend.exceptions import ValidationError

from .models import Payment
from .strategies import (
    PaymentStrategy,
    CardPaymentStrategy,
    CashPaymentStrategy,
    CheckPaymentStrategy,
    CompPaymentStrategy,
    GiftCardPaymentStrategy,
)


class PaymentStrategyFactory:
    """
    A factory for creating payment strategy instances.
    """

    STRATEGIES = {
        Payment.PaymentMethod.CARD: CardPaymentStrategy,
        Payment.PaymentMethod.CASH: CashPaymentStrategy,
        Payment.PaymentMethod.CHECK: CheckPaymentStrategy,
        Payment.PaymentMethod.GIFT_CARD: GiftCardPaymentStrategy,
        Payment.PaymentMethod.COMP: CompPaymentStrategy,
    }

    @staticmethod
    def get_strategy(method: str) -> PaymentStrategy:
        """
        Returns an instance of the appropriate payment strategy for the
        payment method string.
        """
        strategy_class = PaymentStrategyFactory.STRATEGIES.get(method)
        if strategy_class is None:
            raise ValidationError(f"Unknown payment method: {method}", field="payment_method")
        return strategy_class()
