from decimal import Decimal
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone
import logging

from core_backend.exceptions import InvalidOperation, NotFound, ValidationError
from core_backend.validators import validate_non_negative_amount, validate_positive_amount
from orders.models import Order
from orders.services import OrderService
from .factories import PaymentStrategyFactory
from .models import Payment
from .signals import payment_processed, payment_refunded

from .money import ZERO, sum_amounts

logger = logging.getLogger(__name__)

CARD_ONLY_FIELDS = ("card_last_four", "card_brand", "processor", "processor_transaction_id", "processor_fee")


class PaymentService:
    """
    Payment ledger: records payments against orders, refunds them once, and
    answers whether an order is fully paid.
    """

    # State transition map - defines valid transitions for Payment.PaymentStatus
    VALID_TRANSITIONS = {
        Payment.PaymentStatus.PENDING: [
            Payment.PaymentStatus.COMPLETED,
            Payment.PaymentStatus.FAILED,
        ],
        Payment.PaymentStatus.COMPLETED: [
            Payment.PaymentStatus.REFUNDED,
        ],
        Payment.PaymentStatus.FAILED: [],  # Terminal state
        Payment.PaymentStatus.REFUNDED: [],  # Terminal state
    }

    # Orders in these states no longer accept money
    CLOSED_ORDER_STATUSES = (Order.OrderStatus.VOIDED, Order.OrderStatus.CANCELLED)

    @staticmethod
    def _validate_transition(current_status: str, target_status: str) -> bool:
        valid_targets = PaymentService.VALID_TRANSITIONS.get(current_status, [])
        return target_status in valid_targets

    @staticmethod
    def _transition_payment_status(payment: Payment, target_status: str, update_fields=None) -> Payment:
        """
        Safely transitions a payment to a new status with validation.

        Raises:
            InvalidOperation: If transition is invalid
        """
        if not PaymentService._validate_transition(payment.status, target_status):
            raise InvalidOperation(
                f"Invalid state transition from {payment.status} to {target_status}",
                code="invalid_transition",
            )

        old_status = payment.status
        payment.status = target_status
        payment.save(update_fields=["status", *(update_fields or [])])

        logger.info(f"Payment {payment.id}: Status transition {old_status} -> {target_status}")
        return payment

    @staticmethod
    def _emit_on_commit(signal, payment: Payment):
        def emit():
            """Deferred signal emission - runs after transaction commits"""
            try:
                signal.send(sender=PaymentService, payment=payment, order=payment.order)
            except Exception as e:
                # Log but don't raise - payment is already committed
                logger.error(f"Error in payment signal handlers for payment {payment.id}: {e}")

        transaction.on_commit(emit)

    @staticmethod
    @transaction.atomic
    def process_payment(
        venue,
        order_id,
        amount,
        payment_method: str,
        tip_amount=Decimal("0.00"),
        processed_by: str = "",
        comp_reason: str = "",
        comp_by: str = "",
        **card_details,
    ) -> Payment:
        """
        Record a payment against an order.

        The amount is NOT checked against the order balance; split and
        partial payments are allowed. Use is_order_fully_paid for that.

        Checks run in this order: request shape (fields, method), the order
        exists and is not closed, method metadata (comp reason/approver, card
        last four), then amounts. Amounts are rounded half-up to the venue
        currency before they are checked.

        Args:
            venue: Venue taking the payment
            order_id: Order being paid
            amount: Positive amount applied to the check
            payment_method: card, cash, check, gift_card or comp
            tip_amount: Non-negative tip (default 0)
            processed_by: Staff member taking the payment
            comp_reason / comp_by: Required when payment_method is comp
            **card_details: card_last_four, card_brand, processor,
                processor_transaction_id, processor_fee (card only)

        Raises:
            ValidationError: bad amount/tip/method/card metadata
            NotFound: order does not exist in this venue
            InvalidOperation: missing comp metadata, or order voided/cancelled
            PaymentDeclined: card processor refused the charge
        """
        unknown = set(card_details) - set(CARD_ONLY_FIELDS)
        if unknown:
            raise ValidationError(f"Unexpected payment fields: {', '.join(sorted(unknown))}")

        if payment_method not in Payment.PaymentMethod.values:
            raise ValidationError(f"Unknown payment method: {payment_method}", field="payment_method")

        card_details = {key: value for key, value in card_details.items() if value not in (None, "")}
        if card_details and payment_method != Payment.PaymentMethod.CARD:
            raise ValidationError(
                "Card details are only accepted for card payments", field="payment_method"
            )
        processor_fee = card_details.pop("processor_fee", None)

        try:
            order = Order.objects.select_related("venue").get(id=order_id, venue=venue)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            logger.warning(f"Payment rejected: order {order_id} not found for venue {getattr(venue, 'id', None)}")
            raise NotFound("Order", order_id)

        if order.status in PaymentService.CLOSED_ORDER_STATUSES:
            logger.warning(f"Payment rejected: order {order.id} is {order.status}")
            raise InvalidOperation(f"Cannot take payment on {order.status} order", code="order_closed")

        payment = Payment(
            venue=order.venue,
            order=order,
            payment_method=payment_method,
            processed_by=processed_by or "",
            comp_reason=comp_reason or "",
            comp_by=comp_by or "",
            **card_details,
        )

        strategy = PaymentStrategyFactory.get_strategy(payment_method)
        try:
            strategy.validate(payment)
        except InvalidOperation as e:
            logger.warning(f"Payment rejected for order {order.id}: {e.message}")
            raise

        currency = order.venue.currency
        payment.amount = validate_positive_amount(
            amount, "amount", "Payment amount must be greater than zero", currency=currency
        )
        payment.tip_amount = validate_non_negative_amount(
            ZERO if tip_amount is None else tip_amount, "tip_amount", "Tip amount cannot be negative",
            currency=currency,
        )
        if processor_fee is not None:
            payment.processor_fee = validate_non_negative_amount(
                processor_fee, "processor_fee", "Processor fee cannot be negative", currency=currency
            )

        strategy.process(payment)

        payment.status = Payment.PaymentStatus.COMPLETED
        payment.processed_at = timezone.now()
        payment.save()

        logger.info(
            f"Payment {payment.id} processed for order {order.id}: "
            f"{payment.payment_method} {payment.amount} + tip {payment.tip_amount}"
        )
        PaymentService._emit_on_commit(payment_processed, payment)
        return payment

    @staticmethod
    @transaction.atomic
    def refund_payment(payment_id, refund_amount, refund_reason: str = "", refunded_by: str = "") -> Payment:
        """
        Refund a payment, fully or partially, exactly once.

        Raises:
            ValidationError: refund_amount is not positive once rounded
            NotFound: payment does not exist in this venue
            InvalidOperation: already refunded, amount exceeds the payment,
                or the payment never completed
        """
        try:
            payment = Payment.objects.select_for_update().select_related("venue", "order").get(id=payment_id)
        except (Payment.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Payment", payment_id)

        if payment.is_refunded:
            logger.warning(f"Refund rejected: payment {payment.id} already refunded")
            raise InvalidOperation("Payment already refunded", code="already_refunded")

        refund_amount = validate_positive_amount(
            refund_amount, "refund_amount", "Refund amount must be greater than zero",
            currency=payment.venue.currency,
        )
        if refund_amount > payment.amount:
            logger.warning(
                f"Refund rejected: {refund_amount} exceeds payment {payment.id} amount {payment.amount}"
            )
            raise InvalidOperation(
                "Refund amount cannot exceed payment amount", code="refund_exceeds_amount"
            )

        if not PaymentService._validate_transition(payment.status, Payment.PaymentStatus.REFUNDED):
            logger.warning(f"Refund rejected: payment {payment.id} is {payment.status}")
            raise InvalidOperation(f"Cannot refund {payment.status} payment", code="invalid_transition")

        strategy = PaymentStrategyFactory.get_strategy(payment.payment_method)
        strategy.refund(payment, refund_amount, refund_reason)

        payment.is_refunded = True
        payment.refund_amount = refund_amount
        payment.refund_reason = refund_reason or ""
        payment.refunded_by = refunded_by or ""
        payment.refunded_at = timezone.now()
        try:
            PaymentService._transition_payment_status(
                payment,
                Payment.PaymentStatus.REFUNDED,
                update_fields=[
                    "is_refunded", "refund_amount", "refund_reason",
                    "refunded_by", "refunded_at", "refund_transaction_id",
                ],
            )
        except DatabaseError as e:
            # Money may already be back on the card; reconcile by hand from this line
            logger.error(
                f"Refund of {refund_amount} for payment {payment.id} was not recorded "
                f"(processor refund {payment.refund_transaction_id or 'none'}): {e}"
            )
            raise

        logger.info(f"Payment {payment.id} refunded {refund_amount} of {payment.amount}")
        PaymentService._emit_on_commit(payment_refunded, payment)
        return payment

    @staticmethod
    def get_payment(payment_id) -> Payment:
        try:
            return Payment.objects.select_related("order").get(id=payment_id)
        except (Payment.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Payment", payment_id)

    @staticmethod
    def get_payments_by_order(order_id):
        order = OrderService.get_order(order_id)
        return Payment.objects.filter(order=order).order_by("created_at")

    @staticmethod
    def get_payments_by_venue(venue):
        return Payment.objects.filter(venue=venue).select_related("order").order_by("-created_at")

    @staticmethod
    def get_total_paid_amount(order_id) -> Decimal:
        """
        Sum of amount + tip over the order's completed payments.

        Any refunded payment, including a partially refunded one, is left
        out entirely.
        """
        payments = PaymentService.get_payments_by_order(order_id).filter(
            status=Payment.PaymentStatus.COMPLETED, is_refunded=False
        )
        return sum_amounts(payment.amount + payment.tip_amount for payment in payments)

    @staticmethod
    def is_order_fully_paid(order_id) -> bool:
        order = OrderService.get_order(order_id)
        return PaymentService.get_total_paid_amount(order.id) >= order.total

    @staticmethod
    def get_payment_summary(order_id) -> dict:
        order = OrderService.get_order(order_id)
        total_paid = PaymentService.get_total_paid_amount(order.id)
        balance_due = order.total - total_paid
        return {
            "order_id": order.id,
            "order_total": order.total,
            "total_paid": total_paid,
            "balance_due": balance_due if balance_due > 0 else ZERO,
            "is_fully_paid": total_paid >= order.total,
            "payment_count": Payment.objects.filter(order=order).count(),
        }
