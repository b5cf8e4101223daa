import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orders.models import Order
from venues.managers import VenueManager


class Payment(models.Model):
    """
    One settlement attempt against an order. An order may carry many
    (split checks). A payment is refunded at most once.
    """

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class PaymentMethod(models.TextChoices):
        CARD = "card", _("Card")
        CASH = "cash", _("Cash")
        CHECK = "check", _("Check")
        GIFT_CARD = "gift_card", _("Gift Card")
        COMP = "comp", _("Comp")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        'venues.Venue',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    order = models.ForeignKey(
        Order, on_delete=models.PROTECT, related_name="payments"
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    tip_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    processed_by = models.CharField(
        max_length=64, blank=True, help_text=_("Staff member who took the payment.")
    )

    # --- Card / processor metadata (card payments only) ---
    card_last_four = models.CharField(
        max_length=4,
        blank=True,
        validators=[RegexValidator(r"^\d{4}$", "Card last four must be exactly 4 digits")],
    )
    card_brand = models.CharField(max_length=20, blank=True)
    processor = models.CharField(max_length=50, blank=True)
    processor_transaction_id = models.CharField(max_length=255, blank=True, db_index=True)
    processor_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    # --- Comp metadata (required when payment_method is comp) ---
    comp_reason = models.TextField(blank=True)
    comp_by = models.CharField(
        max_length=64, blank=True, help_text=_("Manager who approved the comp.")
    )

    # --- Refund ---
    is_refunded = models.BooleanField(default=False)
    refund_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    refund_reason = models.TextField(blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    refunded_by = models.CharField(max_length=64, blank=True)
    refund_transaction_id = models.CharField(max_length=255, blank=True)

    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now)

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["created_at"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        indexes = [
            models.Index(fields=["venue", "created_at"], name="payment_venue_created_idx"),
            models.Index(fields=["order", "status"], name="payment_order_status_idx"),
            models.Index(fields=["venue", "payment_method"], name="payment_venue_method_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(refund_amount__isnull=True) | models.Q(refund_amount__lte=models.F("amount")),
                name="payment_refund_lte_amount",
            ),
        ]

    def __str__(self):
        return f"Payment {self.id} - {self.payment_method} {self.amount} ({self.status})"

    @property
    def total_collected(self):
        return self.amount + self.tip_amount

    def save(self, *args, **kwargs):
        if not self._state.adding:
            self.updated_at = timezone.now()
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = set(update_fields) | {"updated_at"}
        super().save(*args, **kwargs)
