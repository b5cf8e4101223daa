import logging
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from venues.managers import VenueManager

logger = logging.getLogger(__name__)


class OrderNumberSequence(models.Model):
    """
    Per-venue, per-business-day counter backing Order.order_number.

    The row is locked with select_for_update() while it is incremented, so
    two terminals creating orders at the same time never read the same
    last_number.
    """
    venue = models.ForeignKey(
        'venues.Venue',
        on_delete=models.CASCADE,
        related_name='order_number_sequences'
    )
    business_date = models.DateField()
    last_number = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["venue", "business_date"],
                name="unique_order_sequence_per_venue_day",
            ),
        ]

    def __str__(self):
        return f"{self.venue_id} {self.business_date}: {self.last_number}"

    @classmethod
    def next_number(cls, venue, business_date):
        """
        Atomically reserve the next order number for venue + day.

        Raises IntegrityError if a concurrent transaction created the day's
        row first; Order.save() retries on that.
        """
        with transaction.atomic():
            sequence, _created = cls.objects.select_for_update().get_or_create(
                venue=venue, business_date=business_date
            )
            # Never fall behind numbers already on the books (imported or manual orders)
            highest = Order.all_objects.filter(
                venue=venue, business_date=business_date
            ).aggregate(highest=models.Max("order_number"))["highest"] or 0
            sequence.last_number = max(sequence.last_number, highest) + 1
            sequence.save(update_fields=["last_number"])
            return sequence.last_number


class Order(models.Model):
    # --- Status Fields ---
    class OrderStatus(models.TextChoices):
        OPEN = "open", _("Open")  # Tab is being built
        SENT = "sent", _("Sent")  # Fired to the kitchen
        COMPLETED = "completed", _("Completed")  # Settled and closed
        CANCELLED = "cancelled", _("Cancelled")  # Guest walked before settling
        VOIDED = "voided", _("Voided")  # Entered in error

    class OrderType(models.TextChoices):
        DINE_IN = "dine_in", _("Dine In")
        TAKEOUT = "takeout", _("Takeout")
        DELIVERY = "delivery", _("Delivery")
        BAR = "bar", _("Bar")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        'venues.Venue',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    order_number = models.PositiveIntegerField(null=True, blank=True, editable=False)
    business_date = models.DateField(
        editable=False,
        help_text=_("Venue-local date the order number sequence belongs to."),
    )

    server_id = models.CharField(
        max_length=64,
        blank=True,
        help_text=_("Staff member who owns the tab."),
    )
    table_number = models.CharField(max_length=20, blank=True)
    guest_count = models.PositiveIntegerField(default=1)
    order_type = models.CharField(
        max_length=10, choices=OrderType.choices, default=OrderType.DINE_IN
    )
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.OPEN
    )

    # --- Financial Fields ---
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tip = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now, editable=False)
    sent_at = models.DateTimeField(null=True, blank=True, editable=False)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        editable=False,
        db_index=True,
        help_text=_("Set only when the order is completed."),
    )

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        # Newest orders first, order_number as secondary sort for same timestamps
        ordering = ["-created_at", "-order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=['venue', 'status'], name='order_venue_stat_idx'),
            models.Index(fields=['venue', 'created_at'], name='order_venue_created_idx'),
            models.Index(fields=['venue', 'server_id'], name='order_venue_server_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["venue", "business_date", "order_number"],
                condition=models.Q(order_number__isnull=False),
                name="unique_order_number_per_venue_day",
            ),
        ]

    def __str__(self):
        return f"Order #{self.order_number or self.pk} ({self.order_type}) - {self.status}"

    @property
    def is_open(self):
        return self.status == self.OrderStatus.OPEN

    def save(self, *args, **kwargs):
        if not self.business_date:
            self.business_date = self._venue_local_date()

        # Generate order_number only if it's not already set
        if not self.order_number:
            max_retries = getattr(settings, "ORDER_NUMBER_MAX_RETRIES", 5)
            for attempt in range(1, max_retries + 1):
                try:
                    with transaction.atomic():
                        self.order_number = OrderNumberSequence.next_number(
                            self.venue, self.business_date
                        )
                        super().save(*args, **kwargs)
                    break
                except IntegrityError:
                    # Another terminal took the number or created the day's sequence
                    logger.warning(
                        f"Order number collision for venue {self.venue_id} on "
                        f"{self.business_date} (attempt {attempt}/{max_retries})"
                    )
                    self.order_number = None
                    continue
            else:
                raise IntegrityError(
                    "Failed to generate a unique order number after multiple retries."
                )
        else:
            if not self._state.adding:
                self.updated_at = timezone.now()
                update_fields = kwargs.get("update_fields")
                if update_fields is not None:
                    kwargs["update_fields"] = set(update_fields) | {"updated_at"}
            super().save(*args, **kwargs)

    def _venue_local_date(self):
        from zoneinfo import ZoneInfo

        tz_name = getattr(self.venue, "timezone", None) or "UTC"
        return timezone.localdate(self.created_at or timezone.now(), timezone=ZoneInfo(tz_name))


class OrderItem(models.Model):
    class ItemStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        SENT = "sent", _("Sent to Kitchen")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready for Pickup")
        DELIVERED = "delivered", _("Delivered")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        'venues.Venue',
        on_delete=models.CASCADE,
        related_name='order_items'
    )
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item_id = models.UUIDField(
        null=True,
        blank=True,
        help_text=_("Catalog reference. Name and price below are snapshots."),
    )

    # Snapshot taken when the line is added
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    quantity = models.PositiveIntegerField(default=1)
    modifier_total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(
        blank=True, help_text=_("Guest notes, e.g., 'no onions'")
    )
    status = models.CharField(
        max_length=10, choices=ItemStatus.choices, default=ItemStatus.PENDING
    )
    sent_to_kitchen_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['venue', 'order'], name='item_venue_order_idx'),
            models.Index(fields=['venue', 'status'], name='item_venue_stat_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.name} in Order {self.order.order_number}"


class OrderItemModifier(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        'venues.Venue',
        on_delete=models.CASCADE,
        related_name='order_item_modifiers'
    )
    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name='modifiers')
    modifier_id = models.UUIDField(null=True, blank=True)

    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        indexes = [
            models.Index(fields=['venue', 'order_item'], name='item_mod_venue_item_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.price} x {self.quantity})"
