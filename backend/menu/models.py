import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from venues.managers import VenueManager


class MenuItem(models.Model):
    """
    Catalog entry consulted when a line is added to an order.

    The order engine only reads name and price from here and snapshots them
    onto the order line; later price changes never touch existing orders.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.CASCADE,
        related_name="menu_items",
    )
    name = models.CharField(max_length=200, help_text=_("Name of the menu item."))
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("The selling price of the menu item."),
    )
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["venue", "is_available"], name="menu_item_venue_avail_idx"),
        ]

    def __str__(self):
        return self.name


class Modifier(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.CASCADE,
        related_name="modifiers",
    )
    name = models.CharField(max_length=100)
    price_adjustment = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("The amount added to the item price when this modifier is chosen."),
    )
    is_available = models.BooleanField(default=True)

    objects = VenueManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} (+{self.price_adjustment})"
