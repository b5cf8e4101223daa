import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Venue(models.Model):
    """
    Root entity for venue isolation.
    Each restaurant location is a venue; every order, payment and menu row
    belongs to exactly one.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier accepted in the venue header (e.g., downtown-grill)"
    )

    tax_rate = models.DecimalField(
        max_digits=6,
        decimal_places=5,
        default=Decimal("0.08250"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Sales tax as a fraction (0.08250 = 8.25%)"
    )
    currency = models.CharField(max_length=3, default="USD")
    timezone = models.CharField(max_length=64, default="UTC")

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive venues cannot access the system"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'venues'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug'], name='venues_slug_4f0a1c_idx'),
            models.Index(fields=['is_active'], name='venues_is_acti_9d2e3b_idx'),
        ]

    def __str__(self):
        return self.name

    def get_effective_tax_rate(self):
        if self.tax_rate is None:
            return Decimal(str(settings.DEFAULT_TAX_RATE))
        return self.tax_rate
