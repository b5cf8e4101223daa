import logging

from django.core.exceptions import ValidationError as DjangoValidationError

from core_backend.exceptions import NotFound

from .models import MenuItem, Modifier

logger = logging.getLogger(__name__)


class MenuLookupService:
    """
    Read-only lookups into the menu catalog, scoped to the current venue.
    """

    @staticmethod
    def get_menu_item_price(menu_item_id) -> dict:
        """
        Returns:
            dict: {'name': str, 'price': Decimal}

        Raises:
            NotFound: unknown id, another venue's item, or item unavailable
        """
        try:
            item = MenuItem.objects.get(id=menu_item_id, is_available=True)
        except (MenuItem.DoesNotExist, DjangoValidationError, ValueError):
            logger.warning(f"Menu item {menu_item_id} not found for current venue")
            raise NotFound("Menu item", menu_item_id)
        return {"name": item.name, "price": item.price}

    @staticmethod
    def get_modifier(modifier_id) -> dict:
        """
        Returns:
            dict: {'name': str, 'price_adjustment': Decimal}
        """
        try:
            modifier = Modifier.objects.get(id=modifier_id, is_available=True)
        except (Modifier.DoesNotExist, DjangoValidationError, ValueError):
            logger.warning(f"Modifier {modifier_id} not found for current venue")
            raise NotFound("Modifier", modifier_id)
        return {"name": modifier.name, "price_adjustment": modifier.price_adjustment}
