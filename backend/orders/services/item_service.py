import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from core_backend.exceptions import NotFound, ValidationError
from core_backend.validators import (
    validate_non_negative_amount,
    validate_positive_amount,
    validate_positive_int,
)
from menu.services import MenuLookupService
from orders import lifecycle
from orders.calculators import calculate_item_total, calculate_modifier_total
from orders.models import Order, OrderItem, OrderItemModifier

logger = logging.getLogger(__name__)


def _clean_modifiers(modifiers, currency=None):
    """Validate modifier dicts, round prices to the currency and default quantity to 1."""
    cleaned = []
    for modifier in modifiers or []:
        name = (modifier.get("name") or "").strip()
        if not name:
            raise ValidationError("Modifier name is required", field="modifiers")
        cleaned.append({
            "modifier_id": modifier.get("modifier_id"),
            "name": name,
            "price": validate_non_negative_amount(
                modifier.get("price"), "modifier price", "Modifier price cannot be negative",
                currency=currency,
            ),
            "quantity": validate_positive_int(
                1 if modifier.get("quantity") is None else modifier.get("quantity"),
                "modifier quantity",
                "Modifier quantity must be a positive integer",
            ),
        })
    return cleaned


class OrderItemService:
    """Service for managing order items - adding, updating, removing."""

    @staticmethod
    def get_item(item_id) -> OrderItem:
        try:
            return OrderItem.objects.get(id=item_id)
        except (OrderItem.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Order item", item_id)

    @staticmethod
    @transaction.atomic
    def add_item(
        order_id,
        name: str,
        price,
        quantity: int = 1,
        menu_item_id=None,
        modifiers: list = None,
        notes: str = "",
    ) -> OrderItem:
        """
        Add a line to an open order and recompute the order totals.

        Args:
            order_id: Order to add to
            name: Item name snapshot
            price: Unit price snapshot (> 0)
            quantity: Positive integer
            menu_item_id: Optional catalog reference
            modifiers: List of dicts with name, price (>= 0), quantity (default 1)
                and optional modifier_id
            notes: Optional notes for the item

        Returns:
            OrderItem: The created order item
        """
        from orders.services.calculation_service import OrderCalculationService
        from orders.services.order_service import OrderService

        name = (name or "").strip()
        if not name:
            raise ValidationError("Item name is required", field="name")
        quantity = validate_positive_int(quantity, "quantity", "Quantity must be a positive integer")

        order = OrderService.get_order_for_update(order_id)
        lifecycle.ensure_items_mutable(order)

        # Snapshot prices at the venue currency's precision so the stored line adds up
        currency = order.venue.currency
        price = validate_positive_amount(price, "price", "Price must be greater than zero", currency=currency)
        modifiers = _clean_modifiers(modifiers, currency)

        modifier_total = calculate_modifier_total(modifiers)
        item = OrderItem.objects.create(
            venue=order.venue,
            order=order,
            menu_item_id=menu_item_id,
            name=name,
            price=price,
            quantity=quantity,
            modifier_total=modifier_total,
            total=calculate_item_total(price, quantity, modifier_total),
            notes=notes or "",
        )

        if modifiers:
            OrderItemModifier.objects.bulk_create([
                OrderItemModifier(
                    venue=order.venue,
                    order_item=item,
                    modifier_id=modifier["modifier_id"],
                    name=modifier["name"],
                    price=modifier["price"],
                    quantity=modifier["quantity"],
                )
                for modifier in modifiers
            ])

        OrderCalculationService.recalculate_order_totals(order)

        logger.info(
            f"Item {item.id} added to order {order.id}: {quantity} x {name} @ {price} "
            f"(+{modifier_total} modifiers)"
        )
        return item

    @staticmethod
    def add_menu_item(
        order_id,
        menu_item_id,
        quantity: int = 1,
        modifiers: list = None,
        notes: str = "",
    ) -> OrderItem:
        """
        Add a catalog item, snapshotting its current name and price.

        Args:
            modifiers: List of dicts with modifier_id and optional quantity
        """
        menu_item = MenuLookupService.get_menu_item_price(menu_item_id)

        resolved_modifiers = []
        for selection in modifiers or []:
            modifier = MenuLookupService.get_modifier(selection.get("modifier_id"))
            resolved_modifiers.append({
                "modifier_id": selection.get("modifier_id"),
                "name": modifier["name"],
                "price": modifier["price_adjustment"],
                "quantity": 1 if selection.get("quantity") is None else selection.get("quantity"),
            })

        return OrderItemService.add_item(
            order_id,
            name=menu_item["name"],
            price=menu_item["price"],
            quantity=quantity,
            menu_item_id=menu_item_id,
            modifiers=resolved_modifiers,
            notes=notes,
        )

    @staticmethod
    @transaction.atomic
    def update_item(item_id, quantity: int = None, notes: str = None, status: str = None) -> OrderItem:
        """
        Change only the supplied fields of a line on an open order.

        A quantity change recalculates the line total from the stored
        modifier_total; modifiers are not re-evaluated.
        """
        from orders.services.calculation_service import OrderCalculationService
        from orders.services.order_service import OrderService

        if quantity is not None:
            validate_positive_int(quantity, "quantity", "Quantity must be a positive integer")
        if status is not None and status not in OrderItem.ItemStatus.values:
            raise ValidationError(f"'{status}' is not a valid item status.", field="status")

        item = OrderItemService.get_item(item_id)
        order = OrderService.get_order_for_update(item.order_id)
        lifecycle.ensure_items_mutable(order)

        # Re-read under the order lock
        item = OrderItemService.get_item(item_id)

        update_fields = []
        if quantity is not None:
            item.quantity = quantity
            item.total = calculate_item_total(item.price, quantity, item.modifier_total)
            update_fields += ["quantity", "total"]
        if notes is not None:
            item.notes = notes
            update_fields.append("notes")
        if status is not None:
            item.status = status
            update_fields.append("status")

        if update_fields:
            item.save(update_fields=update_fields)
            OrderCalculationService.recalculate_order_totals(order)
            logger.info(f"Item {item.id} on order {order.id} updated: {', '.join(update_fields)}")

        return item

    @staticmethod
    @transaction.atomic
    def remove_item(item_id) -> Order:
        """
        Delete a line and its modifiers, then recompute the order totals.

        Returns:
            Order: The order with refreshed totals
        """
        from orders.services.calculation_service import OrderCalculationService
        from orders.services.order_service import OrderService

        item = OrderItemService.get_item(item_id)
        order = OrderService.get_order_for_update(item.order_id)
        lifecycle.ensure_items_mutable(order)

        item_name = item.name
        item.delete()

        OrderCalculationService.recalculate_order_totals(order)

        logger.info(f"Item {item_id} ({item_name}) removed from order {order.id}")
        return order
