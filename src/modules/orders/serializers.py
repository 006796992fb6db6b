"""Order DRF serializers (read side).

Writes are validated by the pydantic DTOs in ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import OrderDetail, OrderHeader, OrderStatusHistory


class OrderDetailSerializer(serializers.ModelSerializer):
    """Line item with the product as it is today and the price as it was."""

    product_id = serializers.UUIDField(read_only=True)
    product_title = serializers.CharField(source="product.title", read_only=True)
    product_isbn = serializers.CharField(source="product.isbn", read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderDetail
        fields = [
            "id",
            "product_id",
            "product_title",
            "product_isbn",
            "count",
            "price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    changed_by = serializers.CharField(source="user.username", default=None, read_only=True)

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "old_payment_status",
            "payment_status",
            "changed_by",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


HEADER_FIELDS = [
    "id",
    "user_id",
    "order_date",
    "shipping_date",
    "order_total",
    "order_status",
    "payment_status",
    "tracking_number",
    "carrier",
    "payment_date",
    "payment_due_date",
    "name",
    "phone_number",
    "street_address",
    "city",
    "state",
    "postal_code",
]


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the order list (no nested relations)."""

    user_id = serializers.UUIDField(read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = OrderHeader
        fields = HEADER_FIELDS + ["email"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order header with its details and status history."""

    user_id = serializers.UUIDField(read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    details = OrderDetailSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = OrderHeader
        fields = HEADER_FIELDS + ["email", "session_id", "details", "status_history"]
        read_only_fields = fields
