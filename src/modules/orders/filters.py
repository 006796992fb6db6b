import django_filters

from modules.orders.models import OrderHeader


class OrderFilter(django_filters.FilterSet):
    """Date and total ranges; the ``status`` tab filter is applied by the service."""

    order_status = django_filters.CharFilter(field_name="order_status", lookup_expr="iexact")
    payment_status = django_filters.CharFilter(
        field_name="payment_status", lookup_expr="iexact"
    )
    start_date = django_filters.DateFilter(field_name="order_date", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="order_date", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="order_total", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="order_total", lookup_expr="lte")

    class Meta:
        model = OrderHeader
        fields = [
            "order_status",
            "payment_status",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]
