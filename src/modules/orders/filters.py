import django_filters
from django.db.models import Q

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    id = django_filters.UUIDFilter(field_name="id")
    customer = django_filters.NumberFilter(field_name="customer_id")
    q = django_filters.CharFilter(method="filter_search")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = ["status", "id", "customer", "q", "start_date", "end_date"]

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(guest_name__icontains=value)
            | Q(guest_email__icontains=value)
            | Q(contact_phone__icontains=value)
            | Q(customer__email__icontains=value)
            | Q(delivery_address__icontains=value)
        )
