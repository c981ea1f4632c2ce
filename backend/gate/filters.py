import django_filters
from django.db.models import Q
from .models import GateEntry


class GateEntryFilter(django_filters.FilterSet):
    direction = django_filters.ChoiceFilter(choices=GateEntry.DIRECTION_CHOICES)
    material_type = django_filters.ChoiceFilter(choices=GateEntry.MATERIAL_TYPE_CHOICES)
    date_from = django_filters.DateFilter(field_name='entry_date', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='entry_date', lookup_expr='date__lte')
    work_order = django_filters.NumberFilter(field_name='work_order_id')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = GateEntry
        fields = ['direction', 'material_type', 'qc_status', 'work_order']

    def filter_search(self, queryset, name, value):
        """Entry number, challan, heat number, vehicle or party name"""
        if not value:
            return queryset
        return queryset.filter(
            Q(gate_entry_no__icontains=value) |
            Q(challan_no__icontains=value) |
            Q(heat_no__icontains=value) |
            Q(vehicle_no__icontains=value) |
            Q(supplier_name__icontains=value) |
            Q(partner__name__icontains=value) |
            Q(customer__customer_name__icontains=value)
        )
