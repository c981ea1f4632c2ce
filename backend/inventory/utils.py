from django.db.models import Sum
from .models import FinishedGoodsStock


def finished_goods_summary(item_codes=None):
    """
    Available finished goods per item code.
    Returns {item_code: {'available': int, 'reserved': int}} for lots with stock on hand.
    """
    queryset = FinishedGoodsStock.objects.filter(quantity_available__gt=0)
    if item_codes is not None:
        queryset = queryset.filter(item_code__in=item_codes)

    rows = queryset.values('item_code').annotate(
        available=Sum('quantity_available'),
        reserved=Sum('quantity_reserved'),
    ).order_by('item_code')
    return {
        row['item_code']: {'available': row['available'] or 0, 'reserved': row['reserved'] or 0}
        for row in rows
    }
