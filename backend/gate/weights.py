"""
Tare, net weight and piece estimates for gate entries
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

# Standard packaging with its fixed weight per unit (kg)
PACKAGING_OPTIONS = {
    'NONE': {'label': 'None / N/A', 'weight': Decimal('0')},
    'CRATE_1_3': {'label': 'Crate – 1.3 kg', 'weight': Decimal('1.3')},
    'CRATE_1_2': {'label': 'Crate – 1.2 kg', 'weight': Decimal('1.2')},
    'CRATE_1_1': {'label': 'Crate – 1.1 kg', 'weight': Decimal('1.1')},
    'CRATE_0_7': {'label': 'Crate – 0.7 kg', 'weight': Decimal('0.7')},
    'BAG_0_10': {'label': 'Bag – 0.10 kg', 'weight': Decimal('0.10')},
    'BAG_0_075': {'label': 'Bag – 0.075 kg', 'weight': Decimal('0.075')},
}

PACKAGING_CHOICES = [(code, option['label']) for code, option in PACKAGING_OPTIONS.items()]

WEIGHT_QUANTUM = Decimal('0.001')


def to_decimal(value, default=Decimal('0')):
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def calculate_tare(packaging_rows, manual_tare=None):
    """Sum of weight x count over the packaging rows. A manual tare wins when given."""
    if manual_tare is not None and manual_tare != '':
        return to_decimal(manual_tare).quantize(WEIGHT_QUANTUM)
    total = Decimal('0')
    for row in packaging_rows or []:
        option = PACKAGING_OPTIONS.get(row.get('type'), PACKAGING_OPTIONS['NONE'])
        total += option['weight'] * int(row.get('count') or 0)
    return total.quantize(WEIGHT_QUANTUM)


def calculate_net(gross_weight, tare_weight):
    net = to_decimal(gross_weight) - to_decimal(tare_weight)
    return max(Decimal('0'), net).quantize(WEIGHT_QUANTUM)


def packaging_count(packaging_rows):
    return sum(int(row.get('count') or 0) for row in packaging_rows or [] if row.get('type') != 'NONE')


def average_weight_per_pc(sample_weight, sample_count):
    sample_weight = to_decimal(sample_weight)
    sample_count = int(sample_count or 0)
    if sample_weight <= 0 or sample_count <= 0:
        return None
    return sample_weight / sample_count


def estimate_pcs(net_weight, sample_weight, sample_count):
    """
    Pieces in net_weight from a counted sample, rounded half up.
    None when the sample is incomplete.
    """
    avg = average_weight_per_pc(sample_weight, sample_count)
    net_weight = to_decimal(net_weight)
    if avg is None or net_weight <= 0:
        return None
    return int((net_weight / avg).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def round_half_up(value):
    return int(to_decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_entry_weights(gross_weight, packaging_rows=None, manual_tare=None,
                            sample_weight=None, sample_count=None):
    """Everything the gate form shows for a draft entry"""
    tare = calculate_tare(packaging_rows, manual_tare)
    net = calculate_net(gross_weight, tare)
    avg = average_weight_per_pc(sample_weight, sample_count)
    return {
        'gross_weight_kg': to_decimal(gross_weight).quantize(WEIGHT_QUANTUM),
        'tare_weight_kg': tare,
        'net_weight_kg': net,
        'packaging_count': packaging_count(packaging_rows),
        'avg_weight_per_pc': avg.quantize(Decimal('0.000001')) if avg is not None else None,
        'estimated_pcs': estimate_pcs(net, sample_weight, sample_count),
    }
