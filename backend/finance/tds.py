"""
TDS (tax deducted at source) rules for receipts and supplier payments.
The 4th character of a PAN identifies the holder's entity type.
"""
from decimal import Decimal, ROUND_HALF_UP

PAN_ENTITY_TYPES = {
    'P': 'Individual/Proprietorship',
    'C': 'Company',
    'H': 'HUF',
    'F': 'Firm',
    'A': 'AOP',
    'T': 'Trust',
    'B': 'BOI',
    'L': 'Local Authority',
    'J': 'Artificial Juridical Person',
    'G': 'Government',
}

TDS_RATE_INDIVIDUAL = Decimal('1')
TDS_RATE_OTHERS = Decimal('2')
TDS_RATE_EXPORT = Decimal('0')


def _pan_entity_char(pan):
    if not pan or len(pan.strip()) < 4:
        return None
    return pan.strip().upper()[3]


def get_tds_rate(pan, is_export=False):
    """0 for exports, 1 for individuals, 2 for everyone else (including a missing PAN)"""
    if is_export:
        return TDS_RATE_EXPORT
    entity_char = _pan_entity_char(pan)
    if entity_char is None:
        return TDS_RATE_OTHERS
    return TDS_RATE_INDIVIDUAL if entity_char == 'P' else TDS_RATE_OTHERS


def get_entity_type(pan):
    entity_char = _pan_entity_char(pan)
    if entity_char is None:
        return 'Unknown'
    return PAN_ENTITY_TYPES.get(entity_char, 'Other')


def get_financial_year(value):
    """Indian financial year (April to March), e.g. 2024-2025"""
    if value.month >= 4:
        return f"{value.year}-{value.year + 1}"
    return f"{value.year - 1}-{value.year}"


def get_quarter(value):
    if 4 <= value.month <= 6:
        return 'Q1'
    if 7 <= value.month <= 9:
        return 'Q2'
    if 10 <= value.month <= 12:
        return 'Q3'
    return 'Q4'


def calculate_tds(gross_amount, rate):
    """Returns (tds_amount, net_amount), rounded to paise"""
    gross_amount = Decimal(str(gross_amount))
    tds_amount = (gross_amount * Decimal(str(rate)) / Decimal('100')).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return tds_amount, gross_amount - tds_amount
