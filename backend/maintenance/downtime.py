"""Downtime reason catalogue for maintenance logs"""

DOWNTIME_CATEGORIES = ['Material', 'Machine', 'Power', 'QC', 'Operator', 'Tooling', 'Other']

DOWNTIME_REASONS = [
    ('Material Not Available', 'Material'),
    ('Material Shortage', 'Material'),
    ('Wrong Material', 'Material'),
    ('Material Quality Issue', 'Material'),

    ('Machine Repair', 'Machine'),
    ('Machine Breakdown', 'Machine'),
    ('Machine Maintenance', 'Machine'),
    ('Machine Calibration', 'Machine'),
    ('Machine Warmup', 'Machine'),

    ('No Power', 'Power'),
    ('Power Fluctuation', 'Power'),
    ('Compressor Issue', 'Power'),

    ('Quality Problem', 'QC'),
    ('QC Hold', 'QC'),
    ('First Piece Approval', 'QC'),
    ('Inspection Delay', 'QC'),
    ('Rework', 'QC'),

    ('No Operator', 'Operator'),
    ('Operator Training', 'Operator'),
    ('Operator Shifted to Other Work', 'Operator'),
    ('Tea Break', 'Operator'),
    ('Lunch Break', 'Operator'),
    ('Operator Fatigue', 'Operator'),

    ('Tool Change', 'Tooling'),
    ('Tool Not Available', 'Tooling'),
    ('Tool Damage', 'Tooling'),
    ('Tool Setup', 'Tooling'),
    ('Insert Change', 'Tooling'),

    ('Job Setting', 'Other'),
    ('Setting Change', 'Other'),
    ('Cleaning', 'Other'),
    ('Program Upload', 'Other'),
    ('Shift Handover', 'Other'),
    ('Other', 'Other'),
]

REASON_CATEGORY = dict(DOWNTIME_REASONS)
DOWNTIME_REASON_CHOICES = [(reason, reason) for reason, _ in DOWNTIME_REASONS]


def get_category(reason):
    """Category of a downtime reason; unknown reasons count as Other"""
    return REASON_CATEGORY.get(reason, 'Other')


def reasons_by_category():
    grouped = {category: [] for category in DOWNTIME_CATEGORIES}
    for reason, category in DOWNTIME_REASONS:
        grouped[category].append(reason)
    return grouped
