"""
Hourly QC evaluation and final QC release rules
"""
import logging
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from backend.production.models import REJECTION_FIELDS
from .models import BINARY_CHECKS, DimensionTolerance, HourlyQCCheck, QCRecord, QCFinalReport

logger = logging.getLogger(__name__)

PASSING_BINARY_STATUSES = ('ok', 'na')
PASSING_QC_RESULTS = ('pass', 'waived')
REQUIRED_QC_TYPES = ('incoming', 'first_piece', 'final')
MIN_WAIVER_REASON_LENGTH = 20


def latest_tolerance(item_code, operation):
    return (
        DimensionTolerance.objects.filter(item_code=item_code, operation=operation)
        .order_by('-created_at', '-id')
        .first()
    )


def is_within_tolerance(value, minimum, maximum):
    return float(minimum) <= value <= float(maximum)


def evaluate_measurements(tolerance_dimensions, measurements):
    """
    Check measured values against the tolerance definition.

    Every defined dimension is evaluated; a dimension with no measured value counts as 0.
    Returns (dimensions_data, out_of_tolerance_names).
    """
    dimensions_data = {}
    out_of_tolerance = []
    for dim_id, spec in tolerance_dimensions.items():
        raw = measurements.get(dim_id)
        if raw is None or raw == '':
            value = 0.0
        else:
            try:
                value = float(raw)
            except (TypeError, ValueError):
                raise BusinessRuleError(f"Invalid measurement for {spec.get('name', dim_id)}", field='dimensions')
        dimensions_data[dim_id] = value
        if not is_within_tolerance(value, spec.get('min', 0), spec.get('max', 0)):
            out_of_tolerance.append(spec.get('name', dim_id))
    return dimensions_data, out_of_tolerance


def has_binary_failure(binary_checks):
    """binary_checks: {check: {'applicable': bool, 'status': str}}. Applicable checks must be ok or na."""
    for check in BINARY_CHECKS:
        entry = binary_checks.get(check) or {}
        if entry.get('applicable') and entry.get('status') not in PASSING_BINARY_STATUSES:
            return True
    return False


def record_hourly_check(work_order, machine, operation, measurements, binary_checks, operator=None, remarks=None):
    """Evaluate and store an hourly QC check"""
    tolerance = latest_tolerance(work_order.item_code, operation)
    if not tolerance:
        raise BusinessRuleError('No tolerances defined for this operation')

    dimensions_data, out_of_tolerance = evaluate_measurements(tolerance.dimensions, measurements or {})
    binary_failed = has_binary_failure(binary_checks or {})

    fields = {}
    for check in BINARY_CHECKS:
        entry = (binary_checks or {}).get(check) or {}
        applicable = bool(entry.get('applicable'))
        fields[f'{check}_applicable'] = applicable
        fields[f'{check}_status'] = entry.get('status') if applicable else None

    check = HourlyQCCheck.objects.create(
        work_order=work_order,
        machine=machine,
        operator=operator,
        operation=operation,
        dimensions=dimensions_data,
        status='pass' if not out_of_tolerance and not binary_failed else 'fail',
        out_of_tolerance_dimensions=out_of_tolerance or None,
        remarks=remarks or None,
        **fields
    )
    if check.status == 'fail':
        logger.info(f"Hourly QC failed for {work_order.wo_number} op {operation}: {out_of_tolerance}")
    return check


def production_summary(work_order):
    """Totals and rejection breakdown from the daily production logs"""
    aggregates = work_order.production_logs.aggregate(
        produced=Sum('actual_quantity'),
        rejected=Sum('total_rejection_quantity'),
        rework=Sum('rework_quantity'),
        ok=Sum('ok_quantity'),
        **{field: Sum(field) for field, _ in REJECTION_FIELDS}
    )
    breakdown = {}
    for field, label in REJECTION_FIELDS:
        count = aggregates.get(field) or 0
        if count > 0:
            breakdown[label] = count
    return {
        'total_produced': aggregates['produced'] or 0,
        'total_rejected': aggregates['rejected'] or 0,
        'total_rework': aggregates['rework'] or 0,
        'total_ok': aggregates['ok'] or 0,
        'rejection_breakdown': breakdown,
    }


def hourly_dimension_stats(work_order):
    """Average, min, max and count of each measured dimension, per operation"""
    stats = {}
    for check in work_order.hourly_qc_checks.all():
        for dim, value in (check.dimensions or {}).items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            stats.setdefault((check.operation, dim), []).append(value)

    return [
        {
            'operation': operation,
            'dimension': dim,
            'avg': sum(values) / len(values),
            'min': min(values),
            'max': max(values),
            'count': len(values),
        }
        for (operation, dim), values in sorted(stats.items())
    ]


def release_checklist(work_order, summary=None):
    """Conditions that must all hold before a work order can be quality released"""
    records = list(work_order.qc_records.all())
    qc_types = {record.qc_type for record in records}
    summary = summary or production_summary(work_order)

    checklist = {
        'all_qc_passed': all(record.result in PASSING_QC_RESULTS for record in records),
        'has_incoming_qc': 'incoming' in qc_types,
        'has_first_piece_qc': 'first_piece' in qc_types,
        'has_final_qc': 'final' in qc_types,
        'has_hourly_qc': work_order.hourly_qc_checks.exists(),
        'has_ok_quantity': summary['total_ok'] > 0,
        'has_final_report': work_order.final_qc_reports.exists(),
    }
    checklist['can_release'] = all(checklist.values())
    return checklist


def final_qc_summary(work_order):
    summary = production_summary(work_order)
    records = work_order.qc_records.all().order_by('created_at')
    return {
        'work_order': {
            'id': work_order.id,
            'wo_number': work_order.wo_number,
            'item_code': work_order.item_code,
            'customer_name': work_order.customer_name,
            'quantity': work_order.quantity,
            'quality_released': work_order.quality_released,
            'final_qc_result': work_order.final_qc_result,
            'qc_final_status': work_order.qc_final_status,
            'qc_final_remarks': work_order.qc_final_remarks,
            'sampling_plan_reference': work_order.sampling_plan_reference,
            'dispatch_allowed': work_order.dispatch_allowed,
        },
        'production': summary,
        'hourly_qc_count': work_order.hourly_qc_checks.count(),
        'hourly_dimension_stats': hourly_dimension_stats(work_order),
        'qc_records': [
            {'qc_id': r.qc_id, 'qc_type': r.qc_type, 'result': r.result, 'qc_date': r.qc_date}
            for r in records
        ],
        'final_reports': work_order.final_qc_reports.count(),
        'checklist': release_checklist(work_order, summary),
    }


def _snapshot(work_order):
    return {
        'quality_released': work_order.quality_released,
        'final_qc_result': work_order.final_qc_result,
        'qc_final_status': work_order.qc_final_status,
        'current_stage': work_order.current_stage,
        'dispatch_allowed': work_order.dispatch_allowed,
    }


@transaction.atomic
def release_work_order(work_order, user, request=None, remarks='', sampling_plan_reference=None):
    checklist = release_checklist(work_order)
    if not checklist['can_release']:
        missing = [key for key, ok in checklist.items() if key != 'can_release' and not ok]
        raise BusinessRuleError(f"Work order cannot be released: {', '.join(missing)}")

    old_data = _snapshot(work_order)
    work_order.quality_released = True
    work_order.quality_released_at = timezone.now()
    work_order.quality_released_by = user
    work_order.final_qc_result = 'passed'
    work_order.qc_final_status = 'passed'
    work_order.qc_final_remarks = remarks or ''
    work_order.current_stage = 'packing'
    work_order.dispatch_allowed = True
    if sampling_plan_reference is not None:
        work_order.sampling_plan_reference = sampling_plan_reference
    work_order.save()

    create_audit_log(
        request=request,
        user=user,
        action='FINAL_QC_RELEASE',
        model_name='WorkOrder',
        object_id=str(work_order.id),
        object_name=work_order.wo_number,
        changes={'old': old_data, 'new': _snapshot(work_order)},
    )
    return work_order


@transaction.atomic
def block_work_order(work_order, user, remarks, request=None):
    if not remarks or not remarks.strip():
        raise BusinessRuleError('Block reason is required', field='remarks')

    old_data = _snapshot(work_order)
    work_order.final_qc_result = 'blocked'
    work_order.qc_final_status = 'failed'
    work_order.qc_final_remarks = remarks.strip()
    work_order.dispatch_allowed = False
    work_order.save()

    create_audit_log(
        request=request,
        user=user,
        action='FINAL_QC_BLOCK',
        model_name='WorkOrder',
        object_id=str(work_order.id),
        object_name=work_order.wo_number,
        changes={'old': old_data, 'new': _snapshot(work_order), 'remarks': work_order.qc_final_remarks},
    )
    return work_order


@transaction.atomic
def waive_work_order(work_order, user, reason, request=None, sampling_plan_reference=None):
    reason = (reason or '').strip()
    if len(reason) < MIN_WAIVER_REASON_LENGTH:
        raise BusinessRuleError(
            f'A detailed waiver reason (at least {MIN_WAIVER_REASON_LENGTH} characters) is required',
            field='reason'
        )

    old_data = _snapshot(work_order)
    work_order.quality_released = True
    work_order.quality_released_at = timezone.now()
    work_order.quality_released_by = user
    work_order.sampling_plan_reference = sampling_plan_reference or work_order.sampling_plan_reference or 'WAIVED'
    work_order.final_qc_result = 'waived'
    work_order.qc_final_status = 'waived'
    work_order.qc_final_remarks = f'ADMIN WAIVER: {reason}'
    work_order.dispatch_allowed = True
    work_order.save()

    create_audit_log(
        request=request,
        user=user,
        action='FINAL_QC_ADMIN_WAIVER',
        model_name='WorkOrder',
        object_id=str(work_order.id),
        object_name=work_order.wo_number,
        changes={
            'old': old_data,
            'new': _snapshot(work_order),
            'waiver_reason': reason,
            'waived_at': work_order.quality_released_at.isoformat(),
        },
    )
    logger.warning(f"Final QC waived for {work_order.wo_number} by {user.username}")
    return work_order
