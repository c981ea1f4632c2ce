import logging
from django.db import transaction
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log
from .downtime import DOWNTIME_CATEGORIES
from .models import MaintenanceLog

logger = logging.getLogger(__name__)


@transaction.atomic
def start_maintenance(machine, downtime_reason, start_time, end_time=None, remarks='', user=None, request=None):
    """Record a maintenance log and put the machine into maintenance"""
    if end_time and end_time < start_time:
        raise BusinessRuleError('End time cannot be before start time', field='end_time')

    log = MaintenanceLog.objects.create(
        machine=machine,
        downtime_reason=downtime_reason,
        start_time=start_time,
        end_time=end_time,
        remarks=remarks or '',
        logged_by=user,
    )
    machine.status = 'maintenance'
    machine.save(update_fields=['status', 'updated_at'])

    create_audit_log(
        request=request,
        user=user,
        action='maintenance_start',
        model_name='MaintenanceLog',
        object_id=str(log.id),
        object_name=machine.machine_id,
        changes={'downtime_reason': downtime_reason, 'start_time': start_time.isoformat()},
    )
    return log


@transaction.atomic
def end_maintenance(log, user=None, request=None):
    """Close an open maintenance log now. The machine goes back to idle once no other log on it is open."""
    if log.end_time is not None:
        raise BusinessRuleError('Maintenance log has already ended')

    log.end_time = timezone.now()
    log.save(update_fields=['end_time'])
    machine = log.machine
    if not machine.maintenance_logs.filter(end_time__isnull=True).exists():
        machine.status = 'idle'
        machine.save(update_fields=['status', 'updated_at'])
    else:
        logger.info(f"Machine {machine.machine_id} still has open maintenance logs, status left as {machine.status}")

    create_audit_log(
        request=request,
        user=user,
        action='maintenance_end',
        model_name='MaintenanceLog',
        object_id=str(log.id),
        object_name=machine.machine_id,
        changes={'end_time': log.end_time.isoformat(), 'duration_minutes': log.duration_minutes()},
    )
    return log


def downtime_summary(date_from=None, date_to=None, machine=None):
    """
    Total downtime minutes per category and per machine.
    Logs still open are counted up to now.
    """
    queryset = MaintenanceLog.objects.all().select_related('machine')
    if date_from:
        queryset = queryset.filter(start_time__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(start_time__date__lte=date_to)
    if machine:
        queryset = queryset.filter(machine_id=machine)

    now = timezone.now()
    by_category = {category: 0 for category in DOWNTIME_CATEGORIES}
    by_machine = {}
    total = 0
    count = 0
    for log in queryset:
        minutes = log.duration_minutes(until=now)
        total += minutes
        count += 1
        by_category[log.category] = by_category.get(log.category, 0) + minutes
        entry = by_machine.setdefault(log.machine_id, {
            'machine': log.machine_id,
            'machine_code': log.machine.machine_id,
            'machine_name': log.machine.name,
            'minutes': 0,
            'events': 0,
        })
        entry['minutes'] += minutes
        entry['events'] += 1

    return {
        'total_minutes': total,
        'total_events': count,
        'by_category': [{'category': k, 'minutes': v} for k, v in by_category.items()],
        'by_machine': sorted(by_machine.values(), key=lambda m: m['minutes'], reverse=True),
    }
