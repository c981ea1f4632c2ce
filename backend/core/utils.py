"""Utility functions for audit logging, settings lookup and document numbering"""
import logging
import re
import time

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .models import AuditLog, Setting

User = get_user_model()
logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, gate_in_raw_material, FINAL_QC_RELEASE, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., work order number)
        object_reference: Reference identifier (e.g., gate entry number, receipt number)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        # Savepoint: a failed insert must not poison the caller's transaction
        with transaction.atomic():
            return AuditLog.objects.create(
                user=audit_user if audit_user and audit_user.is_authenticated else None,
                action=action,
                model_name=model_name,
                object_id=str(object_id),
                object_name=object_name,
                object_reference=object_reference,
                changes=changes or {},
                ip_address=ip_address
            )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def get_setting(key, default=None, cast=str):
    """Read a runtime setting from the settings table, falling back to default"""
    try:
        value = Setting.objects.get(key=key).value
    except Setting.DoesNotExist:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning(f"Setting {key} has invalid value {value!r}, using default {default!r}")
        return default


def unique_timestamp_code(model, field, prefix):
    """
    Generate PREFIX-<epoch ms> (GIN-..., SHIP-...) that is not yet used in model.field.
    Bumps the timestamp until a free value is found.
    """
    token = int(time.time() * 1000)
    code = f"{prefix}-{token}"
    while model.objects.filter(**{field: code}).exists():
        token += 1
        code = f"{prefix}-{token}"
    return code


def save_with_unique_code(instance, field, prefix, attempts=5):
    """
    Assign a PREFIX-<epoch ms> code to instance.field and save it.

    Two requests can pick the same free code between the lookup and the insert.
    The insert runs in a savepoint so the loser gets a fresh code instead of
    breaking the surrounding transaction.
    """
    model = type(instance)
    for attempt in range(attempts):
        setattr(instance, field, unique_timestamp_code(model, field, prefix))
        try:
            with transaction.atomic():
                instance.save(force_insert=True)
            return instance
        except IntegrityError:
            if attempt == attempts - 1:
                raise
            logger.warning(f"{model.__name__}.{field} {getattr(instance, field)} already taken, retrying")
            instance.pk = None


def next_sequence_number(model, field, prefix, width=3):
    """
    Next number in a PREFIX-NNN sequence (INV-001, RCP-001, ...).

    Takes the highest numeric suffix among values shaped PREFIX-<digits>, so manual
    numbers such as INV-2025/A are ignored, then skips forward past any value
    that is already taken.
    """
    pattern = re.compile(rf'^{re.escape(prefix)}-(\d+)$')
    values = model.objects.filter(**{f'{field}__regex': rf'^{re.escape(prefix)}-[0-9]+$'}).values_list(field, flat=True)
    matches = (pattern.match(value) for value in values)
    next_number = max((int(match.group(1)) for match in matches if match), default=0) + 1

    number = f"{prefix}-{str(next_number).zfill(width)}"
    while model.objects.filter(**{field: number}).exists():
        next_number += 1
        number = f"{prefix}-{str(next_number).zfill(width)}"
    return number
