"""
Cache invalidation signals
Invalidate cached finance figures when invoices, payments or receipts change
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_finance_dashboard_cache_on_commit

logger = logging.getLogger(__name__)

FINANCE_MODELS = ['Invoice', 'InvoiceItem', 'Payment', 'CustomerReceipt', 'ReceiptAllocation']

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk writes (e.g. an invoice with many lines).
    Remember to manually invalidate cache after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete])
def invalidate_finance_cache(sender, instance, **kwargs):
    """Invalidate the finance dashboard when finance rows change"""
    if is_suspended():
        return

    if sender.__name__ in FINANCE_MODELS and sender._meta.app_label == 'finance':
        try:
            invalidate_finance_dashboard_cache_on_commit()
        except Exception as e:
            logger.warning(f"Error in invalidate_finance_cache signal: {e}")
