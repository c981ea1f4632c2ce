"""
Invoice, payment and receipt operations.

Invoice paid amounts come from two sources: direct payments and receipt allocations.
Every operation that touches either recomputes the affected invoice and receipt totals
inside the same transaction.
"""
import logging
from datetime import timedelta
from decimal import Decimal
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from backend.core.cache_signals import suspend_cache_signals
from backend.core.cache_utils import invalidate_finance_dashboard_cache_on_commit
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log, get_setting, next_sequence_number
from .models import CustomerReceipt, Invoice, InvoiceItem, Payment, ReceiptAllocation, SupplierPayment, TDSRecord
from .tds import calculate_tds, get_entity_type, get_financial_year, get_quarter, get_tds_rate

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
DEFAULT_PAYMENT_TERMS_DAYS = 30
OPEN_INVOICE_STATUSES = ['issued', 'part_paid', 'overdue']


def default_due_date(customer, invoice_date):
    """Invoice date plus the customer's payment terms, or the configured default"""
    terms = customer.payment_terms_days
    if terms is None:
        terms = get_setting('finance.default_payment_terms_days', DEFAULT_PAYMENT_TERMS_DAYS, int)
    return invoice_date + timedelta(days=terms)


def recalculate_invoice(invoice):
    """Totals from the lines, paid amount from payments and allocations, then status"""
    items = invoice.items.aggregate(subtotal=Sum('amount'), gst=Sum('gst_amount'))
    invoice.subtotal = items['subtotal'] or ZERO
    invoice.gst_amount = items['gst'] or ZERO
    invoice.total_amount = invoice.subtotal + invoice.gst_amount

    paid = invoice.payments.aggregate(total=Sum('amount'))['total'] or ZERO
    allocated = invoice.allocations.aggregate(total=Sum('allocated_amount'))['total'] or ZERO
    invoice.paid_amount = paid + allocated
    invoice.balance_amount = invoice.total_amount - invoice.paid_amount

    if invoice.status not in ('draft', 'void'):
        if invoice.paid_amount > 0 and invoice.paid_amount >= invoice.total_amount:
            invoice.status = 'paid'
        elif invoice.paid_amount > 0:
            invoice.status = 'part_paid'
        elif invoice.status in ('paid', 'part_paid'):
            invoice.status = 'issued'

    invoice.save(update_fields=['subtotal', 'gst_amount', 'total_amount', 'paid_amount',
                                'balance_amount', 'status', 'updated_at'])
    return invoice


def recalculate_receipt(receipt):
    allocated = receipt.allocations.aggregate(total=Sum('allocated_amount'))['total'] or ZERO
    receipt.allocated_amount = allocated
    receipt.unallocated_amount = receipt.total_amount - allocated
    if receipt.status != 'cancelled':
        if allocated >= receipt.total_amount:
            receipt.status = 'fully_allocated'
        elif allocated > 0:
            receipt.status = 'partially_allocated'
        else:
            receipt.status = 'pending'
    receipt.save(update_fields=['allocated_amount', 'unallocated_amount', 'status', 'updated_at'])
    return receipt


@transaction.atomic
def create_invoice(customer, items, user=None, request=None, **fields):
    """Create an invoice with its lines. The number and due date are filled in when not given."""
    if not items:
        raise BusinessRuleError('An invoice needs at least one item', field='items')

    invoice_date = fields.pop('invoice_date', None) or timezone.localdate()
    due_date = fields.pop('due_date', None) or default_due_date(customer, invoice_date)
    gst_percent = fields.pop('gst_percent', None)

    with suspend_cache_signals():
        invoice = Invoice.objects.create(
            invoice_no=fields.pop('invoice_no', None) or next_sequence_number(Invoice, 'invoice_no', 'INV'),
            customer=customer,
            invoice_date=invoice_date,
            due_date=due_date,
            created_by=user,
            **({'gst_percent': gst_percent} if gst_percent is not None else {}),
            **fields,
        )
        for item in items:
            line = dict(item)
            line.setdefault('gst_percent', invoice.gst_percent)
            InvoiceItem.objects.create(invoice=invoice, **line)
        recalculate_invoice(invoice)
    invalidate_finance_dashboard_cache_on_commit()

    create_audit_log(
        request=request,
        user=user,
        action='invoice_create',
        model_name='Invoice',
        object_id=str(invoice.id),
        object_name=invoice.invoice_no,
        changes={'customer': customer.customer_name, 'total_amount': str(invoice.total_amount)},
    )
    return invoice


@transaction.atomic
def issue_invoice(invoice, user=None, request=None):
    if invoice.status != 'draft':
        raise BusinessRuleError(f'Only draft invoices can be issued (status is {invoice.status})')
    if invoice.total_amount <= 0:
        raise BusinessRuleError('Cannot issue an invoice with zero total')
    invoice.status = 'issued'
    invoice.save(update_fields=['status', 'updated_at'])
    create_audit_log(request=request, user=user, action='invoice_issue', model_name='Invoice',
                     object_id=str(invoice.id), object_name=invoice.invoice_no)
    return invoice


@transaction.atomic
def void_invoice(invoice, user=None, request=None, reason=''):
    if invoice.status == 'void':
        raise BusinessRuleError('Invoice is already void')
    if invoice.paid_amount > 0:
        raise BusinessRuleError('Cannot void an invoice that has payments or allocations')
    invoice.status = 'void'
    invoice.voided_at = timezone.now()
    invoice.voided_by = user
    invoice.save(update_fields=['status', 'voided_at', 'voided_by', 'updated_at'])
    create_audit_log(request=request, user=user, action='invoice_void', model_name='Invoice',
                     object_id=str(invoice.id), object_name=invoice.invoice_no, changes={'reason': reason})
    return invoice


@transaction.atomic
def record_payment(invoice, amount, user=None, request=None, **fields):
    """Direct payment against one invoice, limited to its outstanding balance"""
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    if invoice.status in ('draft', 'void'):
        raise BusinessRuleError(f'Cannot record a payment on a {invoice.status} invoice', field='invoice')
    if amount is None or amount <= 0:
        raise BusinessRuleError('Payment amount must be greater than zero', field='amount')
    if amount > invoice.balance_amount:
        raise BusinessRuleError(
            f'Payment of {amount} exceeds outstanding balance {invoice.balance_amount}', field='amount'
        )

    payment = Payment.objects.create(
        invoice=invoice,
        amount=amount,
        payment_date=fields.pop('payment_date', None) or timezone.localdate(),
        created_by=user,
        **fields,
    )
    recalculate_invoice(invoice)

    create_audit_log(
        request=request,
        user=user,
        action='payment_create',
        model_name='Payment',
        object_id=str(payment.id),
        object_name=invoice.invoice_no,
        object_reference=payment.reference or None,
        changes={'amount': str(amount), 'method': payment.method, 'invoice_status': invoice.status},
    )
    return payment


def _create_tds_record(record_type, gross_amount, pan, rate, transaction_date, user=None, **links):
    tds_amount, net_amount = calculate_tds(gross_amount, rate)
    return TDSRecord.objects.create(
        record_type=record_type,
        pan_number=(pan or '').strip().upper(),
        entity_type=get_entity_type(pan),
        tds_rate=rate,
        gross_amount=gross_amount,
        tds_amount=tds_amount,
        net_amount=net_amount,
        financial_year=get_financial_year(transaction_date),
        quarter=get_quarter(transaction_date),
        transaction_date=transaction_date,
        status='pending',
        created_by=user,
        **links,
    )


@transaction.atomic
def create_receipt(customer, total_amount, user=None, request=None, **fields):
    """
    Record money received from a customer.
    A receivable TDS record is raised unless the customer is an exporter or has no PAN.
    """
    if total_amount is None or total_amount <= 0:
        raise BusinessRuleError('Receipt amount must be greater than zero', field='total_amount')

    receipt = CustomerReceipt.objects.create(
        receipt_no=fields.pop('receipt_no', None) or next_sequence_number(CustomerReceipt, 'receipt_no', 'RCP'),
        customer=customer,
        receipt_date=fields.pop('receipt_date', None) or timezone.localdate(),
        total_amount=total_amount,
        unallocated_amount=total_amount,
        created_by=user,
        **fields,
    )

    if not customer.is_export_customer and customer.pan_number:
        rate = get_tds_rate(customer.pan_number, False)
        tds = _create_tds_record(
            'receivable', total_amount, customer.pan_number, rate, receipt.receipt_date,
            user=user, customer=customer, receipt=receipt,
        )
        receipt.tds_amount = tds.tds_amount
        receipt.save(update_fields=['tds_amount', 'updated_at'])

    create_audit_log(
        request=request,
        user=user,
        action='receipt_create',
        model_name='CustomerReceipt',
        object_id=str(receipt.id),
        object_name=receipt.receipt_no,
        object_reference=receipt.reference or None,
        changes={'customer': customer.customer_name, 'total_amount': str(total_amount),
                 'tds_amount': str(receipt.tds_amount)},
    )
    return receipt


def open_invoices_for_customer(customer):
    """Invoices a receipt can be allocated to, oldest due first"""
    return Invoice.objects.filter(
        customer=customer, status__in=OPEN_INVOICE_STATUSES, balance_amount__gt=0
    ).order_by('due_date', 'id')


def _apply_allocations(receipt, amounts_by_invoice, user):
    """amounts_by_invoice: list of (invoice, amount) with invoices already locked"""
    touched = []
    for invoice, amount in amounts_by_invoice:
        allocation, created = ReceiptAllocation.objects.get_or_create(
            receipt=receipt, invoice=invoice,
            defaults={'allocated_amount': amount, 'created_by': user},
        )
        if not created:
            allocation.allocated_amount += amount
            allocation.save(update_fields=['allocated_amount', 'updated_at'])
        touched.append(invoice)
    for invoice in touched:
        recalculate_invoice(invoice)
    recalculate_receipt(receipt)


@transaction.atomic
def allocate_receipt(receipt, lines, user=None, request=None):
    """
    Apply receipt money to invoices. lines: [{'invoice': Invoice, 'amount': Decimal}, ...]
    Each amount is capped at the invoice balance and the total may not exceed the unallocated amount.
    """
    receipt = CustomerReceipt.objects.select_for_update().get(pk=receipt.pk)
    if receipt.status == 'cancelled':
        raise BusinessRuleError('Cannot allocate a cancelled receipt')
    if not lines:
        raise BusinessRuleError('Please select at least one invoice', field='allocations')

    requested = {}
    for line in lines:
        amount = line['amount']
        if amount is None or amount <= 0:
            raise BusinessRuleError('Allocation amounts must be greater than zero', field='allocations')
        invoice_id = line['invoice'].pk
        requested[invoice_id] = requested.get(invoice_id, ZERO) + amount

    invoices = {inv.pk: inv for inv in Invoice.objects.select_for_update().filter(pk__in=requested.keys())}
    amounts_by_invoice = []
    for invoice_id, amount in requested.items():
        invoice = invoices[invoice_id]
        if invoice.customer_id != receipt.customer_id:
            raise BusinessRuleError(f'Invoice {invoice.invoice_no} belongs to a different customer', field='allocations')
        if invoice.status in ('void', 'draft'):
            raise BusinessRuleError(f'Cannot allocate to a {invoice.status} invoice ({invoice.invoice_no})', field='allocations')
        capped = min(amount, invoice.balance_amount)
        if capped > 0:
            amounts_by_invoice.append((invoice, capped))

    total = sum((amount for _, amount in amounts_by_invoice), ZERO)
    if total > receipt.unallocated_amount:
        raise BusinessRuleError('Total allocation exceeds unallocated amount', field='allocations')
    if total <= 0:
        raise BusinessRuleError('Selected invoices have no outstanding balance', field='allocations')

    _apply_allocations(receipt, amounts_by_invoice, user)

    create_audit_log(
        request=request,
        user=user,
        action='receipt_allocate',
        model_name='CustomerReceipt',
        object_id=str(receipt.id),
        object_name=receipt.receipt_no,
        changes={'allocations': {inv.invoice_no: str(amount) for inv, amount in amounts_by_invoice}},
    )
    return receipt


@transaction.atomic
def auto_allocate_receipt(receipt, user=None, request=None):
    """FIFO: oldest due invoices of the customer are settled first"""
    receipt = CustomerReceipt.objects.select_for_update().get(pk=receipt.pk)
    if receipt.status == 'cancelled':
        raise BusinessRuleError('Cannot allocate a cancelled receipt')
    remaining = receipt.unallocated_amount
    if remaining <= 0:
        raise BusinessRuleError('Receipt is already fully allocated')

    amounts_by_invoice = []
    for invoice in open_invoices_for_customer(receipt.customer).select_for_update():
        if remaining <= 0:
            break
        amount = min(remaining, invoice.balance_amount)
        amounts_by_invoice.append((invoice, amount))
        remaining -= amount

    if not amounts_by_invoice:
        raise BusinessRuleError('No open invoices for this customer')

    _apply_allocations(receipt, amounts_by_invoice, user)

    create_audit_log(
        request=request,
        user=user,
        action='receipt_auto_allocate',
        model_name='CustomerReceipt',
        object_id=str(receipt.id),
        object_name=receipt.receipt_no,
        changes={'allocations': {inv.invoice_no: str(amount) for inv, amount in amounts_by_invoice}},
    )
    return receipt


@transaction.atomic
def remove_allocation(allocation, user=None, request=None):
    receipt = allocation.receipt
    invoice = allocation.invoice
    amount = allocation.allocated_amount
    allocation.delete()
    recalculate_invoice(invoice)
    recalculate_receipt(receipt)
    create_audit_log(
        request=request,
        user=user,
        action='allocation_remove',
        model_name='CustomerReceipt',
        object_id=str(receipt.id),
        object_name=receipt.receipt_no,
        object_reference=invoice.invoice_no,
        changes={'amount': str(amount)},
    )
    return receipt


@transaction.atomic
def cancel_receipt(receipt, user=None, request=None):
    if receipt.status == 'cancelled':
        raise BusinessRuleError('Receipt is already cancelled')
    if receipt.allocations.exists():
        raise BusinessRuleError('Remove all allocations before cancelling the receipt')
    receipt.status = 'cancelled'
    receipt.save(update_fields=['status', 'updated_at'])
    create_audit_log(request=request, user=user, action='receipt_cancel', model_name='CustomerReceipt',
                     object_id=str(receipt.id), object_name=receipt.receipt_no)
    return receipt


@transaction.atomic
def record_supplier_payment(supplier, amount, user=None, request=None, **fields):
    """Pay a supplier. A payable TDS record is raised when the supplier has a PAN and the rate is not zero."""
    if amount is None or amount <= 0:
        raise BusinessRuleError('Payment amount must be greater than zero', field='amount')

    payment = SupplierPayment.objects.create(
        supplier=supplier,
        amount=amount,
        payment_date=fields.pop('payment_date', None) or timezone.localdate(),
        created_by=user,
        **fields,
    )
    if supplier.pan_number:
        rate = get_tds_rate(supplier.pan_number, False)
        if rate > 0:
            tds = _create_tds_record(
                'payable', amount, supplier.pan_number, rate, payment.payment_date,
                user=user, supplier=supplier, supplier_payment=payment,
            )
            payment.tds_amount = tds.tds_amount
            payment.save(update_fields=['tds_amount'])

    create_audit_log(
        request=request,
        user=user,
        action='supplier_payment_create',
        model_name='SupplierPayment',
        object_id=str(payment.id),
        object_name=supplier.name,
        object_reference=payment.reference_no or None,
        changes={'amount': str(amount), 'tds_amount': str(payment.tds_amount)},
    )
    return payment


def mark_overdue_invoices(today=None, user=None, request=None):
    """Flag issued and part-paid invoices past their due date with money outstanding. Returns the count."""
    today = today or timezone.localdate()
    queryset = Invoice.objects.filter(
        status__in=['issued', 'part_paid'], due_date__lt=today, balance_amount__gt=0
    )
    invoice_numbers = list(queryset.values_list('invoice_no', flat=True))
    count = queryset.update(status='overdue', updated_at=timezone.now())

    if count:
        # queryset.update() skips the post_save cache signals
        invalidate_finance_dashboard_cache_on_commit()
        logger.info(f"Marked {count} invoice(s) overdue as of {today}")
        create_audit_log(
            request=request,
            user=user,
            action='invoices_mark_overdue',
            model_name='Invoice',
            object_id=today.isoformat(),
            changes={'invoices': invoice_numbers},
        )
    return count
