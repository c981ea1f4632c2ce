import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count, Q, DecimalField
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal

from backend.core.cache_utils import FINANCE_DASHBOARD_CACHE_TTL, FINANCE_DASHBOARD_KEY_PREFIX, cached_query
from backend.core.permissions import AREA_ROLES, user_has_role
from backend.finance.models import Invoice, Payment, CustomerReceipt, TDSRecord
from backend.finance.tds import get_financial_year

logger = logging.getLogger('backend.reports')

OPEN_STATUSES = ['issued', 'part_paid', 'overdue']
AGING_BUCKETS = ['0-30', '31-60', '61-90', '90+']
QUARTERS = ['Q1', 'Q2', 'Q3', 'Q4']


def _forbidden():
    return Response({'error': 'You do not have access to finance reports.'}, status=status.HTTP_403_FORBIDDEN)


def _sum(queryset, field):
    return queryset.aggregate(total=Sum(field, output_field=DecimalField()))['total'] or Decimal('0.00')


def aging_bucket(days_overdue):
    if days_overdue <= 30:
        return '0-30'
    if days_overdue <= 60:
        return '31-60'
    if days_overdue <= 90:
        return '61-90'
    return '90+'


@cached_query(cache_ttl=FINANCE_DASHBOARD_CACHE_TTL, key_prefix=FINANCE_DASHBOARD_KEY_PREFIX)
def finance_dashboard_kpis(as_of):
    """Receivables, collections and DSO as of a date. Cached; finance writes invalidate it."""
    open_invoices = Invoice.objects.filter(status__in=OPEN_STATUSES)
    total_ar = _sum(open_invoices, 'balance_amount')
    overdue_ar = _sum(open_invoices.filter(status='overdue'), 'balance_amount')

    since_30 = as_of - timedelta(days=30)
    since_90 = as_of - timedelta(days=90)
    payments = Payment.objects.filter(payment_date__lte=as_of)
    receipts = CustomerReceipt.objects.filter(receipt_date__lte=as_of).exclude(status='cancelled')
    collected_30d = _sum(payments.filter(payment_date__gte=since_30), 'amount') + \
        _sum(receipts.filter(receipt_date__gte=since_30), 'total_amount')
    collected_90d = _sum(payments.filter(payment_date__gte=since_90), 'amount') + \
        _sum(receipts.filter(receipt_date__gte=since_90), 'total_amount')

    sales_90d = _sum(
        Invoice.objects.exclude(status__in=['void', 'draft']).filter(invoice_date__gte=since_90, invoice_date__lte=as_of),
        'total_amount',
    )
    dso = round(total_ar / (sales_90d / 90)) if sales_90d > 0 else 0

    status_counts = {s: 0 for s, _ in Invoice.STATUS_CHOICES}
    for row in Invoice.objects.values('status').annotate(count=Count('id')):
        status_counts[row['status']] = row['count']

    return {
        'as_of': as_of.isoformat(),
        'total_ar': float(total_ar),
        'overdue_ar': float(overdue_ar),
        'collected_30d': float(collected_30d),
        'collected_90d': float(collected_90d),
        'sales_90d': float(sales_90d),
        'dso': int(dso),
        'invoice_counts': status_counts,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def finance_dashboard(request):
    """Finance KPIs: AR, overdue AR, collections over 30/90 days, DSO, invoice counts by status"""
    if not user_has_role(request.user, *AREA_ROLES['can_access_finance']):
        return _forbidden()
    return Response(finance_dashboard_kpis(timezone.localdate()))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ar_aging(request):
    """Open invoices by due date, each with days overdue and an aging bucket"""
    if not user_has_role(request.user, *AREA_ROLES['can_access_finance']):
        return _forbidden()

    today = timezone.localdate()
    invoices = Invoice.objects.filter(status__in=OPEN_STATUSES).select_related('customer').order_by('due_date', 'id')
    customer_id = request.query_params.get('customer', None)
    if customer_id:
        invoices = invoices.filter(customer_id=customer_id)

    totals = {bucket: Decimal('0.00') for bucket in AGING_BUCKETS}
    rows = []
    for invoice in invoices:
        days_overdue = max(0, (today - invoice.due_date).days)
        bucket = aging_bucket(days_overdue)
        totals[bucket] += invoice.balance_amount
        rows.append({
            'id': invoice.id,
            'invoice_no': invoice.invoice_no,
            'customer': invoice.customer_id,
            'customer_name': invoice.customer.customer_name,
            'invoice_date': invoice.invoice_date.isoformat(),
            'due_date': invoice.due_date.isoformat(),
            'total_amount': float(invoice.total_amount),
            'balance_amount': float(invoice.balance_amount),
            'status': invoice.status,
            'days_overdue': days_overdue,
            'bucket': bucket,
        })

    return Response({
        'as_of': today.isoformat(),
        'invoices': rows,
        'buckets': {bucket: float(amount) for bucket, amount in totals.items()},
        'total_outstanding': float(sum(totals.values(), Decimal('0.00'))),
    })


def _period_range(period, today):
    first_of_month = today.replace(day=1)
    if period == 'last_month':
        end = first_of_month - timedelta(days=1)
        return end.replace(day=1), end
    return first_of_month, today


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def collections(request):
    """Payments in the current or last month, grouped by customer and by method"""
    if not user_has_role(request.user, *AREA_ROLES['can_access_finance']):
        return _forbidden()

    period = request.query_params.get('period', 'current_month')
    if period not in ('current_month', 'last_month'):
        return Response({'error': 'period must be current_month or last_month'}, status=status.HTTP_400_BAD_REQUEST)
    start, end = _period_range(period, timezone.localdate())

    payments = Payment.objects.filter(payment_date__gte=start, payment_date__lte=end)
    by_customer = payments.values(
        'invoice__customer_id', 'invoice__customer__customer_name'
    ).annotate(
        total=Sum('amount', output_field=DecimalField()),
        count=Count('id'),
    ).order_by('-total')
    by_method = payments.values('method').annotate(
        total=Sum('amount', output_field=DecimalField()),
        count=Count('id'),
    ).order_by('-total')

    return Response({
        'period': {'name': period, 'from': start.isoformat(), 'to': end.isoformat()},
        'total_collected': float(_sum(payments, 'amount')),
        'by_customer': [
            {
                'customer': row['invoice__customer_id'],
                'customer_name': row['invoice__customer__customer_name'],
                'total': float(row['total']),
                'count': row['count'],
            }
            for row in by_customer
        ],
        'by_method': [
            {'method': row['method'], 'total': float(row['total']), 'count': row['count']}
            for row in by_method
        ],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def tds_summary(request):
    """TDS receivable and payable for a financial year, with a per-quarter breakdown"""
    if not user_has_role(request.user, *AREA_ROLES['can_access_finance']):
        return _forbidden()

    financial_year = request.query_params.get('financial_year', None) or get_financial_year(timezone.localdate())
    quarter = request.query_params.get('quarter', None)
    records = TDSRecord.objects.filter(financial_year=financial_year)
    if quarter:
        if quarter not in QUARTERS:
            return Response({'error': 'quarter must be one of Q1, Q2, Q3, Q4'}, status=status.HTTP_400_BAD_REQUEST)
        records = records.filter(quarter=quarter)

    receivable = records.filter(record_type='receivable')
    payable = records.filter(record_type='payable')

    quarters = []
    for q in ([quarter] if quarter else QUARTERS):
        q_records = records.filter(quarter=q)
        counts = q_records.aggregate(
            count=Count('id'),
            pending=Count('id', filter=Q(status='pending')),
            filed=Count('id', filter=Q(status='filed')),
            paid=Count('id', filter=Q(status='paid')),
        )
        quarters.append({
            'quarter': q,
            'total_tds': float(_sum(q_records, 'tds_amount')),
            'receivable_tds': float(_sum(q_records.filter(record_type='receivable'), 'tds_amount')),
            'payable_tds': float(_sum(q_records.filter(record_type='payable'), 'tds_amount')),
            **counts,
        })

    return Response({
        'financial_year': financial_year,
        'quarter': quarter,
        'receivable': {
            'gross_amount': float(_sum(receivable, 'gross_amount')),
            'tds_amount': float(_sum(receivable, 'tds_amount')),
            'count': receivable.count(),
        },
        'payable': {
            'gross_amount': float(_sum(payable, 'gross_amount')),
            'tds_amount': float(_sum(payable, 'tds_amount')),
            'count': payable.count(),
        },
        'quarters': quarters,
    })
