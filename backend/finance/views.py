import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.exceptions import BusinessRuleError
from backend.core.pagination import paginated_response
from backend.core.permissions import AREA_ROLES, IsAccountsRole, ROLE_ACCOUNTS, ROLE_CFO, user_has_role
from backend.core.utils import create_audit_log
from .models import Invoice, Payment, CustomerReceipt, ReceiptAllocation, SupplierPayment, TDSRecord
from .serializers import (
    InvoiceSerializer, InvoiceListSerializer, InvoiceCreateSerializer, InvoiceUpdateSerializer,
    PaymentSerializer, CustomerReceiptSerializer, AllocateSerializer, SupplierPaymentSerializer,
    TDSRecordSerializer, TDSStatusSerializer, VoidSerializer,
)
from .services import (
    create_invoice, issue_invoice, void_invoice, record_payment, create_receipt, allocate_receipt,
    auto_allocate_receipt, remove_allocation, cancel_receipt, record_supplier_payment,
    mark_overdue_invoices, open_invoices_for_customer,
)

logger = logging.getLogger(__name__)


def _can_view_finance(user):
    return user_has_role(user, *AREA_ROLES['can_access_finance'])


def _can_edit_finance(user):
    return user_has_role(user, ROLE_ACCOUNTS, ROLE_CFO)


def _forbidden(message='Only Accounts users can perform this action.'):
    return Response({'error': message}, status=status.HTTP_403_FORBIDDEN)


def _bad_request(error):
    return Response(error.as_response_data(), status=status.HTTP_400_BAD_REQUEST)


# Invoice views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_list_create(request):
    """
    GET: invoices filtered by status (comma separated), customer, date_from, date_to, search.
    POST: create a draft invoice with its items.
    """
    if request.method == 'GET':
        if not _can_view_finance(request.user):
            return _forbidden('You do not have access to finance.')
        queryset = Invoice.objects.all().select_related('customer')
        invoice_status = request.query_params.get('status', None)
        customer = request.query_params.get('customer', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)
        search = request.query_params.get('search', None)
        if invoice_status:
            queryset = queryset.filter(status__in=[s.strip() for s in invoice_status.split(',') if s.strip()])
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if date_from:
            queryset = queryset.filter(invoice_date__gte=date_from)
        if date_to:
            queryset = queryset.filter(invoice_date__lte=date_to)
        if search:
            queryset = queryset.filter(
                Q(invoice_no__icontains=search) | Q(customer__customer_name__icontains=search)
            )
        return paginated_response(request, queryset.order_by('-invoice_date', '-id'), InvoiceListSerializer)

    if not _can_edit_finance(request.user):
        return _forbidden()
    serializer = InvoiceCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    customer = data.pop('customer')
    items = data.pop('items')
    if not data.get('invoice_no'):
        data.pop('invoice_no', None)
    try:
        invoice = create_invoice(customer, items, user=request.user, request=request, **data)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve an invoice with items, payments and allocations, or update its follow-up fields"""
    invoice = get_object_or_404(
        Invoice.objects.select_related('customer', 'work_order').prefetch_related('items', 'payments', 'allocations'),
        pk=pk,
    )
    if request.method == 'GET':
        if not _can_view_finance(request.user):
            return _forbidden('You do not have access to finance.')
        return Response(InvoiceSerializer(invoice).data)

    if not _can_edit_finance(request.user):
        return _forbidden()
    serializer = InvoiceUpdateSerializer(invoice, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(InvoiceSerializer(invoice).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def invoice_issue(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk)
    try:
        invoice = issue_invoice(invoice, user=request.user, request=request)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(InvoiceSerializer(invoice).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def invoice_void(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk)
    serializer = VoidSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        invoice = void_invoice(invoice, user=request.user, request=request,
                               reason=serializer.validated_data.get('reason', ''))
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(InvoiceSerializer(invoice).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def invoice_mark_overdue(request):
    """Flag every issued or part-paid invoice past its due date"""
    count = mark_overdue_invoices(user=request.user, request=request)
    return Response({'updated': count})


# Payment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def payment_list_create(request):
    """List payments (filters: invoice, customer, date_from, date_to) or record a payment"""
    if request.method == 'GET':
        if not _can_view_finance(request.user):
            return _forbidden('You do not have access to finance.')
        queryset = Payment.objects.all().select_related('invoice', 'invoice__customer')
        invoice = request.query_params.get('invoice', None)
        customer = request.query_params.get('customer', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)
        if invoice:
            queryset = queryset.filter(invoice_id=invoice)
        if customer:
            queryset = queryset.filter(invoice__customer_id=customer)
        if date_from:
            queryset = queryset.filter(payment_date__gte=date_from)
        if date_to:
            queryset = queryset.filter(payment_date__lte=date_to)
        return paginated_response(request, queryset.order_by('-payment_date', '-id'), PaymentSerializer)

    if not _can_edit_finance(request.user):
        return _forbidden()
    serializer = PaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    invoice = data.pop('invoice')
    amount = data.pop('amount')
    try:
        payment = record_payment(invoice, amount, user=request.user, request=request, **data)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


# Receipt views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def receipt_list_create(request):
    """List customer receipts (filters: customer, status) or record a new receipt"""
    if request.method == 'GET':
        if not _can_view_finance(request.user):
            return _forbidden('You do not have access to finance.')
        queryset = CustomerReceipt.objects.all().select_related('customer').prefetch_related('allocations__invoice')
        customer = request.query_params.get('customer', None)
        receipt_status = request.query_params.get('status', None)
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if receipt_status:
            queryset = queryset.filter(status__in=[s.strip() for s in receipt_status.split(',') if s.strip()])
        return paginated_response(request, queryset.order_by('-receipt_date', '-id'), CustomerReceiptSerializer)

    if not _can_edit_finance(request.user):
        return _forbidden()
    serializer = CustomerReceiptSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    customer = data.pop('customer')
    total_amount = data.pop('total_amount')
    try:
        receipt = create_receipt(customer, total_amount, user=request.user, request=request, **data)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(CustomerReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def receipt_detail(request, pk):
    if not _can_view_finance(request.user):
        return _forbidden('You do not have access to finance.')
    receipt = get_object_or_404(CustomerReceipt.objects.select_related('customer'), pk=pk)
    return Response(CustomerReceiptSerializer(receipt).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def receipt_open_invoices(request, pk):
    """Invoices of the receipt's customer that still have a balance, oldest due first"""
    if not _can_view_finance(request.user):
        return _forbidden('You do not have access to finance.')
    receipt = get_object_or_404(CustomerReceipt, pk=pk)
    invoices = open_invoices_for_customer(receipt.customer).select_related('customer')
    return Response(InvoiceListSerializer(invoices, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def receipt_allocate(request, pk):
    """Allocate a receipt to invoices: {"allocations": [{"invoice": id, "amount": "100.00"}, ...]}"""
    receipt = get_object_or_404(CustomerReceipt, pk=pk)
    serializer = AllocateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        receipt = allocate_receipt(receipt, serializer.validated_data['allocations'], user=request.user, request=request)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(CustomerReceiptSerializer(receipt).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def receipt_auto_allocate(request, pk):
    receipt = get_object_or_404(CustomerReceipt, pk=pk)
    try:
        receipt = auto_allocate_receipt(receipt, user=request.user, request=request)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(CustomerReceiptSerializer(receipt).data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def receipt_allocation_delete(request, pk, allocation_id):
    allocation = get_object_or_404(ReceiptAllocation.objects.select_related('receipt', 'invoice'),
                                   pk=allocation_id, receipt_id=pk)
    receipt = remove_allocation(allocation, user=request.user, request=request)
    return Response(CustomerReceiptSerializer(receipt).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def receipt_cancel(request, pk):
    receipt = get_object_or_404(CustomerReceipt, pk=pk)
    try:
        receipt = cancel_receipt(receipt, user=request.user, request=request)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(CustomerReceiptSerializer(receipt).data)


# Supplier payments and TDS
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_payment_list_create(request):
    if request.method == 'GET':
        if not _can_view_finance(request.user):
            return _forbidden('You do not have access to finance.')
        queryset = SupplierPayment.objects.all().select_related('supplier')
        supplier = request.query_params.get('supplier', None)
        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        return paginated_response(request, queryset.order_by('-payment_date', '-id'), SupplierPaymentSerializer)

    if not _can_edit_finance(request.user):
        return _forbidden()
    serializer = SupplierPaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    supplier = data.pop('supplier')
    amount = data.pop('amount')
    try:
        payment = record_supplier_payment(supplier, amount, user=request.user, request=request, **data)
    except BusinessRuleError as e:
        return _bad_request(e)
    return Response(SupplierPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def tds_record_list(request):
    """TDS records filtered by financial_year, quarter, record_type and status"""
    if not _can_view_finance(request.user):
        return _forbidden('You do not have access to finance.')
    queryset = TDSRecord.objects.all().select_related('customer', 'supplier', 'receipt')
    for param in ('financial_year', 'quarter', 'record_type', 'status'):
        value = request.query_params.get(param, None)
        if value:
            queryset = queryset.filter(**{param: value})
    return paginated_response(request, queryset.order_by('-transaction_date', '-id'), TDSRecordSerializer)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def tds_record_status(request, pk):
    """Mark a TDS record filed or paid"""
    record = get_object_or_404(TDSRecord, pk=pk)
    serializer = TDSStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = record.status
    record.status = serializer.validated_data['status']
    record.save(update_fields=['status', 'updated_at'])
    create_audit_log(
        request=request,
        action='tds_status_update',
        model_name='TDSRecord',
        object_id=str(record.id),
        object_name=f"{record.financial_year} {record.quarter}",
        changes={'status': {'old': old_status, 'new': record.status}},
    )
    return Response(TDSRecordSerializer(record).data)
