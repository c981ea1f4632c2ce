from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count, Max, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.pagination import paginated_response
from backend.core.permissions import ROLE_QUALITY, IsAdminRole, IsQualityRole, user_has_role
from backend.core.utils import save_with_unique_code
from backend.production.models import WorkOrder
from .models import DimensionTolerance, HourlyQCCheck, QCRecord, QCFinalReport
from .serializers import (
    DimensionToleranceSerializer, HourlyQCCheckSerializer, HourlyQCSubmitSerializer,
    QCRecordSerializer, QCFinalReportSerializer, ReleaseSerializer, BlockSerializer, WaiveSerializer
)
from .services import (
    latest_tolerance, record_hourly_check, final_qc_summary,
    release_work_order, block_work_order, waive_work_order
)

HOURLY_QC_WO_STATUSES = ['pending', 'in_progress', 'qc', 'packing']


def _quality_forbidden():
    return Response({'error': 'Only Quality users can perform this action.'}, status=status.HTTP_403_FORBIDDEN)


# Tolerance views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def tolerance_list_create(request):
    """
    GET with item_code and operation returns the tolerance in force for that operation.
    GET without them lists all tolerance rows. POST adds a new tolerance row (Quality role).
    """
    if request.method == 'GET':
        item_code = request.query_params.get('item_code', None)
        operation = request.query_params.get('operation', None)
        if item_code and operation:
            tolerance = latest_tolerance(item_code, operation)
            if not tolerance:
                return Response({'error': 'No tolerances defined for this operation'}, status=status.HTTP_404_NOT_FOUND)
            return Response(DimensionToleranceSerializer(tolerance).data)

        queryset = DimensionTolerance.objects.all()
        if item_code:
            queryset = queryset.filter(item_code=item_code)
        return paginated_response(request, queryset.order_by('item_code', 'operation', '-created_at'), DimensionToleranceSerializer)
    else:
        if not user_has_role(request.user, ROLE_QUALITY):
            return _quality_forbidden()
        serializer = DimensionToleranceSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def tolerance_detail(request, pk):
    """Retrieve, update or delete a tolerance row"""
    tolerance = get_object_or_404(DimensionTolerance, pk=pk)

    if request.method == 'GET':
        return Response(DimensionToleranceSerializer(tolerance).data)
    if not user_has_role(request.user, ROLE_QUALITY):
        return _quality_forbidden()
    if request.method in ('PUT', 'PATCH'):
        serializer = DimensionToleranceSerializer(tolerance, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        tolerance.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Hourly QC views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def hourly_qc_eligible_work_orders(request):
    """Open work orders whose item has tolerances defined, with their hourly check activity"""
    item_codes = DimensionTolerance.objects.values_list('item_code', flat=True).distinct()
    queryset = (
        WorkOrder.objects.filter(status__in=HOURLY_QC_WO_STATUSES, item_code__in=item_codes)
        .select_related('customer')
        .annotate(check_count=Count('hourly_qc_checks'), last_check_at=Max('hourly_qc_checks__check_datetime'))
    )

    search = request.query_params.get('search', None)
    if search:
        queryset = queryset.filter(
            Q(wo_number__icontains=search) | Q(item_code__icontains=search) |
            Q(customer__customer_name__icontains=search)
        )

    return Response([
        {
            'id': wo.id,
            'wo_number': wo.wo_number,
            'item_code': wo.item_code,
            'customer_name': wo.customer_name,
            'status': wo.status,
            'quantity': wo.quantity,
            'check_count': wo.check_count,
            'last_check_at': wo.last_check_at,
        }
        for wo in queryset.order_by('due_date', 'wo_number')
    ])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def hourly_qc_list_create(request):
    """List hourly QC checks or submit a new check"""
    if request.method == 'GET':
        queryset = HourlyQCCheck.objects.all().select_related('work_order', 'machine', 'operator')

        wo = request.query_params.get('wo', None)
        machine = request.query_params.get('machine', None)
        check_status = request.query_params.get('status', None)
        if wo:
            queryset = queryset.filter(work_order_id=wo)
        if machine:
            queryset = queryset.filter(machine_id=machine)
        if check_status:
            queryset = queryset.filter(status=check_status)

        return paginated_response(request, queryset.order_by('-check_datetime'), HourlyQCCheckSerializer)

    serializer = HourlyQCSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        check = record_hourly_check(
            work_order=data['work_order'],
            machine=data['machine'],
            operation=data['operation'],
            measurements=data.get('measurements') or {},
            binary_checks=data.get('binary_checks') or {},
            operator=request.user,
            remarks=data.get('remarks'),
        )
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)

    return Response(HourlyQCCheckSerializer(check).data, status=status.HTTP_201_CREATED)


# QC record views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def qc_record_list_create(request):
    """List QC records or record a QC gate (Quality role)"""
    if request.method == 'POST':
        return _create_qc_record(request)

    queryset = QCRecord.objects.all().select_related('work_order', 'material_lot')

    wo = request.query_params.get('wo', None)
    qc_type = request.query_params.get('qc_type', None)
    result = request.query_params.get('result', None)
    if wo:
        queryset = queryset.filter(work_order_id=wo)
    if qc_type:
        queryset = queryset.filter(qc_type=qc_type)
    if result:
        queryset = queryset.filter(result=result)

    return paginated_response(request, queryset.order_by('-created_at'), QCRecordSerializer)


def _create_qc_record(request):
    if not user_has_role(request.user, ROLE_QUALITY):
        return _quality_forbidden()
    serializer = QCRecordSerializer(data=request.data)
    if serializer.is_valid():
        result = serializer.validated_data.get('result', 'pending')
        record = QCRecord(
            **serializer.validated_data,
            inspected_by=request.user if result != 'pending' else None,
            qc_date=timezone.now() if result != 'pending' else None,
        )
        save_with_unique_code(record, 'qc_id', 'QC')
        return Response(QCRecordSerializer(record).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def qc_record_detail(request, pk):
    """Retrieve a QC record or record its result (Quality role)"""
    record = get_object_or_404(QCRecord, pk=pk)
    if request.method == 'GET':
        return Response(QCRecordSerializer(record).data)

    if not user_has_role(request.user, ROLE_QUALITY):
        return _quality_forbidden()
    serializer = QCRecordSerializer(record, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save(inspected_by=request.user, qc_date=timezone.now())
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Final QC views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def final_qc_summary_view(request, wo_id):
    """Production totals, hourly QC statistics, QC gates and the release checklist"""
    work_order = get_object_or_404(WorkOrder.objects.select_related('customer'), pk=wo_id)
    return Response(final_qc_summary(work_order))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def final_qc_reports(request, wo_id):
    """List or record final QC reports for a work order"""
    work_order = get_object_or_404(WorkOrder, pk=wo_id)
    if request.method == 'GET':
        serializer = QCFinalReportSerializer(work_order.final_qc_reports.all(), many=True)
        return Response(serializer.data)

    if not user_has_role(request.user, ROLE_QUALITY):
        return _quality_forbidden()
    serializer = QCFinalReportSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save(work_order=work_order, generated_by=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsQualityRole])
def final_qc_release(request, wo_id):
    """Quality release: allows the work order to be packed and dispatched"""
    work_order = get_object_or_404(WorkOrder, pk=wo_id)
    serializer = ReleaseSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        release_work_order(
            work_order, request.user, request=request,
            remarks=serializer.validated_data.get('remarks', ''),
            sampling_plan_reference=serializer.validated_data.get('sampling_plan_reference'),
        )
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(final_qc_summary(work_order))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsQualityRole])
def final_qc_block(request, wo_id):
    """Block a work order at final QC"""
    work_order = get_object_or_404(WorkOrder, pk=wo_id)
    serializer = BlockSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        block_work_order(work_order, request.user, serializer.validated_data.get('remarks', ''), request=request)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(final_qc_summary(work_order))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def final_qc_waive(request, wo_id):
    """Admin override of final QC with a recorded reason"""
    work_order = get_object_or_404(WorkOrder, pk=wo_id)
    serializer = WaiveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        waive_work_order(
            work_order, request.user, serializer.validated_data.get('reason', ''), request=request,
            sampling_plan_reference=serializer.validated_data.get('sampling_plan_reference') or None,
        )
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(final_qc_summary(work_order))
