from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from .models import Machine, WorkOrder, ProductionBatch, DailyProductionLog, ExecutionRecord
from .serializers import (
    MachineSerializer, WorkOrderSerializer, WorkOrderListSerializer, ProductionBatchSerializer,
    DailyProductionLogSerializer, ExecutionRecordSerializer
)


# Work order views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def work_order_list_create(request):
    """List work orders or create a new one"""
    if request.method == 'GET':
        queryset = WorkOrder.objects.all().select_related('customer')

        status_filter = request.query_params.get('status', None)
        customer = request.query_params.get('customer', None)
        search = request.query_params.get('search', None)

        if status_filter:
            queryset = queryset.filter(status__in=status_filter.split(','))
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if search:
            queryset = queryset.filter(
                Q(wo_number__icontains=search) | Q(item_code__icontains=search) |
                Q(customer__customer_name__icontains=search)
            )

        return paginated_response(request, queryset.order_by('-created_at'), WorkOrderListSerializer)
    else:
        serializer = WorkOrderSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def work_order_detail(request, pk):
    """Retrieve, update or delete a work order"""
    work_order = get_object_or_404(WorkOrder.objects.select_related('customer').prefetch_related('batches'), pk=pk)

    if request.method == 'GET':
        return Response(WorkOrderSerializer(work_order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WorkOrderSerializer(work_order, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        work_order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def work_order_batches(request, pk):
    """List or add production batches for a work order"""
    work_order = get_object_or_404(WorkOrder, pk=pk)
    if request.method == 'GET':
        serializer = ProductionBatchSerializer(work_order.batches.all(), many=True)
        return Response(serializer.data)

    data = request.data.copy()
    data['work_order'] = work_order.id
    if not data.get('batch_number'):
        last = work_order.batches.order_by('-batch_number').first()
        data['batch_number'] = (last.batch_number + 1) if last else 1
    serializer = ProductionBatchSerializer(data=data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def batch_detail(request, pk):
    """Retrieve or update a production batch (QC approved quantity, end time)"""
    batch = get_object_or_404(ProductionBatch, pk=pk)
    if request.method == 'GET':
        return Response(ProductionBatchSerializer(batch).data)
    serializer = ProductionBatchSerializer(batch, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def work_order_execution_records(request, pk):
    """Material movements recorded against a work order"""
    work_order = get_object_or_404(WorkOrder, pk=pk)
    serializer = ExecutionRecordSerializer(work_order.execution_records.all(), many=True)
    return Response(serializer.data)


# Machine views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def machine_list_create(request):
    """List all machines or create a new machine"""
    if request.method == 'GET':
        queryset = Machine.objects.all()
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return Response(MachineSerializer(queryset.order_by('machine_id'), many=True).data)
    else:
        serializer = MachineSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def machine_detail(request, pk):
    """Retrieve or update a machine"""
    machine = get_object_or_404(Machine, pk=pk)
    if request.method == 'GET':
        return Response(MachineSerializer(machine).data)
    serializer = MachineSerializer(machine, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Production log views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def production_log_list_create(request):
    """List daily production logs or record a new one"""
    if request.method == 'GET':
        queryset = DailyProductionLog.objects.all().select_related('work_order', 'machine')

        wo = request.query_params.get('wo', None)
        machine = request.query_params.get('machine', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)

        if wo:
            queryset = queryset.filter(work_order_id=wo)
        if machine:
            queryset = queryset.filter(machine_id=machine)
        if date_from:
            queryset = queryset.filter(log_date__gte=date_from)
        if date_to:
            queryset = queryset.filter(log_date__lte=date_to)

        return paginated_response(request, queryset.order_by('-log_date', '-created_at'), DailyProductionLogSerializer)
    else:
        serializer = DailyProductionLogSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(operator=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def production_log_latest(request):
    """Most recent production log for a work order on a machine"""
    wo = request.query_params.get('wo', None)
    machine = request.query_params.get('machine', None)
    if not wo or not machine:
        return Response({'error': 'wo and machine are required'}, status=status.HTTP_400_BAD_REQUEST)

    log = (
        DailyProductionLog.objects.filter(work_order_id=wo, machine_id=machine)
        .order_by('-log_date', '-created_at')
        .first()
    )
    if not log:
        return Response({'error': 'No production log found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(DailyProductionLogSerializer(log).data)
