from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsQualityRole
from backend.core.utils import create_audit_log
from .models import MaterialLot, InventoryLot, FinishedGoodsStock
from .serializers import (
    MaterialLotSerializer, MaterialLotQCSerializer, InventoryLotSerializer, FinishedGoodsStockSerializer
)
from .utils import finished_goods_summary


# Material lot views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_lot_list(request):
    """List material lots with optional filtering"""
    queryset = MaterialLot.objects.all().select_related('supplier')

    qc_status = request.query_params.get('qc_status', None)
    lot_status = request.query_params.get('status', None)
    search = request.query_params.get('search', None)

    if qc_status:
        queryset = queryset.filter(qc_status=qc_status)
    if lot_status:
        queryset = queryset.filter(status=lot_status)
    if search:
        queryset = queryset.filter(
            Q(lot_id__icontains=search) | Q(heat_no__icontains=search) | Q(gate_entry_no__icontains=search)
        )

    return paginated_response(request, queryset.order_by('-created_at'), MaterialLotSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_lot_detail(request, pk):
    """Retrieve a material lot"""
    lot = get_object_or_404(MaterialLot.objects.select_related('supplier'), pk=pk)
    return Response(MaterialLotSerializer(lot).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsQualityRole])
def material_lot_qc_update(request, pk):
    """Approve or reject an incoming material lot"""
    lot = get_object_or_404(MaterialLot, pk=pk)

    serializer = MaterialLotQCSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if lot.qc_status == 'not_required':
        return Response({'error': 'QC is not required for this lot'}, status=status.HTTP_400_BAD_REQUEST)

    old_status = lot.qc_status
    lot.qc_status = serializer.validated_data['qc_status']
    lot.qc_remarks = serializer.validated_data.get('qc_remarks', '')
    lot.save(update_fields=['qc_status', 'qc_remarks', 'updated_at'])

    create_audit_log(
        request=request,
        action='material_qc_update',
        model_name='MaterialLot',
        object_id=str(lot.id),
        object_name=lot.lot_id,
        object_reference=lot.gate_entry_no,
        changes={'qc_status': {'old': old_status, 'new': lot.qc_status}},
    )
    return Response(MaterialLotSerializer(lot).data)


# Inventory lot views (read-only, lots are created at the gate)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_lot_list(request):
    """List inventory lots"""
    queryset = InventoryLot.objects.all().select_related('rpo', 'work_order', 'supplier')

    source = request.query_params.get('source', None)
    grade = request.query_params.get('material_grade', None)
    wo = request.query_params.get('wo', None)

    if source:
        queryset = queryset.filter(source=source)
    if grade:
        queryset = queryset.filter(material_grade__iexact=grade)
    if wo:
        queryset = queryset.filter(work_order_id=wo)

    return paginated_response(request, queryset.order_by('-received_date', '-created_at'), InventoryLotSerializer)


# Finished goods views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def finished_goods_list_create(request):
    """List finished goods stock or add a stock entry"""
    if request.method == 'GET':
        queryset = FinishedGoodsStock.objects.all().select_related('customer', 'work_order')
        item_code = request.query_params.get('item_code', None)
        if item_code:
            queryset = queryset.filter(item_code=item_code)
        if request.query_params.get('in_stock') == 'true':
            queryset = queryset.filter(quantity_available__gt=0)
        return paginated_response(request, queryset.order_by('item_code', '-created_at'), FinishedGoodsStockSerializer)
    else:
        serializer = FinishedGoodsStockSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def finished_goods_summary_view(request):
    """Available finished goods totals per item code"""
    item_code = request.query_params.get('item_code', None)
    summary = finished_goods_summary([item_code] if item_code else None)
    return Response([
        {'item_code': code, 'quantity_available': totals['available'], 'quantity_reserved': totals['reserved']}
        for code, totals in summary.items()
    ])
