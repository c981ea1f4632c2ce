from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from backend.core.pagination import paginated_response
from backend.core.permissions import IsAccountsRole
from backend.core.utils import create_audit_log
from .models import RawPurchaseOrder, RawPOReconciliation
from .serializers import (
    RawPurchaseOrderSerializer, RawPOReconciliationSerializer, ReconciliationResolveSerializer
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def rpo_list_create(request):
    """List raw purchase orders or create a new one"""
    if request.method == 'GET':
        queryset = RawPurchaseOrder.objects.all().select_related('supplier', 'work_order').prefetch_related('receipts')

        supplier = request.query_params.get('supplier', None)
        status_filter = request.query_params.get('status', None)
        search = request.query_params.get('search', None)

        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        if status_filter:
            queryset = queryset.filter(status__in=status_filter.split(','))
        if search:
            queryset = queryset.filter(Q(rpo_no__icontains=search) | Q(material_grade__icontains=search))

        return paginated_response(request, queryset.order_by('-created_at'), RawPurchaseOrderSerializer)
    else:
        serializer = RawPurchaseOrderSerializer(data=request.data)
        if serializer.is_valid():
            rpo = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='RawPurchaseOrder',
                object_id=str(rpo.id),
                object_name=rpo.rpo_no,
                changes={'qty_ordered_kg': str(rpo.qty_ordered_kg), 'supplier': rpo.supplier.name},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def rpo_detail(request, pk):
    """Retrieve, update or delete a raw purchase order"""
    rpo = get_object_or_404(RawPurchaseOrder.objects.select_related('supplier', 'work_order'), pk=pk)

    if request.method == 'GET':
        return Response(RawPurchaseOrderSerializer(rpo).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = RawPurchaseOrderSerializer(rpo, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if rpo.receipts.exists():
            return Response(
                {'error': 'Cannot delete a purchase order that has receipts'},
                status=status.HTTP_400_BAD_REQUEST
            )
        rpo.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reconciliation_list(request):
    """List RPO reconciliations, optionally by resolution"""
    queryset = RawPOReconciliation.objects.all().select_related('rpo', 'rpo__supplier', 'resolved_by')

    resolution = request.query_params.get('resolution', None)
    rpo = request.query_params.get('rpo', None)
    if resolution:
        queryset = queryset.filter(resolution=resolution)
    if rpo:
        queryset = queryset.filter(rpo_id=rpo)

    return paginated_response(request, queryset.order_by('-created_at'), RawPOReconciliationSerializer)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAccountsRole])
def reconciliation_resolve(request, pk):
    """Close a pending reconciliation with a credit note, debit note or acceptance"""
    reconciliation = get_object_or_404(RawPOReconciliation.objects.select_related('rpo'), pk=pk)

    serializer = ReconciliationResolveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if reconciliation.resolution != 'pending':
        return Response({'error': 'Reconciliation is already resolved'}, status=status.HTTP_400_BAD_REQUEST)

    old_resolution = reconciliation.resolution
    reconciliation.resolution = serializer.validated_data['resolution']
    reconciliation.resolved_by = request.user
    reconciliation.resolved_at = timezone.now()
    if serializer.validated_data.get('notes'):
        reconciliation.notes = serializer.validated_data['notes']
    reconciliation.save()

    create_audit_log(
        request=request,
        action='reconciliation_resolve',
        model_name='RawPOReconciliation',
        object_id=str(reconciliation.id),
        object_name=reconciliation.rpo.rpo_no,
        changes={'resolution': {'old': old_resolution, 'new': reconciliation.resolution}},
    )
    return Response(RawPOReconciliationSerializer(reconciliation).data)
