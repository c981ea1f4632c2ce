from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.exceptions import BusinessRuleError
from backend.core.pagination import paginated_response
from backend.core.permissions import ROLE_PACKING, ROLE_SALES, user_has_role
from backend.production.models import WorkOrder
from .models import Carton, Pallet, Shipment, Dispatch, DispatchNote
from .serializers import (
    CartonSerializer, PalletSerializer, ShipmentSerializer, ShipmentCreateSerializer,
    DispatchSerializer, DispatchCreateSerializer, DispatchNoteSerializer
)
from .services import create_shipment_for_pallet, create_dispatch, delete_dispatch, dispatch_eligibility


def _packing_forbidden():
    return Response({'error': 'Only Packing or Sales users can dispatch goods.'}, status=status.HTTP_403_FORBIDDEN)


# Carton and pallet views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def carton_list_create(request):
    """List cartons or pack a new carton"""
    if request.method == 'GET':
        queryset = Carton.objects.all().select_related('work_order', 'pallet')
        wo = request.query_params.get('wo', None)
        carton_status = request.query_params.get('status', None)
        if wo:
            queryset = queryset.filter(work_order_id=wo)
        if carton_status:
            queryset = queryset.filter(status=carton_status)
        return paginated_response(request, queryset.order_by('-created_at'), CartonSerializer)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    serializer = CartonSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def carton_detail(request, pk):
    """Retrieve a carton or move it (status, pallet)"""
    carton = get_object_or_404(Carton, pk=pk)
    if request.method == 'GET':
        return Response(CartonSerializer(carton).data)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    serializer = CartonSerializer(carton, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def pallet_list_create(request):
    """List pallets or open a new pallet"""
    if request.method == 'GET':
        queryset = Pallet.objects.all().prefetch_related('cartons')
        pallet_status = request.query_params.get('status', None)
        if pallet_status:
            queryset = queryset.filter(status=pallet_status)
        return paginated_response(request, queryset.order_by('-created_at'), PalletSerializer)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    serializer = PalletSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pallet_lookup(request, pallet_id):
    """Look up a pallet by its code, with its cartons"""
    pallet = get_object_or_404(Pallet.objects.prefetch_related('cartons__work_order'), pallet_id=pallet_id)
    data = PalletSerializer(pallet).data
    data['dispatch_allowed'] = all(c.work_order.dispatch_allowed for c in pallet.cartons.all())
    return Response(data)


# Shipment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def shipment_list_create(request):
    """List shipments or ship a pallet"""
    if request.method == 'GET':
        queryset = Shipment.objects.all().select_related('customer').prefetch_related('shipment_pallets__pallet')
        customer = request.query_params.get('customer', None)
        search = request.query_params.get('search', None)
        if customer:
            queryset = queryset.filter(customer_id=customer)
        if search:
            queryset = queryset.filter(Q(ship_id__icontains=search) | Q(customer__customer_name__icontains=search))
        return paginated_response(request, queryset.order_by('-created_at'), ShipmentSerializer)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    serializer = ShipmentCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    pallet = get_object_or_404(Pallet, pallet_id=serializer.validated_data['pallet_id'])
    try:
        shipment = create_shipment_for_pallet(pallet, user=request.user, request=request)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(ShipmentSerializer(shipment).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def shipment_detail(request, pk):
    """Retrieve a shipment"""
    shipment = get_object_or_404(
        Shipment.objects.select_related('customer').prefetch_related('shipment_pallets__pallet'), pk=pk
    )
    data = ShipmentSerializer(shipment).data
    data['dispatches'] = DispatchSerializer(shipment.dispatches.all(), many=True).data
    return Response(data)


# Dispatch views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def dispatch_list_create(request):
    """List dispatches or dispatch quantity from a batch"""
    if request.method == 'GET':
        queryset = Dispatch.objects.all().select_related('work_order', 'batch', 'shipment', 'dispatched_by')
        wo = request.query_params.get('wo', None)
        shipment = request.query_params.get('shipment', None)
        if wo:
            queryset = queryset.filter(work_order_id=wo)
        if shipment:
            queryset = queryset.filter(shipment_id=shipment)
        return paginated_response(request, queryset.order_by('-dispatched_at'), DispatchSerializer)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    serializer = DispatchCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        dispatch = create_dispatch(
            work_order=data['work_order'],
            batch=data['batch'],
            quantity=data['quantity'],
            user=request.user,
            shipment=data.get('shipment'),
            remarks=data.get('remarks', ''),
            request=request,
        )
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(DispatchSerializer(dispatch).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def dispatch_detail(request, pk):
    """Retrieve or reverse a dispatch"""
    dispatch = get_object_or_404(Dispatch.objects.select_related('work_order', 'batch'), pk=pk)
    if request.method == 'GET':
        return Response(DispatchSerializer(dispatch).data)

    if not user_has_role(request.user, ROLE_PACKING, ROLE_SALES):
        return _packing_forbidden()
    delete_dispatch(dispatch, user=request.user, request=request)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dispatch_eligibility_view(request):
    """Ready cartons and finished goods stock per work order"""
    wo = request.query_params.get('wo', None)
    work_orders = WorkOrder.objects.filter(pk=wo) if wo else None
    return Response(dispatch_eligibility(work_orders))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dispatch_note_list(request):
    """List dispatch notes raised at the gate"""
    queryset = DispatchNote.objects.all().select_related('work_order')
    wo = request.query_params.get('wo', None)
    if wo:
        queryset = queryset.filter(work_order_id=wo)
    return paginated_response(request, queryset.order_by('-created_at'), DispatchNoteSerializer)
