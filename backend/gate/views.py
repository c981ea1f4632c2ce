import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.pagination import paginated_response
from backend.core.permissions import IsStoresRole
from .filters import GateEntryFilter
from .labels import generate_gate_tag
from .models import OPEN_MOVE_STATUSES, GateEntry, WOExternalMove
from .serializers import (
    GateEntrySerializer, GateEntryCreateSerializer, WeightCalculationSerializer, WOExternalMoveSerializer
)
from .services import external_returns_due, record_gate_entry
from .weights import PACKAGING_OPTIONS, calculate_entry_weights

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def packaging_options(request):
    """Packaging types with their tare weight per unit"""
    return Response([
        {'code': code, 'label': option['label'], 'weight': option['weight']}
        for code, option in PACKAGING_OPTIONS.items()
    ])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def calculate_weights(request):
    """Tare, net weight, packaging count and estimated pcs for a draft entry"""
    serializer = WeightCalculationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    return Response(calculate_entry_weights(
        data['gross_weight_kg'],
        packaging_rows=data.get('packaging'),
        manual_tare=data.get('manual_tare_kg'),
        sample_weight=data.get('pcs_sample_weight'),
        sample_count=data.get('pcs_sample_count'),
    ))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def gate_entry_list_create(request):
    """
    GET: gate register, filtered by direction, material_type, date_from, date_to, work_order, search.
    POST: record an entry (Stores, Purchase or Packing) and create its downstream documents.
    """
    if request.method == 'GET':
        queryset = GateEntry.objects.all().select_related('work_order', 'rpo', 'partner', 'customer', 'created_by')
        queryset = GateEntryFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset.order_by('-entry_date'), GateEntrySerializer)

    if not IsStoresRole().has_permission(request, None):
        return Response({'error': IsStoresRole.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = GateEntryCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        entry, warnings = record_gate_entry(serializer.validated_data, user=request.user, request=request)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)

    data = GateEntrySerializer(entry).data
    data['warnings'] = warnings
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def gate_entry_detail(request, pk):
    entry = get_object_or_404(GateEntry.objects.select_related('work_order', 'rpo', 'partner', 'customer'), pk=pk)
    return Response(GateEntrySerializer(entry).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def gate_entry_tag(request, pk):
    """Printable gate tag (PNG data URL) with a barcode of the entry number"""
    entry = get_object_or_404(GateEntry.objects.select_related('work_order', 'partner', 'customer'), pk=pk)
    try:
        image = generate_gate_tag(entry)
    except Exception as e:
        logger.error(f"Gate tag generation failed for {entry.gate_entry_no}: {str(e)}")
        return Response({'error': 'Failed to generate gate tag'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'gate_entry_no': entry.gate_entry_no, 'image': image})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def external_move_list(request):
    """
    External process moves, filtered by wo, status (comma separated) and process_type.
    overdue=true keeps open moves past their expected return date.
    due_within_days=N keeps open moves overdue or due back within N days, earliest first.
    """
    queryset = WOExternalMove.objects.all().select_related('work_order', 'partner')
    ordering = ('-dispatch_date', '-created_at')
    wo = request.query_params.get('wo', None)
    move_status = request.query_params.get('status', None)
    process_type = request.query_params.get('process_type', None)
    overdue = request.query_params.get('overdue', None)
    due_within_days = request.query_params.get('due_within_days', None)
    if wo:
        queryset = queryset.filter(work_order_id=wo)
    if move_status:
        queryset = queryset.filter(status__in=[s.strip() for s in move_status.split(',') if s.strip()])
    if process_type:
        queryset = queryset.filter(process_type=process_type)
    if overdue and overdue.lower() == 'true':
        queryset = queryset.filter(
            status__in=OPEN_MOVE_STATUSES, expected_return_date__lt=timezone.localdate()
        )
        ordering = ('expected_return_date', 'created_at')
    if due_within_days:
        try:
            days = int(due_within_days)
        except ValueError:
            return Response({'error': 'due_within_days must be a whole number', 'field': 'due_within_days'},
                            status=status.HTTP_400_BAD_REQUEST)
        queryset = queryset.filter(pk__in=external_returns_due(within_days=days).values('pk'))
        ordering = ('expected_return_date', 'created_at')
    return paginated_response(request, queryset.order_by(*ordering), WOExternalMoveSerializer)
