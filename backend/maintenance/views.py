from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.pagination import paginated_response
from backend.core.permissions import ROLE_MAINTENANCE, ROLE_PRODUCTION, IsMaintenanceRole, user_has_role
from .downtime import reasons_by_category
from .models import MaintenanceLog
from .serializers import MaintenanceLogSerializer, MaintenanceStartSerializer
from .services import start_maintenance, end_maintenance, downtime_summary


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def maintenance_log_list_create(request):
    """List maintenance logs or put a machine into maintenance"""
    if request.method == 'GET':
        queryset = MaintenanceLog.objects.all().select_related('machine', 'logged_by')

        machine = request.query_params.get('machine', None)
        state = request.query_params.get('state', None)
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)

        if machine:
            queryset = queryset.filter(machine_id=machine)
        if state == 'open':
            queryset = queryset.filter(end_time__isnull=True)
        elif state == 'closed':
            queryset = queryset.filter(end_time__isnull=False)
        if date_from:
            queryset = queryset.filter(start_time__date__gte=date_from)
        if date_to:
            queryset = queryset.filter(start_time__date__lte=date_to)

        return paginated_response(request, queryset.order_by('-start_time'), MaintenanceLogSerializer)

    if not user_has_role(request.user, ROLE_MAINTENANCE, ROLE_PRODUCTION):
        return Response({'error': 'Only Maintenance or Production users can log maintenance.'},
                        status=status.HTTP_403_FORBIDDEN)

    serializer = MaintenanceStartSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        log = start_maintenance(
            machine=data['machine'],
            downtime_reason=data['downtime_reason'],
            start_time=data.get('start_time') or timezone.now(),
            end_time=data.get('end_time'),
            remarks=data.get('remarks', ''),
            user=request.user,
            request=request,
        )
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(MaintenanceLogSerializer(log).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def maintenance_log_detail(request, pk):
    """Retrieve a maintenance log"""
    log = get_object_or_404(MaintenanceLog.objects.select_related('machine', 'logged_by'), pk=pk)
    return Response(MaintenanceLogSerializer(log).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsMaintenanceRole])
def maintenance_log_end(request, pk):
    """End an open maintenance log"""
    log = get_object_or_404(MaintenanceLog.objects.select_related('machine'), pk=pk)
    try:
        end_maintenance(log, user=request.user, request=request)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(MaintenanceLogSerializer(log).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def downtime_reasons(request):
    """Downtime reason catalogue grouped by category"""
    return Response(reasons_by_category())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def downtime_summary_view(request):
    """Downtime minutes per category and machine for a date range"""
    return Response(downtime_summary(
        date_from=request.query_params.get('date_from', None),
        date_to=request.query_params.get('date_to', None),
        machine=request.query_params.get('machine', None),
    ))
