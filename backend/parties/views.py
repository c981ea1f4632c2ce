from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from .models import Customer, Supplier, ExternalPartner
from .serializers import CustomerSerializer, SupplierSerializer, ExternalPartnerSerializer


def _filter_active(request, queryset):
    is_active = request.query_params.get('is_active', None)
    if is_active is not None:
        queryset = queryset.filter(is_active=is_active.lower() in ('1', 'true', 'yes'))
    return queryset


def _detail(request, instance, serializer_class):
    """Shared retrieve/update/delete handling for master-data records"""
    if request.method == 'GET':
        return Response(serializer_class(instance).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        instance.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List all customers or create a new customer"""
    if request.method == 'GET':
        queryset = _filter_active(request, Customer.objects.all())
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(customer_name__icontains=search) | Q(party_code__icontains=search) | Q(city__icontains=search)
            )
        is_export = request.query_params.get('is_export', None)
        if is_export is not None:
            queryset = queryset.filter(is_export_customer=is_export.lower() in ('1', 'true', 'yes'))
        return paginated_response(request, queryset.order_by('customer_name'), CustomerSerializer)
    else:
        serializer = CustomerSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    return _detail(request, get_object_or_404(Customer, pk=pk), CustomerSerializer)


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = _filter_active(request, Supplier.objects.all())
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(code__icontains=search) | Q(phone__icontains=search)
            )
        return paginated_response(request, queryset.order_by('name'), SupplierSerializer)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    return _detail(request, get_object_or_404(Supplier, pk=pk), SupplierSerializer)


# External partner views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def external_partner_list_create(request):
    """List all external partners or create a new one"""
    if request.method == 'GET':
        queryset = _filter_active(request, ExternalPartner.objects.all())
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(process_type__icontains=search))
        return paginated_response(request, queryset.order_by('name'), ExternalPartnerSerializer)
    else:
        serializer = ExternalPartnerSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def external_partner_detail(request, pk):
    """Retrieve, update or delete an external partner"""
    return _detail(request, get_object_or_404(ExternalPartner, pk=pk), ExternalPartnerSerializer)
