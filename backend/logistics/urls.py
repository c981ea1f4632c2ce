from django.urls import path
from .views import (
    carton_list_create, carton_detail, pallet_list_create, pallet_lookup,
    shipment_list_create, shipment_detail,
    dispatch_list_create, dispatch_detail, dispatch_eligibility_view, dispatch_note_list,
)

urlpatterns = [
    # Packing
    path('cartons/', carton_list_create, name='carton-list-create'),
    path('cartons/<int:pk>/', carton_detail, name='carton-detail'),
    path('pallets/', pallet_list_create, name='pallet-list-create'),
    path('pallets/<str:pallet_id>/', pallet_lookup, name='pallet-lookup'),

    # Shipments
    path('shipments/', shipment_list_create, name='shipment-list-create'),
    path('shipments/<int:pk>/', shipment_detail, name='shipment-detail'),

    # Dispatch
    path('dispatches/', dispatch_list_create, name='dispatch-list-create'),
    path('dispatches/<int:pk>/', dispatch_detail, name='dispatch-detail'),
    path('dispatch/eligibility/', dispatch_eligibility_view, name='dispatch-eligibility'),
    path('dispatch-notes/', dispatch_note_list, name='dispatch-note-list'),
]
