from django.urls import path
from . import views

urlpatterns = [
    path('gate/packaging-options/', views.packaging_options, name='gate-packaging-options'),
    path('gate/calculate/', views.calculate_weights, name='gate-calculate'),
    path('gate-entries/', views.gate_entry_list_create, name='gate-entry-list-create'),
    path('gate-entries/<int:pk>/', views.gate_entry_detail, name='gate-entry-detail'),
    path('gate-entries/<int:pk>/tag/', views.gate_entry_tag, name='gate-entry-tag'),
    path('external-moves/', views.external_move_list, name='external-move-list'),
]
