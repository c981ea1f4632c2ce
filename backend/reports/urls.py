from django.urls import path
from . import views

urlpatterns = [
    path('reports/finance-dashboard/', views.finance_dashboard, name='finance-dashboard'),
    path('reports/ar-aging/', views.ar_aging, name='ar-aging'),
    path('reports/collections/', views.collections, name='collections'),
    path('reports/tds-summary/', views.tds_summary, name='tds-summary'),
]
