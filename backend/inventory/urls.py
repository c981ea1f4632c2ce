from django.urls import path
from .views import (
    material_lot_list, material_lot_detail, material_lot_qc_update,
    inventory_lot_list, finished_goods_list_create, finished_goods_summary_view,
)

urlpatterns = [
    # Material lots
    path('material-lots/', material_lot_list, name='material-lot-list'),
    path('material-lots/<int:pk>/', material_lot_detail, name='material-lot-detail'),
    path('material-lots/<int:pk>/qc/', material_lot_qc_update, name='material-lot-qc-update'),

    # Inventory lots
    path('inventory-lots/', inventory_lot_list, name='inventory-lot-list'),

    # Finished goods
    path('finished-goods/', finished_goods_list_create, name='finished-goods-list-create'),
    path('finished-goods/summary/', finished_goods_summary_view, name='finished-goods-summary'),
]
