from django.urls import path
from .views import (
    tolerance_list_create, tolerance_detail,
    hourly_qc_eligible_work_orders, hourly_qc_list_create,
    qc_record_list_create, qc_record_detail,
    final_qc_summary_view, final_qc_reports, final_qc_release, final_qc_block, final_qc_waive,
)

urlpatterns = [
    # Tolerances
    path('tolerances/', tolerance_list_create, name='tolerance-list-create'),
    path('tolerances/<int:pk>/', tolerance_detail, name='tolerance-detail'),

    # Hourly QC
    path('hourly-qc/eligible-work-orders/', hourly_qc_eligible_work_orders, name='hourly-qc-eligible-work-orders'),
    path('hourly-qc/', hourly_qc_list_create, name='hourly-qc-list-create'),

    # QC records
    path('qc-records/', qc_record_list_create, name='qc-record-list-create'),
    path('qc-records/<int:pk>/', qc_record_detail, name='qc-record-detail'),

    # Final QC
    path('final-qc/<int:wo_id>/summary/', final_qc_summary_view, name='final-qc-summary'),
    path('final-qc/<int:wo_id>/reports/', final_qc_reports, name='final-qc-reports'),
    path('final-qc/<int:wo_id>/release/', final_qc_release, name='final-qc-release'),
    path('final-qc/<int:wo_id>/block/', final_qc_block, name='final-qc-block'),
    path('final-qc/<int:wo_id>/waive/', final_qc_waive, name='final-qc-waive'),
]
