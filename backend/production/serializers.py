from rest_framework import serializers
from .models import Machine, WorkOrder, ProductionBatch, DailyProductionLog, ExecutionRecord


class MachineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Machine
        fields = ['id', 'machine_id', 'name', 'location', 'status', 'created_at', 'updated_at']


class ProductionBatchSerializer(serializers.ModelSerializer):
    external_partner_name = serializers.CharField(source='external_partner.name', read_only=True)
    available_to_dispatch = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProductionBatch
        fields = [
            'id', 'work_order', 'batch_number', 'quantity', 'current_location', 'current_process',
            'external_partner', 'external_partner_name', 'external_process_type',
            'qc_approved_qty', 'dispatched_qty', 'available_to_dispatch', 'started_at', 'ended_at'
        ]
        read_only_fields = ['dispatched_qty', 'started_at']


class WorkOrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(read_only=True)
    batches = ProductionBatchSerializer(many=True, read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'wo_number', 'customer', 'customer_name', 'item_code', 'quantity', 'due_date',
            'status', 'current_stage', 'qty_dispatched', 'qty_external_wip', 'external_status',
            'external_process_type', 'material_location', 'quality_released', 'final_qc_result',
            'qc_final_status', 'qc_final_remarks', 'sampling_plan_reference', 'quality_released_at',
            'dispatch_allowed', 'batches', 'created_at', 'updated_at'
        ]
        # Quantities and QC outcomes are maintained by gate, QC and dispatch operations
        read_only_fields = [
            'qty_dispatched', 'qty_external_wip', 'external_status', 'external_process_type',
            'material_location', 'quality_released', 'final_qc_result', 'qc_final_status',
            'qc_final_remarks', 'quality_released_at', 'dispatch_allowed', 'created_at', 'updated_at'
        ]


class WorkOrderListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'wo_number', 'customer', 'customer_name', 'item_code', 'quantity', 'due_date',
            'status', 'current_stage', 'qty_dispatched', 'qty_external_wip', 'external_status',
            'material_location', 'quality_released', 'dispatch_allowed'
        ]


class DailyProductionLogSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    machine_name = serializers.CharField(source='machine.name', read_only=True)

    class Meta:
        model = DailyProductionLog
        fields = [
            'id', 'work_order', 'wo_number', 'machine', 'machine_name', 'log_date', 'shift', 'operation',
            'operator', 'actual_quantity', 'rework_quantity', 'total_rejection_quantity', 'ok_quantity',
            'rejection_dimension', 'rejection_scratch', 'rejection_dent', 'rejection_tool_mark',
            'rejection_forging_mark', 'rejection_lining', 'rejection_face_not_ok',
            'rejection_material_not_ok', 'rejection_setting', 'rejection_previous_setup_fault',
            'remarks', 'created_at'
        ]
        read_only_fields = ['operator', 'total_rejection_quantity', 'ok_quantity', 'created_at']


class ExecutionRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExecutionRecord
        fields = ['id', 'work_order', 'process_type', 'quantity', 'unit', 'direction',
                  'related_gate_entry_no', 'created_by', 'created_at']
