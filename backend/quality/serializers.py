from rest_framework import serializers
from backend.production.models import Machine, WorkOrder
from .models import (
    BINARY_CHECKS, BINARY_STATUS_CHOICES, OPERATION_CHOICES,
    DimensionTolerance, HourlyQCCheck, QCRecord, QCFinalReport
)


class DimensionToleranceSerializer(serializers.ModelSerializer):
    class Meta:
        model = DimensionTolerance
        fields = ['id', 'item_code', 'operation', 'dimensions', 'created_by', 'created_at']
        read_only_fields = ['created_by', 'created_at']

    def validate_dimensions(self, value):
        if not isinstance(value, dict) or not value:
            raise serializers.ValidationError('At least one dimension is required')
        for dim_id, spec in value.items():
            if not isinstance(spec, dict) or not spec.get('name'):
                raise serializers.ValidationError(f'Dimension {dim_id} needs a name')
            try:
                minimum = float(spec.get('min'))
                maximum = float(spec.get('max'))
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"Dimension {spec['name']} needs numeric min and max")
            if minimum > maximum:
                raise serializers.ValidationError(f"Dimension {spec['name']}: min is greater than max")
        return value


class HourlyQCCheckSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    machine_name = serializers.CharField(source='machine.name', read_only=True)
    operator_name = serializers.SerializerMethodField()

    class Meta:
        model = HourlyQCCheck
        fields = [
            'id', 'work_order', 'wo_number', 'machine', 'machine_name', 'operator', 'operator_name',
            'operation', 'dimensions', 'status', 'out_of_tolerance_dimensions',
            'thread_applicable', 'thread_status', 'visual_applicable', 'visual_status',
            'plating_applicable', 'plating_status', 'plating_thickness_applicable', 'plating_thickness_status',
            'remarks', 'check_datetime'
        ]
        read_only_fields = fields

    def get_operator_name(self, obj):
        return obj.operator.get_display_name() if obj.operator else None


class BinaryCheckSerializer(serializers.Serializer):
    applicable = serializers.BooleanField(default=False)
    status = serializers.ChoiceField(choices=BINARY_STATUS_CHOICES, required=False, allow_null=True)


class HourlyQCSubmitSerializer(serializers.Serializer):
    work_order = serializers.PrimaryKeyRelatedField(queryset=WorkOrder.objects.all())
    machine = serializers.PrimaryKeyRelatedField(
        queryset=Machine.objects.all(),
        error_messages={'required': 'Please select a machine', 'null': 'Please select a machine'}
    )
    operation = serializers.ChoiceField(choices=OPERATION_CHOICES, default='A')
    measurements = serializers.DictField(child=serializers.CharField(allow_blank=True, allow_null=True), required=False)
    binary_checks = serializers.DictField(child=BinaryCheckSerializer(), required=False)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_binary_checks(self, value):
        unknown = set(value) - set(BINARY_CHECKS)
        if unknown:
            raise serializers.ValidationError(f"Unknown checks: {', '.join(sorted(unknown))}")
        return value


class QCRecordSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    material_lot_id = serializers.CharField(source='material_lot.lot_id', read_only=True)

    class Meta:
        model = QCRecord
        fields = [
            'id', 'qc_id', 'work_order', 'wo_number', 'batch', 'material_lot', 'material_lot_id',
            'qc_type', 'result', 'remarks', 'inspected_by', 'qc_date', 'created_at', 'updated_at'
        ]
        read_only_fields = ['qc_id', 'inspected_by', 'qc_date', 'created_at', 'updated_at']


class QCFinalReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = QCFinalReport
        fields = ['id', 'work_order', 'report_file', 'remarks', 'generated_by', 'created_at']
        read_only_fields = ['work_order', 'generated_by', 'created_at']


class ReleaseSerializer(serializers.Serializer):
    remarks = serializers.CharField(required=False, allow_blank=True)
    sampling_plan_reference = serializers.CharField(required=False, allow_blank=True)


class BlockSerializer(serializers.Serializer):
    remarks = serializers.CharField(required=False, allow_blank=True)


class WaiveSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)
    sampling_plan_reference = serializers.CharField(required=False, allow_blank=True)
