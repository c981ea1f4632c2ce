from rest_framework import serializers
from .models import RawPurchaseOrder, RawPOReceipt, RawPOReconciliation


class RawPOReceiptSerializer(serializers.ModelSerializer):
    class Meta:
        model = RawPOReceipt
        fields = ['id', 'rpo', 'gate_entry_no', 'qty_received_kg', 'received_date', 'notes', 'created_at']


class RawPurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    received_qty_kg = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)
    receipts = RawPOReceiptSerializer(many=True, read_only=True)

    class Meta:
        model = RawPurchaseOrder
        fields = [
            'id', 'rpo_no', 'supplier', 'supplier_name', 'work_order', 'wo_number', 'material_grade',
            'qty_ordered_kg', 'rate_per_kg', 'received_qty_kg', 'status', 'expected_date', 'notes',
            'receipts', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_qty_ordered_kg(self, value):
        if value <= 0:
            raise serializers.ValidationError('Ordered quantity must be greater than zero')
        return value


class RawPOReconciliationSerializer(serializers.ModelSerializer):
    rpo_no = serializers.CharField(source='rpo.rpo_no', read_only=True)
    supplier_name = serializers.CharField(source='rpo.supplier.name', read_only=True)
    resolved_by_name = serializers.SerializerMethodField()

    class Meta:
        model = RawPOReconciliation
        fields = [
            'id', 'rpo', 'rpo_no', 'supplier_name', 'reason', 'qty_delta_kg', 'rate_per_kg',
            'amount_delta', 'resolution', 'resolved_by', 'resolved_by_name', 'resolved_at',
            'notes', 'created_at'
        ]
        read_only_fields = fields

    def get_resolved_by_name(self, obj):
        return obj.resolved_by.get_display_name() if obj.resolved_by else None


class ReconciliationResolveSerializer(serializers.Serializer):
    resolution = serializers.ChoiceField(choices=['credit_note', 'debit_note', 'accepted'])
    notes = serializers.CharField(required=False, allow_blank=True)
