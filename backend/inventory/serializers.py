from rest_framework import serializers
from .models import MaterialLot, InventoryLot, FinishedGoodsStock


class MaterialLotSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)

    class Meta:
        model = MaterialLot
        fields = [
            'id', 'lot_id', 'heat_no', 'material_grade', 'alloy', 'supplier', 'supplier_name',
            'gross_weight', 'net_weight', 'qc_status', 'qc_remarks', 'status', 'gate_entry_no',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class MaterialLotQCSerializer(serializers.Serializer):
    qc_status = serializers.ChoiceField(choices=['approved', 'rejected'])
    qc_remarks = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['qc_status'] == 'rejected' and not attrs.get('qc_remarks', '').strip():
            raise serializers.ValidationError({'qc_remarks': 'Remarks are required when rejecting a lot'})
        return attrs


class InventoryLotSerializer(serializers.ModelSerializer):
    rpo_no = serializers.CharField(source='rpo.rpo_no', read_only=True)
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = InventoryLot
        fields = [
            'id', 'lot_id', 'material_grade', 'heat_no', 'qty_kg', 'cost_rate', 'value',
            'rpo', 'rpo_no', 'work_order', 'wo_number', 'supplier', 'supplier_name',
            'source', 'received_date', 'created_at'
        ]
        read_only_fields = fields


class FinishedGoodsStockSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)

    class Meta:
        model = FinishedGoodsStock
        fields = [
            'id', 'item_code', 'customer', 'customer_name', 'work_order', 'wo_number', 'production_batch',
            'quantity_available', 'quantity_reserved', 'source_type', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
