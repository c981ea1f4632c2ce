from rest_framework import serializers
from backend.production.models import WorkOrder, ProductionBatch
from .models import Carton, Pallet, Shipment, ShipmentPallet, ScanEvent, Dispatch, DispatchNote


class CartonSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    pallet_code = serializers.CharField(source='pallet.pallet_id', read_only=True)

    class Meta:
        model = Carton
        fields = ['id', 'carton_id', 'work_order', 'wo_number', 'quantity', 'net_weight', 'gross_weight',
                  'status', 'pallet', 'pallet_code', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class PalletSerializer(serializers.ModelSerializer):
    cartons = CartonSerializer(many=True, read_only=True)

    class Meta:
        model = Pallet
        fields = ['id', 'pallet_id', 'status', 'cartons', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class ShipmentPalletSerializer(serializers.ModelSerializer):
    pallet_code = serializers.CharField(source='pallet.pallet_id', read_only=True)

    class Meta:
        model = ShipmentPallet
        fields = ['id', 'pallet', 'pallet_code', 'created_at']


class ShipmentSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    shipment_pallets = ShipmentPalletSerializer(many=True, read_only=True)

    class Meta:
        model = Shipment
        fields = ['id', 'ship_id', 'customer', 'customer_name', 'incoterm', 'status', 'ship_date',
                  'shipment_pallets', 'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class ShipmentCreateSerializer(serializers.Serializer):
    pallet_id = serializers.CharField()


class ScanEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = ScanEvent
        fields = ['id', 'entity_type', 'entity_id', 'from_stage', 'to_stage', 'user', 'remarks', 'created_at']


class DispatchSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    batch_number = serializers.IntegerField(source='batch.batch_number', read_only=True)
    ship_id = serializers.CharField(source='shipment.ship_id', read_only=True)
    dispatched_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Dispatch
        fields = ['id', 'work_order', 'wo_number', 'batch', 'batch_number', 'quantity', 'shipment', 'ship_id',
                  'remarks', 'dispatched_by', 'dispatched_by_name', 'dispatched_at']
        read_only_fields = fields

    def get_dispatched_by_name(self, obj):
        return obj.dispatched_by.get_display_name() if obj.dispatched_by else None


class DispatchCreateSerializer(serializers.Serializer):
    work_order = serializers.PrimaryKeyRelatedField(queryset=WorkOrder.objects.all())
    batch = serializers.PrimaryKeyRelatedField(queryset=ProductionBatch.objects.all())
    quantity = serializers.IntegerField(min_value=1)
    shipment = serializers.PrimaryKeyRelatedField(queryset=Shipment.objects.all(), required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True)


class DispatchNoteSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)

    class Meta:
        model = DispatchNote
        fields = ['id', 'dispatch_note_no', 'work_order', 'wo_number', 'dispatched_qty', 'gate_entry_no',
                  'dispatch_date', 'remarks', 'created_by', 'created_at']
        read_only_fields = fields
