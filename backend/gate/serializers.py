from django.utils import timezone
from rest_framework import serializers
from backend.parties.models import Customer, Supplier, ExternalPartner
from backend.production.models import WorkOrder
from backend.purchasing.models import RawPurchaseOrder
from .models import GateEntry, WOExternalMove
from .weights import PACKAGING_OPTIONS


class PackagingRowSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=list(PACKAGING_OPTIONS.keys()))
    count = serializers.IntegerField(min_value=0)


class WeightCalculationSerializer(serializers.Serializer):
    gross_weight_kg = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0)
    packaging = PackagingRowSerializer(many=True, required=False)
    manual_tare_kg = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False, allow_null=True)
    pcs_sample_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    pcs_sample_weight = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False, allow_null=True)


class GateEntryCreateSerializer(serializers.Serializer):
    """Input for a new gate entry. Cross-field rules are checked by the gate service."""
    direction = serializers.ChoiceField(choices=GateEntry.DIRECTION_CHOICES)
    material_type = serializers.ChoiceField(choices=GateEntry.MATERIAL_TYPE_CHOICES)
    gross_weight_kg = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True)
    packaging = PackagingRowSerializer(many=True, required=False)
    manual_tare_kg = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False, allow_null=True)
    estimated_pcs = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    avg_weight_per_pc = serializers.DecimalField(max_digits=12, decimal_places=6, required=False, allow_null=True)
    pcs_sample_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    pcs_sample_weight = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=0, required=False, allow_null=True)

    item_name = serializers.CharField(required=False, allow_blank=True)
    rod_section_size = serializers.CharField(required=False, allow_blank=True)
    material_grade = serializers.CharField(required=False, allow_blank=True)
    alloy = serializers.CharField(required=False, allow_blank=True)
    heat_no = serializers.CharField(required=False, allow_blank=True)
    tc_number = serializers.CharField(required=False, allow_blank=True)

    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    supplier_name = serializers.CharField(required=False, allow_blank=True)
    party_code = serializers.CharField(required=False, allow_blank=True)
    partner = serializers.PrimaryKeyRelatedField(queryset=ExternalPartner.objects.all(), required=False, allow_null=True)
    process_type = serializers.CharField(required=False, allow_blank=True)
    work_order = serializers.PrimaryKeyRelatedField(queryset=WorkOrder.objects.all(), required=False, allow_null=True)
    rpo = serializers.PrimaryKeyRelatedField(queryset=RawPurchaseOrder.objects.all(), required=False, allow_null=True)
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)

    challan_no = serializers.CharField(required=False, allow_blank=True)
    dc_number = serializers.CharField(required=False, allow_blank=True)
    vehicle_no = serializers.CharField(required=False, allow_blank=True)
    transporter = serializers.CharField(required=False, allow_blank=True)
    qc_required = serializers.BooleanField(required=False, default=False)
    remarks = serializers.CharField(required=False, allow_blank=True)

    def validate_rpo(self, value):
        if value and value.status in ('closed', 'cancelled'):
            raise serializers.ValidationError(f'RPO {value.rpo_no} is {value.status}')
        return value


class GateEntrySerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    rpo_no = serializers.CharField(source='rpo.rpo_no', read_only=True)
    partner_name = serializers.CharField(source='partner.name', read_only=True)
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    material_lot_id = serializers.CharField(source='material_lot.lot_id', read_only=True)
    inventory_lot_id = serializers.CharField(source='inventory_lot.lot_id', read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = GateEntry
        fields = [
            'id', 'gate_entry_no', 'direction', 'material_type', 'entry_date',
            'gross_weight_kg', 'tare_weight_kg', 'net_weight_kg', 'packaging', 'packaging_count',
            'estimated_pcs', 'avg_weight_per_pc', 'pcs_sample_count', 'pcs_sample_weight',
            'item_name', 'rod_section_size', 'material_grade', 'alloy', 'heat_no', 'tc_number',
            'supplier', 'supplier_name', 'party_code', 'partner', 'partner_name', 'process_type',
            'work_order', 'wo_number', 'rpo', 'rpo_no', 'customer', 'customer_name',
            'challan_no', 'dc_number', 'vehicle_no', 'transporter',
            'material_lot', 'material_lot_id', 'inventory_lot', 'inventory_lot_id', 'external_move',
            'qc_required', 'qc_status', 'status', 'remarks', 'created_by', 'created_by_name', 'created_at',
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.get_display_name() if obj.created_by else None


class WOExternalMoveSerializer(serializers.ModelSerializer):
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)
    partner_name = serializers.CharField(source='partner.name', read_only=True)
    quantity_pending = serializers.IntegerField(read_only=True)
    days_overdue = serializers.SerializerMethodField()

    class Meta:
        model = WOExternalMove
        fields = ['id', 'work_order', 'wo_number', 'process_type', 'partner', 'partner_name', 'challan_no',
                  'status', 'quantity_sent', 'quantity_returned', 'quantity_pending', 'weight_sent_kg',
                  'weight_returned_kg', 'dispatch_date', 'expected_return_date', 'days_overdue', 'returned_date',
                  'remarks', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_days_overdue(self, obj):
        return obj.days_overdue(timezone.localdate())
