from rest_framework import serializers
from django.utils import timezone
from backend.production.models import Machine
from .downtime import DOWNTIME_REASON_CHOICES
from .models import MaintenanceLog


class MaintenanceLogSerializer(serializers.ModelSerializer):
    machine_code = serializers.CharField(source='machine.machine_id', read_only=True)
    machine_name = serializers.CharField(source='machine.name', read_only=True)
    category = serializers.CharField(read_only=True)
    duration_minutes = serializers.SerializerMethodField()
    logged_by_name = serializers.SerializerMethodField()

    class Meta:
        model = MaintenanceLog
        fields = ['id', 'machine', 'machine_code', 'machine_name', 'downtime_reason', 'category',
                  'start_time', 'end_time', 'duration_minutes', 'logged_by', 'logged_by_name',
                  'remarks', 'created_at']
        read_only_fields = fields

    def get_duration_minutes(self, obj):
        return obj.duration_minutes(until=timezone.now())

    def get_logged_by_name(self, obj):
        return obj.logged_by.get_display_name() if obj.logged_by else None


class MaintenanceStartSerializer(serializers.Serializer):
    machine = serializers.PrimaryKeyRelatedField(queryset=Machine.objects.all())
    downtime_reason = serializers.ChoiceField(choices=DOWNTIME_REASON_CHOICES)
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True)
