import re
from rest_framework import serializers
from .models import Customer, Supplier, ExternalPartner

PAN_PATTERN = re.compile(r'^[A-Z]{5}[0-9]{4}[A-Z]$')


def validate_pan(value):
    """PAN is optional; when given it must look like ABCDE1234F"""
    if not value:
        return None
    value = value.strip().upper()
    if not PAN_PATTERN.match(value):
        raise serializers.ValidationError('PAN must be 10 characters in the format ABCDE1234F')
    return value


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            'id', 'customer_name', 'party_code', 'pan_number', 'gst_number', 'is_export_customer',
            'city', 'state', 'country', 'payment_terms_days',
            'primary_contact_name', 'primary_contact_email', 'primary_contact_phone',
            'is_active', 'created_at', 'updated_at'
        ]

    def validate_pan_number(self, value):
        return validate_pan(value)


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'code', 'pan_number', 'gst_number', 'phone', 'email', 'address',
            'contact_person', 'is_active', 'created_at', 'updated_at'
        ]

    def validate_pan_number(self, value):
        return validate_pan(value)


class ExternalPartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExternalPartner
        fields = [
            'id', 'name', 'process_type', 'phone', 'email', 'address', 'contact_person',
            'is_active', 'created_at', 'updated_at'
        ]
