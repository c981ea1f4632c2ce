from django.db import models


class Customer(models.Model):
    """Customers (domestic and export)"""
    customer_name = models.CharField(max_length=200)
    party_code = models.CharField(max_length=50, unique=True, blank=True, null=True)
    pan_number = models.CharField(max_length=10, blank=True, null=True)
    gst_number = models.CharField(max_length=15, blank=True, null=True)
    is_export_customer = models.BooleanField(default=False)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default='India')
    payment_terms_days = models.PositiveIntegerField(null=True, blank=True)
    primary_contact_name = models.CharField(max_length=200, blank=True)
    primary_contact_email = models.EmailField(blank=True)
    primary_contact_phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.customer_name

    def save(self, *args, **kwargs):
        if self.pan_number:
            self.pan_number = self.pan_number.strip().upper()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'customer_master'
        ordering = ['customer_name']


class Supplier(models.Model):
    """Raw material suppliers"""
    name = models.CharField(max_length=200)
    code = models.CharField(max_length=50, unique=True, blank=True, null=True)
    pan_number = models.CharField(max_length=10, blank=True, null=True)
    gst_number = models.CharField(max_length=15, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.pan_number:
            self.pan_number = self.pan_number.strip().upper()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']


class ExternalPartner(models.Model):
    """Job-work partners for external processes (plating, heat treatment, ...)"""
    name = models.CharField(max_length=200)
    process_type = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'external_partners'
        ordering = ['name']
