# Generated manually

from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('parties', '0001_initial'),
        ('production', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RawPurchaseOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rpo_no', models.CharField(max_length=50, unique=True)),
                ('material_grade', models.CharField(max_length=100)),
                ('qty_ordered_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('rate_per_kg', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('approved', 'Approved'), ('part_received', 'Partially Received'), ('closed', 'Closed'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('expected_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='raw_purchase_orders', to=settings.AUTH_USER_MODEL)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='raw_purchase_orders', to='parties.supplier')),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='raw_purchase_orders', to='production.workorder')),
            ],
            options={
                'db_table': 'raw_purchase_orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_rpo_status'),
                    models.Index(fields=['supplier', 'status'], name='idx_rpo_supplier_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RawPOReceipt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('gate_entry_no', models.CharField(blank=True, max_length=50)),
                ('qty_received_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('received_date', models.DateField()),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('rpo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='receipts', to='purchasing.rawpurchaseorder')),
            ],
            options={
                'db_table': 'raw_po_receipts',
                'ordering': ['-received_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='RawPOReconciliation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reason', models.CharField(choices=[('short_supply', 'Short Supply'), ('excess_supply', 'Excess Supply')], max_length=20)),
                ('qty_delta_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('rate_per_kg', models.DecimalField(decimal_places=2, max_digits=12)),
                ('amount_delta', models.DecimalField(decimal_places=2, max_digits=14)),
                ('resolution', models.CharField(choices=[('pending', 'Pending'), ('credit_note', 'Credit Note'), ('debit_note', 'Debit Note'), ('accepted', 'Accepted')], default='pending', max_length=20)),
                ('resolved_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('resolved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resolved_reconciliations', to=settings.AUTH_USER_MODEL)),
                ('rpo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reconciliations', to='purchasing.rawpurchaseorder')),
            ],
            options={
                'db_table': 'raw_po_reconciliations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['resolution'], name='idx_rpo_recon_resolution'),
                ],
            },
        ),
    ]
