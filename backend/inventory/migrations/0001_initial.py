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
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MaterialLot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lot_id', models.CharField(max_length=100, unique=True)),
                ('heat_no', models.CharField(blank=True, max_length=100)),
                ('material_grade', models.CharField(blank=True, max_length=100)),
                ('alloy', models.CharField(blank=True, max_length=100)),
                ('gross_weight', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('net_weight', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('qc_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('not_required', 'Not Required')], default='pending', max_length=20)),
                ('qc_remarks', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('received', 'Received'), ('issued', 'Issued'), ('consumed', 'Consumed')], default='received', max_length=20)),
                ('gate_entry_no', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='material_lots', to='parties.supplier')),
            ],
            options={
                'db_table': 'material_lots',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['qc_status'], name='idx_matlot_qc_status'),
                    models.Index(fields=['heat_no'], name='idx_matlot_heat_no'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InventoryLot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lot_id', models.CharField(max_length=100, unique=True)),
                ('material_grade', models.CharField(blank=True, max_length=100)),
                ('heat_no', models.CharField(blank=True, max_length=100)),
                ('qty_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('cost_rate', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('source', models.CharField(choices=[('rpo', 'Raw Purchase Order'), ('adhoc', 'Ad-hoc Receipt'), ('external_return', 'External Process Return')], default='adhoc', max_length=20)),
                ('received_date', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('rpo', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_lots', to='purchasing.rawpurchaseorder')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_lots', to='parties.supplier')),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_lots', to='production.workorder')),
            ],
            options={
                'db_table': 'inventory_lots',
                'ordering': ['-received_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['material_grade'], name='idx_invlot_grade'),
                    models.Index(fields=['source'], name='idx_invlot_source'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FinishedGoodsStock',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=100)),
                ('quantity_available', models.PositiveIntegerField(default=0)),
                ('quantity_reserved', models.PositiveIntegerField(default=0)),
                ('source_type', models.CharField(choices=[('overproduction', 'Overproduction'), ('customer_return', 'Customer Return'), ('rework_recovery', 'Rework Recovery')], default='overproduction', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finished_goods', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finished_goods', to='parties.customer')),
                ('production_batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finished_goods', to='production.productionbatch')),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='finished_goods', to='production.workorder')),
            ],
            options={
                'db_table': 'finished_goods_inventory',
                'ordering': ['item_code', '-created_at'],
                'indexes': [
                    models.Index(fields=['item_code'], name='idx_fg_item_code'),
                ],
            },
        ),
    ]
