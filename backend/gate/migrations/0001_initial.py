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
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WOExternalMove',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('process_type', models.CharField(max_length=100)),
                ('challan_no', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('sent', 'Sent'), ('partial', 'Partially Returned'), ('completed', 'Completed')], default='sent', max_length=20)),
                ('quantity_sent', models.PositiveIntegerField(default=0)),
                ('quantity_returned', models.PositiveIntegerField(default=0)),
                ('weight_sent_kg', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('weight_returned_kg', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('dispatch_date', models.DateField()),
                ('expected_return_date', models.DateField(blank=True, null=True)),
                ('returned_date', models.DateField(blank=True, null=True)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='external_moves', to=settings.AUTH_USER_MODEL)),
                ('partner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='external_moves', to='parties.externalpartner')),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='external_moves', to='production.workorder')),
            ],
            options={
                'db_table': 'wo_external_moves',
                'ordering': ['dispatch_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['work_order', 'process_type', 'status'], name='idx_extmove_wo_process'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GateEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('gate_entry_no', models.CharField(max_length=50, unique=True)),
                ('direction', models.CharField(choices=[('IN', 'In'), ('OUT', 'Out')], max_length=3)),
                ('material_type', models.CharField(choices=[('raw_material', 'Raw Material'), ('external_process', 'External Process'), ('finished_goods', 'Finished Goods'), ('scrap', 'Scrap'), ('other', 'Other')], max_length=20)),
                ('entry_date', models.DateTimeField(auto_now_add=True)),
                ('gross_weight_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('tare_weight_kg', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('net_weight_kg', models.DecimalField(decimal_places=3, max_digits=12)),
                ('packaging', models.JSONField(blank=True, default=list)),
                ('packaging_count', models.PositiveIntegerField(default=0)),
                ('estimated_pcs', models.PositiveIntegerField(blank=True, null=True)),
                ('avg_weight_per_pc', models.DecimalField(blank=True, decimal_places=6, max_digits=12, null=True)),
                ('pcs_sample_count', models.PositiveIntegerField(blank=True, null=True)),
                ('pcs_sample_weight', models.DecimalField(blank=True, decimal_places=3, max_digits=12, null=True)),
                ('item_name', models.CharField(blank=True, max_length=200)),
                ('rod_section_size', models.CharField(blank=True, max_length=100)),
                ('material_grade', models.CharField(blank=True, max_length=100)),
                ('alloy', models.CharField(blank=True, max_length=100)),
                ('heat_no', models.CharField(blank=True, max_length=100)),
                ('tc_number', models.CharField(blank=True, max_length=100)),
                ('supplier_name', models.CharField(blank=True, max_length=200)),
                ('party_code', models.CharField(blank=True, max_length=50)),
                ('process_type', models.CharField(blank=True, max_length=100)),
                ('challan_no', models.CharField(blank=True, max_length=100)),
                ('dc_number', models.CharField(blank=True, max_length=100)),
                ('vehicle_no', models.CharField(blank=True, max_length=50)),
                ('transporter', models.CharField(blank=True, max_length=200)),
                ('qc_required', models.BooleanField(default=False)),
                ('qc_status', models.CharField(choices=[('pending', 'Pending'), ('not_required', 'Not Required')], default='not_required', max_length=20)),
                ('status', models.CharField(default='completed', max_length=20)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='parties.customer')),
                ('external_move', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='gate.woexternalmove')),
                ('inventory_lot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='inventory.inventorylot')),
                ('material_lot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='inventory.materiallot')),
                ('partner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='parties.externalpartner')),
                ('rpo', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='purchasing.rawpurchaseorder')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='parties.supplier')),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='gate_entries', to='production.workorder')),
            ],
            options={
                'db_table': 'gate_register',
                'ordering': ['-entry_date'],
                'indexes': [
                    models.Index(fields=['direction', 'material_type'], name='idx_gate_dir_type'),
                    models.Index(fields=['entry_date'], name='idx_gate_entry_date'),
                ],
            },
        ),
    ]
