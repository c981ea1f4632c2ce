# Generated manually
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Machine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('machine_id', models.CharField(max_length=50, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('location', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('idle', 'Idle'), ('running', 'Running'), ('maintenance', 'Maintenance'), ('down', 'Down')], default='idle', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'machines',
                'ordering': ['machine_id'],
            },
        ),
        migrations.CreateModel(
            name='WorkOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wo_number', models.CharField(max_length=50, unique=True)),
                ('item_code', models.CharField(max_length=100)),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('qc', 'QC'), ('packing', 'Packing'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('current_stage', models.CharField(default='production', max_length=50)),
                ('qty_dispatched', models.PositiveIntegerField(default=0)),
                ('qty_external_wip', models.PositiveIntegerField(default=0)),
                ('external_status', models.CharField(blank=True, choices=[('sent', 'Sent'), ('partial', 'Partially Returned')], max_length=20, null=True)),
                ('external_process_type', models.CharField(blank=True, max_length=100, null=True)),
                ('material_location', models.CharField(default='Factory', max_length=200)),
                ('quality_released', models.BooleanField(default=False)),
                ('final_qc_result', models.CharField(blank=True, max_length=20, null=True)),
                ('qc_final_status', models.CharField(blank=True, max_length=20, null=True)),
                ('qc_final_remarks', models.TextField(blank=True)),
                ('sampling_plan_reference', models.CharField(blank=True, max_length=100)),
                ('quality_released_at', models.DateTimeField(blank=True, null=True)),
                ('dispatch_allowed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='work_orders', to='parties.customer')),
                ('quality_released_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='released_work_orders', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='work_orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'work_orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_wo_status'),
                    models.Index(fields=['item_code'], name='idx_wo_item_code'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductionBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('batch_number', models.PositiveIntegerField(default=1)),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('current_location', models.CharField(choices=[('factory', 'Factory'), ('transit', 'In Transit'), ('external_partner', 'External Partner')], default='factory', max_length=20)),
                ('current_process', models.CharField(default='production', max_length=50)),
                ('external_process_type', models.CharField(blank=True, max_length=100, null=True)),
                ('qc_approved_qty', models.PositiveIntegerField(default=0)),
                ('dispatched_qty', models.PositiveIntegerField(default=0)),
                ('started_at', models.DateTimeField(auto_now_add=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('external_partner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='batches', to='parties.externalpartner')),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='batches', to='production.workorder')),
            ],
            options={
                'db_table': 'production_batches',
                'ordering': ['work_order', 'batch_number'],
                'unique_together': {('work_order', 'batch_number')},
            },
        ),
        migrations.CreateModel(
            name='DailyProductionLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('log_date', models.DateField()),
                ('shift', models.CharField(blank=True, max_length=20)),
                ('operation', models.CharField(blank=True, max_length=5)),
                ('actual_quantity', models.PositiveIntegerField(default=0)),
                ('rework_quantity', models.PositiveIntegerField(default=0)),
                ('total_rejection_quantity', models.PositiveIntegerField(default=0)),
                ('ok_quantity', models.PositiveIntegerField(default=0)),
                ('rejection_dimension', models.PositiveIntegerField(default=0)),
                ('rejection_scratch', models.PositiveIntegerField(default=0)),
                ('rejection_dent', models.PositiveIntegerField(default=0)),
                ('rejection_tool_mark', models.PositiveIntegerField(default=0)),
                ('rejection_forging_mark', models.PositiveIntegerField(default=0)),
                ('rejection_lining', models.PositiveIntegerField(default=0)),
                ('rejection_face_not_ok', models.PositiveIntegerField(default=0)),
                ('rejection_material_not_ok', models.PositiveIntegerField(default=0)),
                ('rejection_setting', models.PositiveIntegerField(default=0)),
                ('rejection_previous_setup_fault', models.PositiveIntegerField(default=0)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('machine', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='production_logs', to='production.machine')),
                ('operator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='production_logs', to=settings.AUTH_USER_MODEL)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='production_logs', to='production.workorder')),
            ],
            options={
                'db_table': 'daily_production_logs',
                'ordering': ['-log_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['work_order', 'machine'], name='idx_prodlog_wo_machine'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ExecutionRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('process_type', models.CharField(max_length=50)),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0.000'), max_digits=12)),
                ('unit', models.CharField(default='kg', max_length=10)),
                ('direction', models.CharField(choices=[('IN', 'In'), ('OUT', 'Out')], max_length=3)),
                ('related_gate_entry_no', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='execution_records', to=settings.AUTH_USER_MODEL)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='execution_records', to='production.workorder')),
            ],
            options={
                'db_table': 'execution_records',
                'ordering': ['-created_at'],
            },
        ),
    ]
