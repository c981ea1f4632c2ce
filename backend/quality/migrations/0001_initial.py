# Generated manually

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

OPERATION_CHOICES = [('A', 'Operation A'), ('B', 'Operation B'), ('C', 'Operation C'), ('D', 'Operation D')]
BINARY_STATUS_CHOICES = [('ok', 'OK'), ('not_ok', 'Not OK'), ('na', 'N/A')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('inventory', '0001_initial'),
        ('production', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DimensionTolerance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_code', models.CharField(max_length=100)),
                ('operation', models.CharField(choices=OPERATION_CHOICES, max_length=1)),
                ('dimensions', models.JSONField(default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='dimension_tolerances', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'dimension_tolerances',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['item_code', 'operation'], name='idx_tolerance_item_op')],
            },
        ),
        migrations.CreateModel(
            name='HourlyQCCheck',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('operation', models.CharField(choices=OPERATION_CHOICES, default='A', max_length=1)),
                ('dimensions', models.JSONField(default=dict)),
                ('status', models.CharField(choices=[('pass', 'Pass'), ('fail', 'Fail')], max_length=10)),
                ('out_of_tolerance_dimensions', models.JSONField(blank=True, null=True)),
                ('thread_applicable', models.BooleanField(default=False)),
                ('thread_status', models.CharField(blank=True, choices=BINARY_STATUS_CHOICES, max_length=10, null=True)),
                ('visual_applicable', models.BooleanField(default=False)),
                ('visual_status', models.CharField(blank=True, choices=BINARY_STATUS_CHOICES, max_length=10, null=True)),
                ('plating_applicable', models.BooleanField(default=False)),
                ('plating_status', models.CharField(blank=True, choices=BINARY_STATUS_CHOICES, max_length=10, null=True)),
                ('plating_thickness_applicable', models.BooleanField(default=False)),
                ('plating_thickness_status', models.CharField(blank=True, choices=BINARY_STATUS_CHOICES, max_length=10, null=True)),
                ('remarks', models.TextField(blank=True, null=True)),
                ('check_datetime', models.DateTimeField(auto_now_add=True)),
                ('machine', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='hourly_qc_checks', to='production.machine')),
                ('operator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='hourly_qc_checks', to=settings.AUTH_USER_MODEL)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hourly_qc_checks', to='production.workorder')),
            ],
            options={
                'db_table': 'hourly_qc_checks',
                'ordering': ['-check_datetime'],
                'indexes': [models.Index(fields=['work_order', 'check_datetime'], name='idx_hourly_qc_wo_time')],
            },
        ),
        migrations.CreateModel(
            name='QCRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('qc_id', models.CharField(max_length=100, unique=True)),
                ('qc_type', models.CharField(choices=[('incoming', 'Incoming Material QC'), ('first_piece', 'First Piece QC'), ('in_process', 'In-Process QC'), ('post_external', 'Post External Process QC'), ('final', 'Final QC')], max_length=20)),
                ('result', models.CharField(choices=[('pending', 'Pending'), ('pass', 'Pass'), ('fail', 'Fail'), ('waived', 'Waived')], default='pending', max_length=10)),
                ('remarks', models.TextField(blank=True)),
                ('qc_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='qc_records', to='production.productionbatch')),
                ('inspected_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='qc_records', to=settings.AUTH_USER_MODEL)),
                ('material_lot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='qc_records', to='inventory.materiallot')),
                ('work_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='qc_records', to='production.workorder')),
            ],
            options={
                'db_table': 'qc_records',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['work_order', 'qc_type'], name='idx_qcrecord_wo_type')],
            },
        ),
        migrations.CreateModel(
            name='QCFinalReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('report_file', models.CharField(blank=True, max_length=500)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('generated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='final_qc_reports', to=settings.AUTH_USER_MODEL)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='final_qc_reports', to='production.workorder')),
            ],
            options={
                'db_table': 'qc_final_reports',
                'ordering': ['-created_at'],
            },
        ),
    ]
