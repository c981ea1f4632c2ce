# Generated manually

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('production', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MaintenanceLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('downtime_reason', models.CharField(choices=[('Material Not Available', 'Material Not Available'), ('Material Shortage', 'Material Shortage'), ('Wrong Material', 'Wrong Material'), ('Material Quality Issue', 'Material Quality Issue'), ('Machine Repair', 'Machine Repair'), ('Machine Breakdown', 'Machine Breakdown'), ('Machine Maintenance', 'Machine Maintenance'), ('Machine Calibration', 'Machine Calibration'), ('Machine Warmup', 'Machine Warmup'), ('No Power', 'No Power'), ('Power Fluctuation', 'Power Fluctuation'), ('Compressor Issue', 'Compressor Issue'), ('Quality Problem', 'Quality Problem'), ('QC Hold', 'QC Hold'), ('First Piece Approval', 'First Piece Approval'), ('Inspection Delay', 'Inspection Delay'), ('Rework', 'Rework'), ('No Operator', 'No Operator'), ('Operator Training', 'Operator Training'), ('Operator Shifted to Other Work', 'Operator Shifted to Other Work'), ('Tea Break', 'Tea Break'), ('Lunch Break', 'Lunch Break'), ('Operator Fatigue', 'Operator Fatigue'), ('Tool Change', 'Tool Change'), ('Tool Not Available', 'Tool Not Available'), ('Tool Damage', 'Tool Damage'), ('Tool Setup', 'Tool Setup'), ('Insert Change', 'Insert Change'), ('Job Setting', 'Job Setting'), ('Setting Change', 'Setting Change'), ('Cleaning', 'Cleaning'), ('Program Upload', 'Program Upload'), ('Shift Handover', 'Shift Handover'), ('Other', 'Other')], max_length=100)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField(blank=True, null=True)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('logged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='maintenance_logs', to=settings.AUTH_USER_MODEL)),
                ('machine', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='maintenance_logs', to='production.machine')),
            ],
            options={
                'db_table': 'maintenance_logs',
                'ordering': ['-start_time'],
                'indexes': [models.Index(fields=['machine', 'start_time'], name='idx_maint_machine_start')],
            },
        ),
    ]
