# Generated manually
import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('full_name', models.CharField(blank=True, max_length=200)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField()),
                ('description', models.TextField(blank=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'settings',
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('gate_in_raw_material', 'Gate In - Raw Material'), ('gate_in_external_process', 'Gate In - External Process'), ('gate_in_finished_goods', 'Gate In - Finished Goods'), ('gate_in_scrap', 'Gate In - Scrap'), ('gate_in_other', 'Gate In - Other'), ('gate_out_raw_material', 'Gate Out - Raw Material'), ('gate_out_external_process', 'Gate Out - External Process'), ('gate_out_finished_goods', 'Gate Out - Finished Goods'), ('gate_out_scrap', 'Gate Out - Scrap'), ('gate_out_other', 'Gate Out - Other'), ('reconciliation_resolve', 'RPO Reconciliation Resolved'), ('material_qc_update', 'Material QC Updated'), ('FINAL_QC_RELEASE', 'Final QC Release'), ('FINAL_QC_BLOCK', 'Final QC Block'), ('FINAL_QC_ADMIN_WAIVER', 'Final QC Admin Waiver'), ('shipment_create', 'Shipment Created'), ('dispatch_create', 'Dispatch Created'), ('dispatch_delete', 'Dispatch Reversed'), ('maintenance_start', 'Maintenance Started'), ('maintenance_end', 'Maintenance Ended'), ('invoice_create', 'Invoice Created'), ('invoice_issue', 'Invoice Issued'), ('invoice_void', 'Invoice Void'), ('invoices_mark_overdue', 'Invoices Marked Overdue'), ('payment_create', 'Payment Recorded'), ('receipt_create', 'Receipt Created'), ('receipt_cancel', 'Receipt Cancelled'), ('receipt_allocate', 'Receipt Allocated'), ('receipt_auto_allocate', 'Receipt Auto-Allocated'), ('allocation_remove', 'Allocation Removed'), ('supplier_payment_create', 'Supplier Payment Recorded'), ('tds_status_update', 'TDS Status Updated'), ('password_reset', 'Password Reset')], max_length=50)),
                ('model_name', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=100)),
                ('object_name', models.CharField(blank=True, help_text='Human-readable name of the object (e.g., work order number, invoice number)', max_length=255, null=True)),
                ('object_reference', models.CharField(blank=True, help_text='Reference identifier (e.g., gate entry number, receipt number)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='idx_audit_created'),
                    models.Index(fields=['action'], name='idx_audit_action'),
                    models.Index(fields=['model_name'], name='idx_audit_model'),
                    models.Index(fields=['object_reference'], name='idx_audit_reference'),
                ],
            },
        ),
    ]
