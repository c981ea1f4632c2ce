"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.parties.models import Customer, Supplier, ExternalPartner
from backend.production.models import Machine, WorkOrder, ProductionBatch
from backend.purchasing.models import RawPurchaseOrder
from backend.finance.models import Invoice, InvoiceItem, CustomerReceipt
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False, roles=None):
        """Create a test user, optionally placed in role groups"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        for role in roles or []:
            group, _ = Group.objects.get_or_create(name=role)
            user.groups.add(group)
        return user

    @staticmethod
    def create_customer(name=None, pan_number=None, is_export=False, payment_terms_days=None):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(
            customer_name=name,
            party_code=f'C-{TestDataFactory.random_string(6).upper()}',
            pan_number=pan_number,
            is_export_customer=is_export,
            payment_terms_days=payment_terms_days,
        )

    @staticmethod
    def create_supplier(name=None, pan_number=None):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            code=f'S-{TestDataFactory.random_string(6).upper()}',
            pan_number=pan_number,
            phone=f'9{random.randint(100000000, 999999999)}',
        )

    @staticmethod
    def create_partner(name=None, process_type='Plating'):
        """Create a test external job-work partner"""
        if not name:
            name = f'Partner_{TestDataFactory.random_string(6)}'
        return ExternalPartner.objects.create(name=name, process_type=process_type)

    @staticmethod
    def create_machine(machine_id=None, name=None):
        """Create a test machine"""
        if not machine_id:
            machine_id = f'CNC-{TestDataFactory.random_string(4).upper()}'
        return Machine.objects.create(machine_id=machine_id, name=name or f'Machine {machine_id}')

    @staticmethod
    def create_work_order(customer=None, item_code='ITEM-100', quantity=1000, status='in_progress', **fields):
        """Create a test work order"""
        if customer is None:
            customer = TestDataFactory.create_customer()
        return WorkOrder.objects.create(
            wo_number=f'WO-{TestDataFactory.random_string(8).upper()}',
            customer=customer,
            item_code=item_code,
            quantity=quantity,
            status=status,
            **fields
        )

    @staticmethod
    def create_batch(work_order, batch_number=1, quantity=500, **fields):
        """Create a test production batch"""
        return ProductionBatch.objects.create(
            work_order=work_order,
            batch_number=batch_number,
            quantity=quantity,
            **fields
        )

    @staticmethod
    def create_rpo(supplier=None, qty_ordered_kg=None, rate_per_kg=None, status='approved', work_order=None):
        """Create a test raw purchase order"""
        if supplier is None:
            supplier = TestDataFactory.create_supplier()
        return RawPurchaseOrder.objects.create(
            rpo_no=f'RPO-{TestDataFactory.random_string(6).upper()}',
            supplier=supplier,
            work_order=work_order,
            material_grade='EN8',
            qty_ordered_kg=qty_ordered_kg if qty_ordered_kg is not None else Decimal('1000.000'),
            rate_per_kg=rate_per_kg if rate_per_kg is not None else Decimal('80.00'),
            status=status,
        )

    @staticmethod
    def create_invoice(customer=None, amount=None, gst_percent=Decimal('0.00'), status='issued',
                       invoice_date=None, due_date=None):
        """
        Create a test invoice with a single line.
        GST defaults to zero so the invoice total equals the line amount.
        """
        from backend.finance.services import recalculate_invoice

        if customer is None:
            customer = TestDataFactory.create_customer()
        if amount is None:
            amount = Decimal('1000.00')
        invoice_date = invoice_date or timezone.localdate()
        invoice = Invoice.objects.create(
            invoice_no=f'SI-{TestDataFactory.random_string(8).upper()}',
            customer=customer,
            invoice_date=invoice_date,
            due_date=due_date or invoice_date + timedelta(days=30),
            gst_percent=gst_percent,
            status=status,
        )
        InvoiceItem.objects.create(
            invoice=invoice,
            description='Machined parts',
            quantity=Decimal('1.000'),
            rate=amount,
            gst_percent=gst_percent,
        )
        return recalculate_invoice(invoice)

    @staticmethod
    def create_receipt(customer=None, total_amount=None, receipt_date=None):
        """Create a test receipt directly (no TDS record)"""
        if customer is None:
            customer = TestDataFactory.create_customer()
        if total_amount is None:
            total_amount = Decimal('1000.00')
        return CustomerReceipt.objects.create(
            receipt_no=f'RC-{TestDataFactory.random_string(8).upper()}',
            customer=customer,
            receipt_date=receipt_date or timezone.localdate(),
            total_amount=total_amount,
            unallocated_amount=total_amount,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
