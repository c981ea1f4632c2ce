"""
Test suite for the Finance module
Tests: TDS rules, invoices, payments, receipts and allocation, supplier payments, overdue marking
"""
from io import StringIO
from datetime import date, timedelta
from decimal import Decimal
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.permissions import ROLE_ACCOUNTS, ROLE_DIRECTOR, ROLE_STORES
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.finance.models import Invoice, ReceiptAllocation, TDSRecord
from backend.finance.services import mark_overdue_invoices
from backend.finance.tds import calculate_tds, get_entity_type, get_financial_year, get_quarter, get_tds_rate


class TDSRuleTests(TestCase):
    """PAN based TDS rates and period helpers"""

    def test_rate_by_entity(self):
        self.assertEqual(get_tds_rate('ABCPK1234L'), Decimal('1'))
        self.assertEqual(get_tds_rate('AAACB1234F'), Decimal('2'))
        self.assertEqual(get_tds_rate(None), Decimal('2'))
        self.assertEqual(get_tds_rate('ABCPK1234L', is_export=True), Decimal('0'))

    def test_entity_type(self):
        self.assertEqual(get_entity_type('abcpk1234l'), 'Individual/Proprietorship')
        self.assertEqual(get_entity_type('AAACB1234F'), 'Company')
        self.assertEqual(get_entity_type('AAAZB1234F'), 'Other')
        self.assertEqual(get_entity_type(''), 'Unknown')

    def test_financial_year_and_quarter(self):
        self.assertEqual(get_financial_year(date(2024, 4, 1)), '2024-2025')
        self.assertEqual(get_financial_year(date(2025, 3, 31)), '2024-2025')
        self.assertEqual(get_quarter(date(2024, 4, 1)), 'Q1')
        self.assertEqual(get_quarter(date(2024, 9, 30)), 'Q2')
        self.assertEqual(get_quarter(date(2024, 12, 1)), 'Q3')
        self.assertEqual(get_quarter(date(2025, 2, 1)), 'Q4')

    def test_calculate_tds_rounds_half_up(self):
        tds, net = calculate_tds(Decimal('1000.50'), Decimal('1'))
        self.assertEqual(tds, Decimal('10.01'))
        self.assertEqual(net, Decimal('990.49'))


class FinanceAPITestBase(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_ACCOUNTS])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(payment_terms_days=45)


class InvoiceAPITests(FinanceAPITestBase):

    def create_invoice(self, **overrides):
        data = {
            'customer': self.customer.id,
            'invoice_date': '2025-01-10',
            'items': [{'description': 'Shaft 20mm', 'item_code': 'SH-20', 'quantity': '10', 'rate': '100.00'}],
        }
        data.update(overrides)
        return self.client.post('/api/v1/invoices/', data, format='json')

    def test_create_invoice_computes_totals(self):
        response = self.create_invoice()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['invoice_no'], 'INV-001')
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(Decimal(response.data['subtotal']), Decimal('1000.00'))
        self.assertEqual(Decimal(response.data['gst_amount']), Decimal('180.00'))
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('1180.00'))
        self.assertEqual(Decimal(response.data['balance_amount']), Decimal('1180.00'))
        # Customer terms are 45 days
        self.assertEqual(response.data['due_date'], '2025-02-24')

    def test_invoice_numbers_increment(self):
        self.create_invoice()
        response = self.create_invoice()
        self.assertEqual(response.data['invoice_no'], 'INV-002')

    def test_invoice_number_after_manual_number(self):
        self.create_invoice()
        response = self.create_invoice(invoice_no='INV-2025/A')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.create_invoice()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['invoice_no'], 'INV-002')

    def test_duplicate_invoice_number_rejected(self):
        self.assertEqual(self.create_invoice(invoice_no='INV-777').status_code, status.HTTP_201_CREATED)
        response = self.create_invoice(invoice_no='INV-777')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('invoice_no', response.data)
        self.assertEqual(Invoice.objects.filter(invoice_no='INV-777').count(), 1)

    def test_gst_rounds_half_up(self):
        # 1.25 at 18% is 0.225
        items = [{'description': 'Washer', 'quantity': '1', 'rate': '1.25', 'gst_percent': '18.00'}]
        response = self.create_invoice(items=items)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['items'][0]['gst_amount']), Decimal('0.23'))
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('1.48'))

    def test_create_invoice_without_items(self):
        data = {'customer': self.customer.id, 'items': []}
        response = self.client.post('/api/v1/invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_issue_invoice(self):
        invoice_id = self.create_invoice().data['id']
        response = self.client.post(f'/api/v1/invoices/{invoice_id}/issue/', format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'issued')

        response = self.client.post(f'/api/v1/invoices/{invoice_id}/issue/', format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_void_invoice_without_payments(self):
        invoice = TestDataFactory.create_invoice(customer=self.customer)
        response = self.client.post(f'/api/v1/invoices/{invoice.id}/void/', {'reason': 'Wrong rate'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'void')
        self.assertTrue(AuditLog.objects.filter(action='invoice_void', object_id=str(invoice.id)).exists())

    def test_list_filters_by_status(self):
        TestDataFactory.create_invoice(customer=self.customer, status='issued')
        TestDataFactory.create_invoice(customer=self.customer, status='draft')
        response = self.client.get('/api/v1/invoices/?status=issued,overdue')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_update_follow_up_fields(self):
        invoice = TestDataFactory.create_invoice(customer=self.customer)
        response = self.client.patch(
            f'/api/v1/invoices/{invoice.id}/',
            {'recovery_stage': 'friendly', 'expected_payment_date': '2025-03-01'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['expected_payment_date'], '2025-03-01')


class PaymentAPITests(FinanceAPITestBase):

    def setUp(self):
        super().setUp()
        self.invoice = TestDataFactory.create_invoice(customer=self.customer, amount=Decimal('1000.00'))

    def pay(self, amount, invoice=None):
        data = {'invoice': (invoice or self.invoice).id, 'amount': amount, 'method': 'upi'}
        return self.client.post('/api/v1/payments/', data, format='json')

    def test_partial_then_full_payment(self):
        response = self.pay('400.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, 'part_paid')
        self.assertEqual(self.invoice.balance_amount, Decimal('600.00'))

        self.pay('600.00')
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, 'paid')
        self.assertEqual(self.invoice.balance_amount, Decimal('0.00'))

    def test_payment_exceeding_balance(self):
        response = self.pay('1000.01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'amount')

    def test_payment_on_draft_invoice(self):
        draft = TestDataFactory.create_invoice(customer=self.customer, status='draft')
        response = self.pay('100.00', invoice=draft)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_void_refused_after_payment(self):
        self.pay('100.00')
        response = self.client.post(f'/api/v1/invoices/{self.invoice.id}/void/', format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, 'part_paid')


class ReceiptAPITests(FinanceAPITestBase):

    def test_receipt_raises_receivable_tds(self):
        customer = TestDataFactory.create_customer(pan_number='abcpk1234l')
        data = {'customer': customer.id, 'total_amount': '10000.00', 'method': 'bank_transfer'}
        response = self.client.post('/api/v1/receipts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['receipt_no'], 'RCP-001')
        self.assertEqual(Decimal(response.data['tds_amount']), Decimal('100.00'))
        self.assertEqual(response.data['status'], 'pending')

        record = TDSRecord.objects.get(receipt_id=response.data['id'])
        self.assertEqual(record.record_type, 'receivable')
        self.assertEqual(record.pan_number, 'ABCPK1234L')
        self.assertEqual(record.net_amount, Decimal('9900.00'))
        self.assertEqual(record.financial_year, get_financial_year(timezone.localdate()))

    def test_export_customer_has_no_tds(self):
        customer = TestDataFactory.create_customer(pan_number='ABCPK1234L', is_export=True)
        data = {'customer': customer.id, 'total_amount': '5000.00'}
        response = self.client.post('/api/v1/receipts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['tds_amount']), Decimal('0.00'))
        self.assertFalse(TDSRecord.objects.exists())

    def test_zero_receipt_rejected(self):
        data = {'customer': self.customer.id, 'total_amount': '0.00'}
        response = self.client.post('/api/v1/receipts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receipt_number_after_manual_number(self):
        data = {'customer': self.customer.id, 'total_amount': '100.00'}
        self.assertEqual(self.client.post('/api/v1/receipts/', data, format='json').data['receipt_no'], 'RCP-001')
        manual = self.client.post('/api/v1/receipts/', {**data, 'receipt_no': 'RCP-2025/A'}, format='json')
        self.assertEqual(manual.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/receipts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['receipt_no'], 'RCP-002')


class AllocationAPITests(FinanceAPITestBase):

    def setUp(self):
        super().setUp()
        today = timezone.localdate()
        self.older = TestDataFactory.create_invoice(
            customer=self.customer, amount=Decimal('1000.00'), due_date=today - timedelta(days=10)
        )
        self.newer = TestDataFactory.create_invoice(
            customer=self.customer, amount=Decimal('1000.00'), due_date=today + timedelta(days=20)
        )

    def allocate(self, receipt, lines):
        return self.client.post(f'/api/v1/receipts/{receipt.id}/allocate/', {'allocations': lines}, format='json')

    def test_manual_allocation(self):
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('1500.00'))
        response = self.allocate(receipt, [
            {'invoice': self.older.id, 'amount': '1000.00'},
            {'invoice': self.newer.id, 'amount': '500.00'},
        ])
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'fully_allocated')
        self.assertEqual(Decimal(response.data['unallocated_amount']), Decimal('0.00'))
        self.older.refresh_from_db()
        self.newer.refresh_from_db()
        self.assertEqual(self.older.status, 'paid')
        self.assertEqual(self.newer.status, 'part_paid')
        self.assertEqual(self.newer.balance_amount, Decimal('500.00'))

    def test_allocation_exceeding_unallocated(self):
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('500.00'))
        response = self.allocate(receipt, [
            {'invoice': self.older.id, 'amount': '400.00'},
            {'invoice': self.newer.id, 'amount': '400.00'},
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Total allocation exceeds unallocated amount')
        self.assertFalse(ReceiptAllocation.objects.exists())

    def test_allocation_capped_at_invoice_balance(self):
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('2000.00'))
        response = self.allocate(receipt, [{'invoice': self.older.id, 'amount': '1500.00'}])
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'partially_allocated')
        self.assertEqual(Decimal(response.data['allocated_amount']), Decimal('1000.00'))

    def test_allocation_to_other_customer_invoice(self):
        other = TestDataFactory.create_invoice()
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('500.00'))
        response = self.allocate(receipt, [{'invoice': other.id, 'amount': '100.00'}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_auto_allocate_oldest_due_first(self):
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('1500.00'))
        response = self.client.post(f'/api/v1/receipts/{receipt.id}/auto-allocate/', format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.older.refresh_from_db()
        self.newer.refresh_from_db()
        self.assertEqual(self.older.balance_amount, Decimal('0.00'))
        self.assertEqual(self.newer.balance_amount, Decimal('500.00'))

    def test_open_invoices(self):
        TestDataFactory.create_invoice(customer=self.customer, status='draft')
        receipt = TestDataFactory.create_receipt(customer=self.customer)
        response = self.client.get(f'/api/v1/receipts/{receipt.id}/open-invoices/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [self.older.id, self.newer.id])

    def test_remove_allocation_then_cancel(self):
        receipt = TestDataFactory.create_receipt(customer=self.customer, total_amount=Decimal('1000.00'))
        self.allocate(receipt, [{'invoice': self.older.id, 'amount': '1000.00'}])

        response = self.client.post(f'/api/v1/receipts/{receipt.id}/cancel/', format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        allocation = ReceiptAllocation.objects.get(receipt=receipt)
        response = self.client.delete(f'/api/v1/receipts/{receipt.id}/allocations/{allocation.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'pending')
        self.older.refresh_from_db()
        self.assertEqual(self.older.status, 'issued')
        self.assertEqual(self.older.balance_amount, Decimal('1000.00'))

        response = self.client.post(f'/api/v1/receipts/{receipt.id}/cancel/', format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')


class SupplierPaymentTDSTests(FinanceAPITestBase):

    def test_supplier_payment_raises_payable_tds(self):
        supplier = TestDataFactory.create_supplier(pan_number='AAACB1234F')
        data = {'supplier': supplier.id, 'amount': '50000.00', 'reference_no': 'NEFT-1'}
        response = self.client.post('/api/v1/supplier-payments/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['tds_amount']), Decimal('1000.00'))
        record = TDSRecord.objects.get(supplier=supplier)
        self.assertEqual(record.record_type, 'payable')
        self.assertEqual(record.entity_type, 'Company')

    def test_supplier_without_pan(self):
        supplier = TestDataFactory.create_supplier()
        data = {'supplier': supplier.id, 'amount': '1000.00'}
        response = self.client.post('/api/v1/supplier-payments/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(TDSRecord.objects.exists())

    def test_tds_status_update(self):
        supplier = TestDataFactory.create_supplier(pan_number='AAACB1234F')
        self.client.post('/api/v1/supplier-payments/', {'supplier': supplier.id, 'amount': '100.00'}, format='json')
        record = TDSRecord.objects.get()
        response = self.client.patch(f'/api/v1/tds-records/{record.id}/status/', {'status': 'filed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'filed')

        response = self.client.get('/api/v1/tds-records/?status=filed&record_type=payable')
        self.assertEqual(response.data['count'], 1)


class OverdueTests(FinanceAPITestBase):

    def setUp(self):
        super().setUp()
        today = timezone.localdate()
        self.past_due = TestDataFactory.create_invoice(customer=self.customer, due_date=today - timedelta(days=1))
        self.not_due = TestDataFactory.create_invoice(customer=self.customer, due_date=today + timedelta(days=1))
        self.draft = TestDataFactory.create_invoice(
            customer=self.customer, status='draft', due_date=today - timedelta(days=5)
        )

    def test_mark_overdue(self):
        self.assertEqual(mark_overdue_invoices(), 1)
        self.past_due.refresh_from_db()
        self.not_due.refresh_from_db()
        self.draft.refresh_from_db()
        self.assertEqual(self.past_due.status, 'overdue')
        self.assertEqual(self.not_due.status, 'issued')
        self.assertEqual(self.draft.status, 'draft')

    def test_mark_overdue_endpoint(self):
        response = self.client.post('/api/v1/invoices/mark-overdue/', format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 1)

    def test_command_dry_run_changes_nothing(self):
        out = StringIO()
        call_command('mark_overdue', '--dry-run', stdout=out)
        self.assertIn(self.past_due.invoice_no, out.getvalue())
        self.assertEqual(Invoice.objects.filter(status='overdue').count(), 0)

    def test_command_as_of(self):
        out = StringIO()
        as_of = (timezone.localdate() + timedelta(days=2)).isoformat()
        call_command('mark_overdue', f'--as-of={as_of}', stdout=out)
        self.assertEqual(Invoice.objects.filter(status='overdue').count(), 2)


class FinanceRolesTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.invoice = TestDataFactory.create_invoice(status='draft')

    def test_stores_user_cannot_view_invoices(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_STORES]))
        response = self.client.get('/api/v1/invoices/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_director_can_view_but_not_issue(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_DIRECTOR]))
        response = self.client.get('/api/v1/invoices/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(f'/api/v1/invoices/{self.invoice.id}/issue/', format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_superuser_without_group_is_admin(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_superuser=True, is_staff=True))
        response = self.client.post(f'/api/v1/invoices/{self.invoice.id}/issue/', format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
