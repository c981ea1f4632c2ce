"""
Test suite for the Reports module
Tests: Finance dashboard, AR aging, collections, TDS summary
"""
from datetime import timedelta
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.permissions import ROLE_ACCOUNTS, ROLE_PRODUCTION
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.finance.models import Invoice
from backend.finance.services import create_receipt, record_payment
from backend.finance.tds import get_financial_year, get_quarter
from backend.reports.views import aging_bucket, finance_dashboard_kpis


class AgingBucketTests(TestCase):

    def test_bucket_edges(self):
        self.assertEqual(aging_bucket(0), '0-30')
        self.assertEqual(aging_bucket(30), '0-30')
        self.assertEqual(aging_bucket(31), '31-60')
        self.assertEqual(aging_bucket(90), '61-90')
        self.assertEqual(aging_bucket(91), '90+')


class ReportsTests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user(roles=[ROLE_ACCOUNTS])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Acme Valves')
        today = timezone.localdate()
        self.current = TestDataFactory.create_invoice(
            customer=self.customer, amount=Decimal('1000.00'), due_date=today + timedelta(days=10)
        )
        self.late = TestDataFactory.create_invoice(
            customer=self.customer, amount=Decimal('500.00'), status='overdue',
            invoice_date=today - timedelta(days=70), due_date=today - timedelta(days=40)
        )

    def test_finance_dashboard(self):
        response = self.client.get('/api/v1/reports/finance-dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_ar'], 1500.0)
        self.assertEqual(response.data['overdue_ar'], 500.0)
        self.assertEqual(response.data['sales_90d'], 1500.0)
        self.assertEqual(response.data['invoice_counts']['issued'], 1)
        self.assertEqual(response.data['invoice_counts']['overdue'], 1)
        # 1500 outstanding against 1500 of sales over 90 days
        self.assertEqual(response.data['dso'], 90)

    def test_dashboard_cache_invalidated_by_payment(self):
        today = timezone.localdate()
        self.assertEqual(finance_dashboard_kpis(today)['total_ar'], 1500.0)

        # A bulk update skips the signals, so the cached figures are served
        Invoice.objects.filter(pk=self.current.pk).update(balance_amount=Decimal('0.00'))
        self.assertEqual(finance_dashboard_kpis(today)['total_ar'], 1500.0)

        # Invalidation waits for the commit
        with self.captureOnCommitCallbacks() as callbacks:
            record_payment(self.late, Decimal('200.00'))
        self.assertEqual(finance_dashboard_kpis(today)['total_ar'], 1500.0)

        for callback in callbacks:
            callback()
        kpis = finance_dashboard_kpis(today)
        self.assertEqual(kpis['total_ar'], 300.0)
        self.assertEqual(kpis['collected_30d'], 200.0)

    def test_ar_aging(self):
        response = self.client.get('/api/v1/reports/ar-aging/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {row['invoice_no']: row for row in response.data['invoices']}
        self.assertEqual(rows[self.late.invoice_no]['days_overdue'], 40)
        self.assertEqual(rows[self.late.invoice_no]['bucket'], '31-60')
        self.assertEqual(rows[self.current.invoice_no]['days_overdue'], 0)
        self.assertEqual(response.data['buckets']['0-30'], 1000.0)
        self.assertEqual(response.data['buckets']['31-60'], 500.0)
        self.assertEqual(response.data['total_outstanding'], 1500.0)

    def test_ar_aging_customer_filter(self):
        TestDataFactory.create_invoice()
        response = self.client.get(f'/api/v1/reports/ar-aging/?customer={self.customer.id}')
        self.assertEqual(len(response.data['invoices']), 2)

    def test_collections_current_month(self):
        record_payment(self.current, Decimal('300.00'), method='cheque')
        response = self.client.get('/api/v1/reports/collections/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_collected'], 300.0)
        self.assertEqual(response.data['by_customer'][0]['customer_name'], 'Acme Valves')
        self.assertEqual(response.data['by_method'][0]['method'], 'cheque')

    def test_collections_invalid_period(self):
        response = self.client.get('/api/v1/reports/collections/?period=last_year')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_tds_summary(self):
        customer = TestDataFactory.create_customer(pan_number='AAACB1234F')
        create_receipt(customer, Decimal('10000.00'))
        response = self.client.get('/api/v1/reports/tds-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        today = timezone.localdate()
        self.assertEqual(response.data['financial_year'], get_financial_year(today))
        self.assertEqual(response.data['receivable']['tds_amount'], 200.0)
        self.assertEqual(response.data['receivable']['count'], 1)
        self.assertEqual(response.data['payable']['count'], 0)
        quarter = next(q for q in response.data['quarters'] if q['quarter'] == get_quarter(today))
        self.assertEqual(quarter['pending'], 1)

    def test_tds_summary_invalid_quarter(self):
        response = self.client.get('/api/v1/reports/tds-summary/?quarter=Q5')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reports_need_finance_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_PRODUCTION]))
        response = self.client.get('/api/v1/reports/finance-dashboard/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
