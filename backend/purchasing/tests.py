"""
Test suite for the Purchasing module
Tests: raw purchase orders, receipts and short/excess supply reconciliation
"""
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.permissions import ROLE_ACCOUNTS, ROLE_STORES
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.purchasing.models import RawPOReceipt, RawPOReconciliation, RawPurchaseOrder


class RawPurchaseOrderModelTests(TestCase):

    def test_received_qty_sums_receipts(self):
        rpo = TestDataFactory.create_rpo()
        self.assertEqual(rpo.received_qty_kg, Decimal('0.000'))
        today = timezone.localdate()
        RawPOReceipt.objects.create(rpo=rpo, qty_received_kg=Decimal('250.500'), received_date=today)
        RawPOReceipt.objects.create(rpo=rpo, qty_received_kg=Decimal('100.000'), received_date=today)
        self.assertEqual(rpo.received_qty_kg, Decimal('350.500'))


class RawPurchaseOrderAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_STORES])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(name='Steel Mart')

    def test_create_rpo(self):
        data = {
            'rpo_no': 'RPO-2025-01',
            'supplier': self.supplier.id,
            'material_grade': 'EN8',
            'qty_ordered_kg': '1500.000',
            'rate_per_kg': '78.50',
            'status': 'approved',
        }
        response = self.client.post('/api/v1/raw-purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['supplier_name'], 'Steel Mart')
        self.assertEqual(response.data['received_qty_kg'], '0.000')

    def test_zero_quantity_rejected(self):
        data = {'rpo_no': 'RPO-X', 'supplier': self.supplier.id, 'material_grade': 'EN8', 'qty_ordered_kg': '0'}
        response = self.client.post('/api/v1/raw-purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('qty_ordered_kg', response.data)

    def test_status_filter(self):
        TestDataFactory.create_rpo(supplier=self.supplier, status='approved')
        TestDataFactory.create_rpo(supplier=self.supplier, status='closed')
        response = self.client.get('/api/v1/raw-purchase-orders/?status=approved,part_received')
        self.assertEqual(response.data['count'], 1)

    def test_delete_refused_with_receipts(self):
        rpo = TestDataFactory.create_rpo(supplier=self.supplier)
        RawPOReceipt.objects.create(rpo=rpo, qty_received_kg=Decimal('10'), received_date=timezone.localdate())
        response = self.client.delete(f'/api/v1/raw-purchase-orders/{rpo.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(RawPurchaseOrder.objects.filter(pk=rpo.id).exists())


class ReconciliationAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_ACCOUNTS])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        rpo = TestDataFactory.create_rpo(status='closed')
        self.reconciliation = RawPOReconciliation.objects.create(
            rpo=rpo,
            reason='short_supply',
            qty_delta_kg=Decimal('-20.000'),
            rate_per_kg=Decimal('80.00'),
            amount_delta=Decimal('-1600.00'),
        )

    def test_list_pending(self):
        response = self.client.get('/api/v1/reconciliations/?resolution=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_resolve_with_credit_note(self):
        url = f'/api/v1/reconciliations/{self.reconciliation.id}/resolve/'
        response = self.client.post(url, {'resolution': 'credit_note', 'notes': 'CN-77'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['resolution'], 'credit_note')
        self.assertIsNotNone(response.data['resolved_at'])

        response = self.client.post(url, {'resolution': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_resolve_requires_accounts_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_STORES]))
        url = f'/api/v1/reconciliations/{self.reconciliation.id}/resolve/'
        response = self.client.post(url, {'resolution': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
