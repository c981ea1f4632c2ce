"""
Test suite for the Inventory module
Tests: material lot QC, inventory lots, finished goods stock
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.permissions import ROLE_QUALITY, ROLE_STORES
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import FinishedGoodsStock, InventoryLot, MaterialLot
from backend.inventory.utils import finished_goods_summary


class FinishedGoodsSummaryTests(TestCase):

    def test_summary_skips_empty_lots(self):
        FinishedGoodsStock.objects.create(item_code='SH-20', quantity_available=100, quantity_reserved=20)
        FinishedGoodsStock.objects.create(item_code='SH-20', quantity_available=50)
        FinishedGoodsStock.objects.create(item_code='FL-40', quantity_available=0, quantity_reserved=5)

        summary = finished_goods_summary()
        self.assertEqual(summary, {'SH-20': {'available': 150, 'reserved': 20}})
        self.assertEqual(finished_goods_summary(['FL-40']), {})


class MaterialLotAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.lot = MaterialLot.objects.create(
            lot_id='GIN-1-H1', heat_no='H1', material_grade='EN8',
            gross_weight=Decimal('520.000'), net_weight=Decimal('500.000'), gate_entry_no='GIN-1'
        )

    def test_list_filters(self):
        MaterialLot.objects.create(lot_id='GIN-2-H7', heat_no='H7', qc_status='approved')
        response = self.client.get('/api/v1/material-lots/?qc_status=pending')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/material-lots/?search=H7')
        self.assertEqual(response.data['results'][0]['lot_id'], 'GIN-2-H7')

    def test_approve_lot(self):
        response = self.client.post(
            f'/api/v1/material-lots/{self.lot.id}/qc/', {'qc_status': 'approved'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['qc_status'], 'approved')
        self.assertTrue(AuditLog.objects.filter(action='material_qc_update', object_id=str(self.lot.id)).exists())

    def test_reject_requires_remarks(self):
        response = self.client.post(
            f'/api/v1/material-lots/{self.lot.id}/qc/', {'qc_status': 'rejected'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('qc_remarks', response.data)

    def test_qc_not_required_lot(self):
        lot = MaterialLot.objects.create(lot_id='GIN-3-H2', qc_status='not_required')
        response = self.client.post(f'/api/v1/material-lots/{lot.id}/qc/', {'qc_status': 'approved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_qc_update_requires_quality_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_STORES]))
        response = self.client.post(
            f'/api/v1/material-lots/{self.lot.id}/qc/', {'qc_status': 'approved'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class InventoryLotAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_with_value(self):
        rpo = TestDataFactory.create_rpo()
        InventoryLot.objects.create(
            lot_id='LOT-1', material_grade='EN8', qty_kg=Decimal('100.500'), cost_rate=Decimal('80.00'),
            rpo=rpo, source='rpo', received_date=date(2025, 1, 10)
        )
        InventoryLot.objects.create(lot_id='LOT-2', material_grade='SS304', qty_kg=Decimal('5'), received_date=date(2025, 1, 11))

        response = self.client.get('/api/v1/inventory-lots/?source=rpo')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['value'], '8040.00')
        self.assertEqual(response.data['results'][0]['rpo_no'], rpo.rpo_no)

        response = self.client.get('/api/v1/inventory-lots/?material_grade=ss304')
        self.assertEqual(response.data['count'], 1)


class FinishedGoodsAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_list(self):
        customer = TestDataFactory.create_customer(name='Acme Valves')
        data = {'item_code': 'SH-20', 'customer': customer.id, 'quantity_available': 300, 'source_type': 'customer_return'}
        response = self.client.post('/api/v1/finished-goods/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Acme Valves')
        self.assertEqual(FinishedGoodsStock.objects.get().created_by, self.user)

        FinishedGoodsStock.objects.create(item_code='SH-20', quantity_available=0)
        response = self.client.get('/api/v1/finished-goods/?item_code=SH-20&in_stock=true')
        self.assertEqual(response.data['count'], 1)

    def test_summary_endpoint(self):
        FinishedGoodsStock.objects.create(item_code='SH-20', quantity_available=120, quantity_reserved=10)
        FinishedGoodsStock.objects.create(item_code='FL-40', quantity_available=30)
        response = self.client.get('/api/v1/finished-goods/summary/?item_code=SH-20')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [{'item_code': 'SH-20', 'quantity_available': 120, 'quantity_reserved': 10}])
