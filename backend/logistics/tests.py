"""
Test suite for the Logistics module
Tests: cartons, pallets, shipments gated on final QC, batch dispatch, dispatch eligibility
"""
from django.test import TestCase
from rest_framework import status
from backend.core.exceptions import BusinessRuleError
from backend.core.models import AuditLog
from backend.core.permissions import ROLE_PACKING, ROLE_PRODUCTION
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import FinishedGoodsStock
from backend.logistics.models import Carton, Pallet, ScanEvent, Shipment
from backend.logistics.services import create_shipment_for_pallet, dispatch_eligibility
from backend.production.models import WorkOrder


class PackingAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_PACKING])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order()

    def test_pack_carton_onto_pallet(self):
        pallet = self.client.post('/api/v1/pallets/', {'pallet_id': 'PAL-1'}, format='json')
        self.assertEqual(pallet.status_code, status.HTTP_201_CREATED)

        response = self.client.post(
            '/api/v1/cartons/', {'carton_id': 'CTN-1', 'work_order': self.work_order.id, 'quantity': 250}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'packed')

        response = self.client.patch(
            f"/api/v1/cartons/{response.data['id']}/", {'pallet': pallet.data['id']}, format='json'
        )
        self.assertEqual(response.data['pallet_code'], 'PAL-1')

        response = self.client.get('/api/v1/pallets/PAL-1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['cartons']), 1)
        self.assertFalse(response.data['dispatch_allowed'])

    def test_packing_requires_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_PRODUCTION]))
        response = self.client.post('/api/v1/pallets/', {'pallet_id': 'PAL-9'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('error', response.data)

    def test_carton_list_filters(self):
        Carton.objects.create(carton_id='CTN-A', work_order=self.work_order, quantity=10, status='ready_for_dispatch')
        Carton.objects.create(carton_id='CTN-B', work_order=self.work_order, quantity=10)
        response = self.client.get(f'/api/v1/cartons/?wo={self.work_order.id}&status=ready_for_dispatch')
        self.assertEqual(response.data['count'], 1)


class ShipmentAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_PACKING])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Acme Valves')
        self.work_order = TestDataFactory.create_work_order(customer=self.customer, dispatch_allowed=True)
        self.pallet = Pallet.objects.create(pallet_id='PAL-1', status='ready_for_dispatch')
        Carton.objects.create(carton_id='CTN-1', work_order=self.work_order, quantity=100, pallet=self.pallet)
        Carton.objects.create(carton_id='CTN-2', work_order=self.work_order, quantity=100, pallet=self.pallet)

    def test_ship_pallet(self):
        response = self.client.post('/api/v1/shipments/', {'pallet_id': 'PAL-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['ship_id'].startswith('SHIP-'))
        self.assertEqual(response.data['customer_name'], 'Acme Valves')
        self.assertEqual(response.data['incoterm'], 'EXW')

        self.pallet.refresh_from_db()
        self.assertEqual(self.pallet.status, 'dispatched')
        self.assertEqual(Carton.objects.filter(status='dispatched').count(), 2)
        event = ScanEvent.objects.get(entity_id='PAL-1')
        self.assertEqual(event.from_stage, 'ready_for_dispatch')
        self.assertTrue(AuditLog.objects.filter(action='shipment_create').exists())

        response = self.client.post('/api/v1/shipments/', {'pallet_id': 'PAL-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Pallet has already been dispatched')

    def test_stale_pallet_is_reread_before_shipping(self):
        stale = Pallet.objects.get(pallet_id='PAL-1')
        # A concurrent request shipped the pallet after this copy was read
        Pallet.objects.filter(pk=stale.pk).update(status='dispatched')
        with self.assertRaisesMessage(BusinessRuleError, 'Pallet has already been dispatched'):
            create_shipment_for_pallet(stale, user=self.user)
        self.assertFalse(Shipment.objects.exists())

    def test_final_qc_gate(self):
        WorkOrder.objects.filter(pk=self.work_order.pk).update(dispatch_allowed=False)
        response = self.client.post('/api/v1/shipments/', {'pallet_id': 'PAL-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot dispatch: Final QC not passed')
        self.assertFalse(Shipment.objects.exists())

    def test_empty_pallet(self):
        Pallet.objects.create(pallet_id='PAL-EMPTY')
        response = self.client.post('/api/v1/shipments/', {'pallet_id': 'PAL-EMPTY'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_pallet(self):
        response = self.client.post('/api/v1/shipments/', {'pallet_id': 'PAL-404'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class DispatchAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_PACKING])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order(item_code='SH-20')
        self.batch = TestDataFactory.create_batch(self.work_order, qc_approved_qty=400)

    def dispatch(self, quantity, batch=None):
        data = {'work_order': self.work_order.id, 'batch': (batch or self.batch).id, 'quantity': quantity}
        return self.client.post('/api/v1/dispatches/', data, format='json')

    def test_dispatch_and_reverse(self):
        response = self.dispatch(150)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['batch_number'], 1)
        self.batch.refresh_from_db()
        self.work_order.refresh_from_db()
        self.assertEqual(self.batch.dispatched_qty, 150)
        self.assertEqual(self.work_order.qty_dispatched, 150)

        response = self.client.delete(f"/api/v1/dispatches/{response.data['id']}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.batch.refresh_from_db()
        self.work_order.refresh_from_db()
        self.assertEqual(self.batch.dispatched_qty, 0)
        self.assertEqual(self.work_order.qty_dispatched, 0)
        self.assertTrue(AuditLog.objects.filter(action='dispatch_delete').exists())

    def test_cannot_exceed_approved_quantity(self):
        self.dispatch(300)
        response = self.dispatch(101)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot dispatch 101 pcs. Only 100 pcs available')
        self.assertEqual(response.data['field'], 'quantity')

    def test_batch_must_belong_to_work_order(self):
        other_batch = TestDataFactory.create_batch(TestDataFactory.create_work_order(), qc_approved_qty=100)
        response = self.dispatch(10, batch=other_batch)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'batch')

    def test_zero_quantity_rejected(self):
        response = self.dispatch(0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_eligibility(self):
        Carton.objects.create(carton_id='CTN-R1', work_order=self.work_order, quantity=120, status='ready_for_dispatch')
        Carton.objects.create(carton_id='CTN-R2', work_order=self.work_order, quantity=80, status='ready_for_dispatch')
        Carton.objects.create(carton_id='CTN-P', work_order=self.work_order, quantity=50)
        FinishedGoodsStock.objects.create(item_code='SH-20', quantity_available=70)
        self.dispatch(100)

        rows = dispatch_eligibility(WorkOrder.objects.filter(pk=self.work_order.pk))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['ready_cartons'], 2)
        self.assertEqual(rows[0]['ready_carton_qty'], 200)
        self.assertEqual(rows[0]['batch_available_qty'], 300)
        self.assertEqual(rows[0]['inventory_qty'], 70)
        self.assertEqual(rows[0]['total_available'], 270)

        response = self.client.get(f'/api/v1/dispatch/eligibility/?wo={self.work_order.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['wo_number'], self.work_order.wo_number)
