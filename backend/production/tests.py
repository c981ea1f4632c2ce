"""
Test suite for the Production module
Tests: work orders, batches, machines, daily production logs
"""
from datetime import date
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.production.models import DailyProductionLog


class DailyProductionLogModelTests(TestCase):

    def test_totals_derived_from_breakdown(self):
        work_order = TestDataFactory.create_work_order()
        log = DailyProductionLog.objects.create(
            work_order=work_order,
            log_date=date(2025, 1, 10),
            actual_quantity=100,
            rework_quantity=5,
            rejection_dimension=3,
            rejection_scratch=2,
        )
        self.assertEqual(log.total_rejection_quantity, 5)
        self.assertEqual(log.ok_quantity, 90)

    def test_ok_quantity_not_negative(self):
        work_order = TestDataFactory.create_work_order()
        log = DailyProductionLog.objects.create(
            work_order=work_order, log_date=date(2025, 1, 10), actual_quantity=2, rejection_dent=5
        )
        self.assertEqual(log.ok_quantity, 0)


class WorkOrderAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Acme Valves')

    def test_create_work_order(self):
        data = {'wo_number': 'WO-1001', 'customer': self.customer.id, 'item_code': 'SH-20', 'quantity': 5000}
        response = self.client.post('/api/v1/work-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Acme Valves')
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['material_location'], 'Factory')

    def test_tracked_quantities_are_read_only(self):
        work_order = TestDataFactory.create_work_order(customer=self.customer)
        response = self.client.patch(
            f'/api/v1/work-orders/{work_order.id}/', {'qty_dispatched': 999, 'status': 'qc'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['qty_dispatched'], 0)
        self.assertEqual(response.data['status'], 'qc')

    def test_list_filters(self):
        TestDataFactory.create_work_order(customer=self.customer, item_code='SH-20', status='pending')
        TestDataFactory.create_work_order(customer=self.customer, item_code='FL-40', status='completed')
        response = self.client.get('/api/v1/work-orders/?status=pending,in_progress')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/work-orders/?search=FL-40')
        self.assertEqual(response.data['count'], 1)

    def test_batches_numbered_in_sequence(self):
        work_order = TestDataFactory.create_work_order(customer=self.customer)
        first = self.client.post(f'/api/v1/work-orders/{work_order.id}/batches/', {'quantity': 200}, format='json')
        second = self.client.post(f'/api/v1/work-orders/{work_order.id}/batches/', {'quantity': 300}, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['batch_number'], 1)
        self.assertEqual(second.data['batch_number'], 2)

        response = self.client.get(f'/api/v1/work-orders/{work_order.id}/batches/')
        self.assertEqual(len(response.data), 2)

    def test_batch_available_to_dispatch(self):
        work_order = TestDataFactory.create_work_order(customer=self.customer)
        batch = TestDataFactory.create_batch(work_order, qc_approved_qty=400, dispatched_qty=150)
        response = self.client.get(f'/api/v1/batches/{batch.id}/')
        self.assertEqual(response.data['available_to_dispatch'], 250)


class ProductionLogAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order()
        self.machine = TestDataFactory.create_machine(machine_id='CNC-01')

    def test_record_log(self):
        data = {
            'work_order': self.work_order.id,
            'machine': self.machine.id,
            'log_date': '2025-01-10',
            'shift': 'A',
            'actual_quantity': 120,
            'rejection_tool_mark': 4,
            'total_rejection_quantity': 999,
        }
        response = self.client.post('/api/v1/production-logs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_rejection_quantity'], 4)
        self.assertEqual(response.data['ok_quantity'], 116)
        self.assertEqual(response.data['operator'], self.user.id)

    def test_latest_log(self):
        DailyProductionLog.objects.create(
            work_order=self.work_order, machine=self.machine, log_date=date(2025, 1, 9), actual_quantity=10
        )
        DailyProductionLog.objects.create(
            work_order=self.work_order, machine=self.machine, log_date=date(2025, 1, 10), actual_quantity=20
        )
        response = self.client.get(
            f'/api/v1/production-logs/latest/?wo={self.work_order.id}&machine={self.machine.id}'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['log_date'], '2025-01-10')

    def test_latest_log_requires_params(self):
        response = self.client.get('/api/v1/production-logs/latest/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_machine_status_filter(self):
        TestDataFactory.create_machine(machine_id='CNC-02')
        self.client.patch(f'/api/v1/machines/{self.machine.id}/', {'status': 'running'}, format='json')
        response = self.client.get('/api/v1/machines/?status=running')
        self.assertEqual([row['machine_id'] for row in response.data], ['CNC-01'])
