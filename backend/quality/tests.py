"""
Test suite for the Quality module
Tests: tolerances, hourly QC evaluation, QC records, final QC release, block and waiver
"""
from datetime import date
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.permissions import ROLE_ADMIN, ROLE_PRODUCTION, ROLE_QUALITY
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.production.models import DailyProductionLog
from backend.quality.models import DimensionTolerance, HourlyQCCheck, QCFinalReport, QCRecord
from backend.quality.services import evaluate_measurements, has_binary_failure, latest_tolerance

SHAFT_DIMENSIONS = {
    'd1': {'name': 'OD', 'min': 9.95, 'max': 10.05, 'unit': 'mm'},
    'd2': {'name': 'Length', 'min': 20, 'max': 21, 'unit': 'mm'},
}


class HourlyEvaluationTests(TestCase):

    def test_missing_measurement_counts_as_zero(self):
        data, failed = evaluate_measurements(SHAFT_DIMENSIONS, {'d1': '10.01'})
        self.assertEqual(data, {'d1': 10.01, 'd2': 0.0})
        self.assertEqual(failed, ['Length'])

    def test_limits_are_inclusive(self):
        _, failed = evaluate_measurements(SHAFT_DIMENSIONS, {'d1': '9.95', 'd2': '21'})
        self.assertEqual(failed, [])

    def test_binary_failure_only_when_applicable(self):
        self.assertFalse(has_binary_failure({'thread': {'applicable': False, 'status': 'not_ok'}}))
        self.assertFalse(has_binary_failure({'visual': {'applicable': True, 'status': 'na'}}))
        self.assertTrue(has_binary_failure({'plating': {'applicable': True, 'status': 'not_ok'}}))
        self.assertTrue(has_binary_failure({'plating': {'applicable': True}}))

    def test_newest_tolerance_wins(self):
        DimensionTolerance.objects.create(item_code='SH-20', operation='A', dimensions={'d1': {'name': 'Old'}})
        newest = DimensionTolerance.objects.create(item_code='SH-20', operation='A', dimensions=SHAFT_DIMENSIONS)
        self.assertEqual(latest_tolerance('SH-20', 'A'), newest)
        self.assertIsNone(latest_tolerance('SH-20', 'B'))


class ToleranceAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_lookup(self):
        data = {'item_code': 'SH-20', 'operation': 'A', 'dimensions': SHAFT_DIMENSIONS}
        response = self.client.post('/api/v1/tolerances/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.user.id)

        response = self.client.get('/api/v1/tolerances/?item_code=SH-20&operation=A')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['dimensions']['d1']['name'], 'OD')

        response = self.client.get('/api/v1/tolerances/?item_code=SH-20&operation=B')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get('/api/v1/tolerances/')
        self.assertEqual(response.data['count'], 1)

    def test_min_above_max_rejected(self):
        data = {'item_code': 'SH-20', 'operation': 'A', 'dimensions': {'d1': {'name': 'OD', 'min': 11, 'max': 10}}}
        response = self.client.post('/api/v1/tolerances/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('dimensions', response.data)

    def test_create_requires_quality_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_PRODUCTION]))
        data = {'item_code': 'SH-20', 'operation': 'A', 'dimensions': SHAFT_DIMENSIONS}
        response = self.client.post('/api/v1/tolerances/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('error', response.data)


class HourlyQCAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_PRODUCTION])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order(item_code='SH-20')
        self.machine = TestDataFactory.create_machine(machine_id='CNC-01')
        DimensionTolerance.objects.create(item_code='SH-20', operation='A', dimensions=SHAFT_DIMENSIONS)

    def submit(self, **overrides):
        data = {
            'work_order': self.work_order.id,
            'machine': self.machine.id,
            'operation': 'A',
            'measurements': {'d1': '10.00', 'd2': '20.5'},
        }
        data.update(overrides)
        return self.client.post('/api/v1/hourly-qc/', data, format='json')

    def test_passing_check(self):
        response = self.submit()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pass')
        self.assertIsNone(response.data['out_of_tolerance_dimensions'])
        self.assertEqual(response.data['operator'], self.user.id)

    def test_out_of_tolerance_fails(self):
        response = self.submit(measurements={'d1': '10.10', 'd2': '20.5'})
        self.assertEqual(response.data['status'], 'fail')
        self.assertEqual(response.data['out_of_tolerance_dimensions'], ['OD'])

    def test_binary_check_fails(self):
        response = self.submit(binary_checks={'thread': {'applicable': True, 'status': 'not_ok'}})
        self.assertEqual(response.data['status'], 'fail')
        self.assertTrue(response.data['thread_applicable'])
        self.assertEqual(response.data['thread_status'], 'not_ok')

    def test_no_tolerance_rejected(self):
        response = self.submit(operation='B')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'No tolerances defined for this operation')

    def test_machine_required(self):
        response = self.submit(machine=None)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('machine', response.data)

    def test_eligible_work_orders(self):
        TestDataFactory.create_work_order(item_code='NO-TOL')
        self.submit()
        response = self.client.get('/api/v1/hourly-qc/eligible-work-orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['wo_number'], self.work_order.wo_number)
        self.assertEqual(response.data[0]['check_count'], 1)

    def test_list_filter_by_status(self):
        self.submit()
        self.submit(measurements={'d1': '1', 'd2': '1'})
        response = self.client.get(f'/api/v1/hourly-qc/?wo={self.work_order.id}&status=fail')
        self.assertEqual(response.data['count'], 1)


class QCRecordAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order()

    def test_create_pending_then_record_result(self):
        response = self.client.post(
            '/api/v1/qc-records/', {'work_order': self.work_order.id, 'qc_type': 'first_piece'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['qc_id'].startswith('QC-'))
        self.assertIsNone(response.data['inspected_by'])

        response = self.client.patch(f"/api/v1/qc-records/{response.data['id']}/", {'result': 'pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['inspected_by'], self.user.id)
        self.assertIsNotNone(response.data['qc_date'])

    def test_create_requires_quality_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_PRODUCTION]))
        response = self.client.post(
            '/api/v1/qc-records/', {'work_order': self.work_order.id, 'qc_type': 'final'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class FinalQCAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.work_order = TestDataFactory.create_work_order(item_code='SH-20')
        self.machine = TestDataFactory.create_machine()

    def prepare_for_release(self):
        for index, qc_type in enumerate(['incoming', 'first_piece', 'final']):
            QCRecord.objects.create(qc_id=f'QC-T{index}', work_order=self.work_order, qc_type=qc_type, result='pass')
        HourlyQCCheck.objects.create(
            work_order=self.work_order, machine=self.machine, operation='A', dimensions={'d1': 10.0}, status='pass'
        )
        DailyProductionLog.objects.create(
            work_order=self.work_order, machine=self.machine, log_date=date(2025, 1, 10),
            actual_quantity=100, rejection_dimension=4
        )
        QCFinalReport.objects.create(work_order=self.work_order, report_file='reports/final.pdf')

    def test_summary(self):
        self.prepare_for_release()
        response = self.client.get(f'/api/v1/final-qc/{self.work_order.id}/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['production']['total_ok'], 96)
        self.assertEqual(response.data['production']['rejection_breakdown'], {'Dimension': 4})
        self.assertEqual(response.data['hourly_qc_count'], 1)
        self.assertEqual(response.data['hourly_dimension_stats'][0]['avg'], 10.0)
        self.assertTrue(response.data['checklist']['can_release'])

    def test_release_blocked_by_checklist(self):
        response = self.client.post(f'/api/v1/final-qc/{self.work_order.id}/release/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('has_final_qc', response.data['error'])

    def test_release(self):
        self.prepare_for_release()
        response = self.client.post(
            f'/api/v1/final-qc/{self.work_order.id}/release/', {'sampling_plan_reference': 'AQL-1.0'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['work_order']['quality_released'])
        self.assertTrue(response.data['work_order']['dispatch_allowed'])
        self.assertEqual(response.data['work_order']['sampling_plan_reference'], 'AQL-1.0')
        self.assertTrue(AuditLog.objects.filter(action='FINAL_QC_RELEASE').exists())

    def test_failed_record_blocks_release(self):
        self.prepare_for_release()
        QCRecord.objects.create(qc_id='QC-F1', work_order=self.work_order, qc_type='in_process', result='fail')
        response = self.client.post(f'/api/v1/final-qc/{self.work_order.id}/release/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_block_requires_remarks(self):
        response = self.client.post(f'/api/v1/final-qc/{self.work_order.id}/block/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'remarks')

        response = self.client.post(
            f'/api/v1/final-qc/{self.work_order.id}/block/', {'remarks': 'Burr on thread'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['work_order']['final_qc_result'], 'blocked')
        self.assertFalse(response.data['work_order']['dispatch_allowed'])

    def test_waiver_is_admin_only(self):
        url = f'/api/v1/final-qc/{self.work_order.id}/waive/'
        reason = 'Customer accepted deviation by email on record'
        response = self.client.post(url, {'reason': reason}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_ADMIN]))
        response = self.client.post(url, {'reason': 'too short'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'reason')

        response = self.client.post(url, {'reason': reason}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['work_order']['final_qc_result'], 'waived')
        self.assertEqual(response.data['work_order']['sampling_plan_reference'], 'WAIVED')
        self.assertTrue(response.data['work_order']['qc_final_remarks'].startswith('ADMIN WAIVER: '))
