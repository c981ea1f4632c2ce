"""
Test suite for the Maintenance module
Tests: downtime catalogue, maintenance logs, downtime summary
"""
from datetime import datetime, timedelta
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.permissions import ROLE_MAINTENANCE, ROLE_QUALITY
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.maintenance.downtime import get_category, reasons_by_category
from backend.maintenance.models import MaintenanceLog
from backend.maintenance.services import downtime_summary


def aware(*args):
    return timezone.make_aware(datetime(*args))


class DowntimeCatalogueTests(TestCase):

    def test_categories(self):
        self.assertEqual(get_category('Tool Change'), 'Tooling')
        self.assertEqual(get_category('Something New'), 'Other')
        self.assertIn('Compressor Issue', reasons_by_category()['Power'])

    def test_duration(self):
        log = MaintenanceLog(start_time=aware(2025, 1, 10, 8, 0), end_time=aware(2025, 1, 10, 9, 45))
        self.assertEqual(log.duration_minutes(), 105)
        open_log = MaintenanceLog(start_time=aware(2025, 1, 10, 8, 0))
        self.assertEqual(open_log.duration_minutes(), 0)
        self.assertEqual(open_log.duration_minutes(until=aware(2025, 1, 10, 8, 30)), 30)


class DowntimeSummaryTests(TestCase):

    def test_summary_by_category_and_machine(self):
        lathe = TestDataFactory.create_machine(machine_id='CNC-01')
        mill = TestDataFactory.create_machine(machine_id='VMC-01')
        MaintenanceLog.objects.create(
            machine=lathe, downtime_reason='Tool Change',
            start_time=aware(2025, 1, 10, 8, 0), end_time=aware(2025, 1, 10, 8, 20)
        )
        MaintenanceLog.objects.create(
            machine=lathe, downtime_reason='No Power',
            start_time=aware(2025, 1, 10, 10, 0), end_time=aware(2025, 1, 10, 11, 0)
        )
        MaintenanceLog.objects.create(
            machine=mill, downtime_reason='Cleaning',
            start_time=aware(2025, 1, 11, 10, 0), end_time=aware(2025, 1, 11, 10, 10)
        )

        summary = downtime_summary(date_from='2025-01-10', date_to='2025-01-10')
        self.assertEqual(summary['total_minutes'], 80)
        self.assertEqual(summary['total_events'], 2)
        minutes = {row['category']: row['minutes'] for row in summary['by_category']}
        self.assertEqual(minutes['Tooling'], 20)
        self.assertEqual(minutes['Power'], 60)
        self.assertEqual(minutes['Other'], 0)
        self.assertEqual([m['machine_code'] for m in summary['by_machine']], ['CNC-01'])

        summary = downtime_summary(machine=mill.id)
        self.assertEqual(summary['total_minutes'], 10)


class MaintenanceAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_MAINTENANCE])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.machine = TestDataFactory.create_machine(machine_id='CNC-01')

    def test_start_and_end(self):
        start = timezone.now() - timedelta(minutes=30)
        data = {'machine': self.machine.id, 'downtime_reason': 'Machine Breakdown', 'start_time': start.isoformat()}
        response = self.client.post('/api/v1/maintenance-logs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category'], 'Machine')
        self.assertEqual(response.data['logged_by'], self.user.id)
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, 'maintenance')

        log_id = response.data['id']
        response = self.client.get('/api/v1/maintenance-logs/?state=open')
        self.assertEqual(response.data['count'], 1)

        response = self.client.post(f'/api/v1/maintenance-logs/{log_id}/end/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['end_time'])
        self.assertGreaterEqual(response.data['duration_minutes'], 29)
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, 'idle')

        response = self.client.post(f'/api/v1/maintenance-logs/{log_id}/end/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_machine_stays_in_maintenance_while_another_log_is_open(self):
        data = {'machine': self.machine.id, 'downtime_reason': 'Tool Change'}
        first = self.client.post('/api/v1/maintenance-logs/', data, format='json').data['id']
        data['downtime_reason'] = 'Cleaning'
        second = self.client.post('/api/v1/maintenance-logs/', data, format='json').data['id']

        self.client.post(f'/api/v1/maintenance-logs/{first}/end/', {}, format='json')
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, 'maintenance')

        self.client.post(f'/api/v1/maintenance-logs/{second}/end/', {}, format='json')
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, 'idle')

    def test_end_before_start_rejected(self):
        data = {
            'machine': self.machine.id,
            'downtime_reason': 'Tool Change',
            'start_time': '2025-01-10T10:00:00Z',
            'end_time': '2025-01-10T09:00:00Z',
        }
        response = self.client.post('/api/v1/maintenance-logs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'end_time')

    def test_unknown_reason_rejected(self):
        data = {'machine': self.machine.id, 'downtime_reason': 'Alien Invasion'}
        response = self.client.post('/api/v1/maintenance-logs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('downtime_reason', response.data)

    def test_requires_maintenance_role(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_QUALITY]))
        data = {'machine': self.machine.id, 'downtime_reason': 'Tool Change'}
        response = self.client.post('/api/v1/maintenance-logs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_reasons_and_summary_endpoints(self):
        response = self.client.get('/api/v1/maintenance/downtime-reasons/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Tool Change', response.data['Tooling'])

        response = self.client.get('/api/v1/maintenance/downtime-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_events'], 0)
