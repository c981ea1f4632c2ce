"""
Test suite for the Core module
Tests: registration, login, current user flags, password reset, users, settings, audit logs
"""
from unittest.mock import patch
from django.contrib.auth import get_user_model
from django.core import mail
from django.contrib.auth.tokens import default_token_generator
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework import status
from backend.core.models import AuditLog, Setting
from backend.core.permissions import ROLE_ACCOUNTS, ROLE_ADMIN, ROLE_STORES, is_admin_user, user_has_role
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import (
    create_audit_log, get_setting, next_sequence_number, save_with_unique_code, unique_timestamp_code
)
from backend.finance.models import CustomerReceipt, Invoice
from backend.logistics.models import Shipment

User = get_user_model()

STRONG_PASSWORD = 'Factory#Floor2024'


class RoleHelperTests(TestCase):

    def test_admin_group_holds_every_role(self):
        user = TestDataFactory.create_user(roles=[ROLE_ADMIN])
        self.assertTrue(is_admin_user(user))
        self.assertTrue(user_has_role(user, ROLE_ACCOUNTS))

    def test_staff_without_group_is_admin(self):
        user = TestDataFactory.create_user(is_staff=True)
        self.assertTrue(is_admin_user(user))

    def test_staff_with_application_group_is_not_admin(self):
        user = TestDataFactory.create_user(is_staff=True, roles=[ROLE_STORES])
        self.assertFalse(is_admin_user(user))
        self.assertFalse(user_has_role(user, ROLE_ACCOUNTS))
        self.assertTrue(user_has_role(user, ROLE_STORES))


class UtilsTests(TestCase):

    def test_get_setting_casts_and_falls_back(self):
        Setting.objects.create(key='finance.default_payment_terms_days', value='60')
        Setting.objects.create(key='broken', value='abc')
        self.assertEqual(get_setting('finance.default_payment_terms_days', 30, int), 60)
        self.assertEqual(get_setting('broken', 5, int), 5)
        self.assertEqual(get_setting('missing', 'x'), 'x')

    def test_next_sequence_number(self):
        self.assertEqual(next_sequence_number(Invoice, 'invoice_no', 'INV'), 'INV-001')
        TestDataFactory.create_invoice()
        invoice = TestDataFactory.create_invoice()
        invoice.invoice_no = 'INV-041'
        invoice.save()
        self.assertEqual(next_sequence_number(Invoice, 'invoice_no', 'INV'), 'INV-042')

    def test_next_sequence_number_ignores_manual_numbers(self):
        for number in ['INV-200', 'INV-2025/A', 'INV-050']:
            invoice = TestDataFactory.create_invoice()
            invoice.invoice_no = number
            invoice.save()
        self.assertEqual(next_sequence_number(Invoice, 'invoice_no', 'INV'), 'INV-201')

        for number in ['RCP-009', 'RCP-X1']:
            receipt = TestDataFactory.create_receipt()
            receipt.receipt_no = number
            receipt.save()
        self.assertEqual(next_sequence_number(CustomerReceipt, 'receipt_no', 'RCP'), 'RCP-010')

    def test_unique_timestamp_code_bumps_taken_value(self):
        with patch('backend.core.utils.time.time', return_value=1700000000.0):
            Shipment.objects.create(ship_id=unique_timestamp_code(Shipment, 'ship_id', 'SHIP'))
            self.assertEqual(unique_timestamp_code(Shipment, 'ship_id', 'SHIP'), 'SHIP-1700000000001')

    def test_save_with_unique_code_retries_after_collision(self):
        Shipment.objects.create(ship_id='SHIP-1')
        # Another request grabbed SHIP-1 between the lookup and the insert
        with patch('backend.core.utils.unique_timestamp_code', side_effect=['SHIP-1', 'SHIP-2']):
            shipment = save_with_unique_code(Shipment(), 'ship_id', 'SHIP')
        self.assertEqual(shipment.ship_id, 'SHIP-2')
        self.assertEqual(Shipment.objects.count(), 2)

    def test_audit_log_requires_identity(self):
        self.assertIsNone(create_audit_log(action='create', model_name='Invoice'))
        log = create_audit_log(action='create', model_name='Invoice', object_id=5)
        self.assertEqual(log.object_id, '5')

    def test_audit_log_failure_leaves_transaction_usable(self):
        with transaction.atomic():
            with patch.object(AuditLog.objects, 'create', side_effect=IntegrityError('audit insert failed')):
                self.assertIsNone(create_audit_log(action='create', model_name='Invoice', object_id=1))
            Setting.objects.create(key='after.audit', value='1')
        self.assertTrue(Setting.objects.filter(key='after.audit').exists())


class AuthAPITests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def register(self, **overrides):
        data = {
            'username': 'asha',
            'email': 'asha@example.com',
            'full_name': 'Asha Rao',
            'password': STRONG_PASSWORD,
            'password_confirm': STRONG_PASSWORD,
            'role': ROLE_STORES,
        }
        data.update(overrides)
        return self.client.post('/api/v1/auth/register/', data, format='json')

    def test_register_assigns_role_and_returns_tokens(self):
        response = self.register()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['groups'], [ROLE_STORES])

    def test_register_rejects_privileged_role(self):
        response = self.register(role=ROLE_ADMIN)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('role', response.data)

    def test_register_rejects_weak_password(self):
        response = self.register(password='short', password_confirm='short')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_register_rejects_duplicate_email(self):
        self.register()
        response = self.register(username='asha2', email='ASHA@example.com')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_login_and_me(self):
        self.register()
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'asha', 'password': STRONG_PASSWORD}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")

        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_admin'])
        self.assertTrue(response.data['can_access_gate'])
        self.assertFalse(response.data['can_access_finance'])

    def test_login_wrong_password(self):
        self.register()
        response = self.client.post('/api/v1/auth/login/', {'username': 'asha', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_disabled_user(self):
        user = TestDataFactory.create_user(username='idle', password=STRONG_PASSWORD)
        user.is_active = False
        user.save()
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'idle', 'password': STRONG_PASSWORD}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertNotIn('access', response.data)

    def test_refresh(self):
        refresh = self.register().data['refresh']
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_for_deleted_user(self):
        refresh = self.register().data['refresh']
        User.objects.get(username='asha').delete()
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['code'], 'token_not_valid')

    def test_password_reset_flow(self):
        user = TestDataFactory.create_user(email='reset@example.com')
        response = self.client.post('/api/v1/auth/password-reset/', {'email': 'reset@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)

        data = {
            'uid': urlsafe_base64_encode(force_bytes(user.pk)),
            'token': default_token_generator.make_token(user),
            'password': STRONG_PASSWORD,
            'password_confirm': STRONG_PASSWORD,
        }
        response = self.client.post('/api/v1/auth/password-reset/confirm/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_password_reset_unknown_email_still_ok(self):
        response = self.client.post('/api/v1/auth/password-reset/', {'email': 'ghost@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 0)

    def test_password_reset_bad_token(self):
        user = TestDataFactory.create_user()
        data = {
            'uid': urlsafe_base64_encode(force_bytes(user.pk)),
            'token': 'bad-token',
            'password': STRONG_PASSWORD,
            'password_confirm': STRONG_PASSWORD,
        }
        response = self.client.post('/api/v1/auth/password-reset/confirm/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AdminAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(roles=[ROLE_ADMIN])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_admin_creates_user_with_roles(self):
        data = {
            'username': 'ravi',
            'email': 'ravi@example.com',
            'password': STRONG_PASSWORD,
            'password_confirm': STRONG_PASSWORD,
            'roles': [ROLE_ACCOUNTS],
        }
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['groups'], [ROLE_ACCOUNTS])

    def test_non_admin_cannot_list_users(self):
        self.client.authenticate_user(TestDataFactory.create_user(roles=[ROLE_STORES]))
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_settings_crud(self):
        response = self.client.post(
            '/api/v1/settings/', {'key': 'finance.default_payment_terms_days', 'value': '45'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.patch(f"/api/v1/settings/{response.data['id']}/", {'value': '60'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(get_setting('finance.default_payment_terms_days', 30, int), 60)

    def test_lists_are_paginated(self):
        Setting.objects.create(key='a.first', value='1')
        Setting.objects.create(key='b.second', value='2')
        response = self.client.get('/api/v1/settings/?limit=1')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['results'][0]['key'], 'a.first')

        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['username'], self.admin.username)

    def test_audit_logs_scoped_to_user(self):
        other = TestDataFactory.create_user(roles=[ROLE_STORES])
        create_audit_log(user=self.admin, action='create', model_name='Invoice', object_id='1')
        create_audit_log(user=other, action='create', model_name='Invoice', object_id='2')

        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.data['count'], 2)

        self.client.authenticate_user(other)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['object_id'], '2')

        admin_log = AuditLog.objects.get(user=self.admin)
        response = self.client.get(f'/api/v1/audit-logs/{admin_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
