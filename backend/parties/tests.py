"""
Test suite for the Parties module
Tests: customer, supplier and external partner master data
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.parties.models import Customer


class CustomerModelTests(TestCase):

    def test_pan_normalised_on_save(self):
        customer = TestDataFactory.create_customer(pan_number=' abcpk1234l ')
        customer.refresh_from_db()
        self.assertEqual(customer.pan_number, 'ABCPK1234L')


class PartiesAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        data = {
            'customer_name': 'Acme Valves',
            'party_code': 'ACME',
            'pan_number': 'aaacb1234f',
            'payment_terms_days': 45,
        }
        response = self.client.post('/api/v1/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['pan_number'], 'AAACB1234F')
        self.assertEqual(response.data['country'], 'India')

    def test_invalid_pan_rejected(self):
        data = {'customer_name': 'Bad PAN Ltd', 'pan_number': '12345ABCDE'}
        response = self.client.post('/api/v1/customers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('pan_number', response.data)

    def test_customer_list_filters(self):
        TestDataFactory.create_customer(name='Export House', is_export=True)
        TestDataFactory.create_customer(name='Local Pumps')
        response = self.client.get('/api/v1/customers/?is_export=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['customer_name'], 'Export House')

        response = self.client.get('/api/v1/customers/?search=pumps')
        self.assertEqual(response.data['count'], 1)

    def test_update_and_delete_customer(self):
        customer = TestDataFactory.create_customer()
        response = self.client.patch(f'/api/v1/customers/{customer.id}/', {'city': 'Pune'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['city'], 'Pune')

        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(pk=customer.id).exists())

    def test_supplier_crud(self):
        response = self.client.post('/api/v1/suppliers/', {'name': 'Steel Mart', 'code': 'SM'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/suppliers/?search=steel')
        self.assertEqual(response.data['count'], 1)

    def test_external_partner_inactive_filter(self):
        TestDataFactory.create_partner(name='Old Platers')
        partner = TestDataFactory.create_partner(name='Heat Treaters', process_type='Heat Treatment')
        self.client.patch(f'/api/v1/external-partners/{partner.id}/', {'is_active': False}, format='json')
        response = self.client.get('/api/v1/external-partners/?is_active=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data['results']], ['Old Platers'])
