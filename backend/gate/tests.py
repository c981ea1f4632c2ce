"""
Test suite for the Gate module
Tests: weight calculation, raw material receipts against RPOs, external process moves,
finished goods and scrap out, overdue external returns, cascade rollback, role checks and gate tags
"""
from io import StringIO
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.permissions import ROLE_STORES, ROLE_QUALITY
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.gate.models import GateEntry, WOExternalMove
from backend.gate.services import NO_PENDING_MOVES_WARNING, external_returns_due
from backend.gate.weights import calculate_tare, calculate_net, estimate_pcs, packaging_count
from backend.inventory.models import InventoryLot, MaterialLot
from backend.logistics.models import DispatchNote
from backend.production.models import ExecutionRecord
from backend.purchasing.models import RawPOReceipt, RawPOReconciliation
from backend.quality.models import QCRecord


class WeightCalculationTests(TestCase):
    """Tare, net and piece estimates"""

    def test_tare_from_packaging_rows(self):
        rows = [{'type': 'CRATE_1_3', 'count': 2}, {'type': 'BAG_0_10', 'count': 3}]
        self.assertEqual(calculate_tare(rows), Decimal('2.900'))
        self.assertEqual(packaging_count(rows), 5)

    def test_manual_tare_overrides_packaging(self):
        rows = [{'type': 'CRATE_1_3', 'count': 2}]
        self.assertEqual(calculate_tare(rows, manual_tare='4.5'), Decimal('4.500'))

    def test_none_packaging_not_counted(self):
        rows = [{'type': 'NONE', 'count': 4}, {'type': 'CRATE_0_7', 'count': 1}]
        self.assertEqual(packaging_count(rows), 1)
        self.assertEqual(calculate_tare(rows), Decimal('0.700'))

    def test_net_never_negative(self):
        self.assertEqual(calculate_net(Decimal('2'), Decimal('3')), Decimal('0.000'))
        self.assertEqual(calculate_net(Decimal('100'), Decimal('2.9')), Decimal('97.100'))

    def test_estimate_pcs_rounds_half_up(self):
        # 0.05 kg per piece
        self.assertEqual(estimate_pcs(Decimal('97.1'), Decimal('0.5'), 10), 1942)
        # 0.3 kg per piece: 1.05 / 0.3 = 3.5
        self.assertEqual(estimate_pcs(Decimal('1.05'), Decimal('0.6'), 2), 4)

    def test_estimate_pcs_incomplete_sample(self):
        self.assertIsNone(estimate_pcs(Decimal('10'), None, 10))
        self.assertIsNone(estimate_pcs(Decimal('10'), Decimal('0.5'), 0))
        self.assertIsNone(estimate_pcs(Decimal('0'), Decimal('0.5'), 10))


class GateAPITestBase(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(roles=[ROLE_STORES])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()
        self.partner = TestDataFactory.create_partner(name='Shine Platers')
        self.work_order = TestDataFactory.create_work_order()

    def post_entry(self, **data):
        return self.client.post('/api/v1/gate-entries/', data, format='json')


class GateCalculateAPITests(GateAPITestBase):

    def test_calculate_endpoint(self):
        data = {
            'gross_weight_kg': '100.000',
            'packaging': [{'type': 'CRATE_1_3', 'count': 2}, {'type': 'BAG_0_10', 'count': 3}],
            'pcs_sample_weight': '0.500',
            'pcs_sample_count': 10,
        }
        response = self.client.post('/api/v1/gate/calculate/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tare_weight_kg'], Decimal('2.900'))
        self.assertEqual(response.data['net_weight_kg'], Decimal('97.100'))
        self.assertEqual(response.data['packaging_count'], 5)
        self.assertEqual(response.data['estimated_pcs'], 1942)

    def test_packaging_options(self):
        response = self.client.get('/api/v1/gate/packaging-options/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        codes = [option['code'] for option in response.data]
        self.assertIn('CRATE_1_3', codes)
        self.assertIn('NONE', codes)


class GateValidationTests(GateAPITestBase):

    def test_gross_weight_required(self):
        response = self.post_entry(direction='IN', material_type='other')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Gross weight is required')
        self.assertEqual(GateEntry.objects.count(), 0)

    def test_raw_material_requires_heat_number(self):
        response = self.post_entry(direction='IN', material_type='raw_material', gross_weight_kg='100')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Heat number is required for raw material')

    def test_goods_out_requires_challan(self):
        response = self.post_entry(direction='OUT', material_type='scrap', gross_weight_kg='50')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'challan_no')

    def test_external_process_requires_work_order(self):
        response = self.post_entry(
            direction='OUT', material_type='external_process', gross_weight_kg='50',
            challan_no='DC-9', process_type='Plating'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Work order is required for external process')

    def test_closed_rpo_rejected(self):
        rpo = TestDataFactory.create_rpo(supplier=self.supplier, status='closed')
        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='100', heat_no='H1', rpo=rpo.id
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rpo', response.data)


class GateRolesTests(GateAPITestBase):

    def test_quality_user_cannot_record_entry(self):
        user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client.authenticate_user(user)
        response = self.post_entry(direction='IN', material_type='other', gross_weight_kg='10')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_quality_user_can_read_register(self):
        user = TestDataFactory.create_user(roles=[ROLE_QUALITY])
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/gate-entries/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unauthenticated(self):
        self.client.logout()
        response = self.client.get('/api/v1/gate-entries/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RawMaterialReceiptTests(GateAPITestBase):

    def test_receipt_against_rpo_partial_then_closed(self):
        rpo = TestDataFactory.create_rpo(supplier=self.supplier, qty_ordered_kg=Decimal('1000'))
        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='600',
            heat_no='H123', supplier=self.supplier.id, rpo=rpo.id
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        rpo.refresh_from_db()
        self.assertEqual(rpo.status, 'part_received')
        self.assertEqual(rpo.received_qty_kg, Decimal('600.000'))

        entry = GateEntry.objects.get(pk=response.data['id'])
        self.assertEqual(entry.material_lot.lot_id, f'ML-{entry.gate_entry_no}-H123')
        self.assertEqual(entry.inventory_lot.lot_id, f'LOT-{entry.gate_entry_no}-H123')
        self.assertEqual(entry.inventory_lot.source, 'rpo')
        self.assertEqual(entry.inventory_lot.cost_rate, rpo.rate_per_kg)
        self.assertTrue(RawPOReceipt.objects.filter(rpo=rpo, gate_entry_no=entry.gate_entry_no).exists())

        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='400',
            heat_no='H124', supplier=self.supplier.id, rpo=rpo.id
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        rpo.refresh_from_db()
        self.assertEqual(rpo.status, 'closed')
        self.assertFalse(RawPOReconciliation.objects.filter(rpo=rpo).exists())

    def test_excess_supply_raises_reconciliation(self):
        rpo = TestDataFactory.create_rpo(supplier=self.supplier, qty_ordered_kg=Decimal('1000'),
                                         rate_per_kg=Decimal('80.00'))
        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='1050',
            heat_no='H9', supplier=self.supplier.id, rpo=rpo.id
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        rpo.refresh_from_db()
        self.assertEqual(rpo.status, 'closed')
        recon = RawPOReconciliation.objects.get(rpo=rpo)
        self.assertEqual(recon.reason, 'excess_supply')
        self.assertEqual(recon.qty_delta_kg, Decimal('50.000'))
        self.assertEqual(recon.amount_delta, Decimal('4000.00'))
        self.assertEqual(recon.resolution, 'pending')

    def test_adhoc_receipt_with_packaging(self):
        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='100',
            packaging=[{'type': 'CRATE_1_3', 'count': 2}], heat_no=''
        )
        # Blank heat number is rejected
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='100',
            packaging=[{'type': 'CRATE_1_3', 'count': 2}], heat_no='H77'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['net_weight_kg']), Decimal('97.400'))
        lot = InventoryLot.objects.get(lot_id=f"LOT-{response.data['gate_entry_no']}-H77")
        self.assertEqual(lot.source, 'adhoc')
        self.assertEqual(lot.qty_kg, Decimal('97.400'))

    def test_incoming_qc_created_for_work_order(self):
        response = self.post_entry(
            direction='IN', material_type='raw_material', gross_weight_kg='200',
            heat_no='H5', work_order=self.work_order.id, qc_required=True
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        gate_no = response.data['gate_entry_no']
        qc = QCRecord.objects.get(qc_id=f'QC-INC-{gate_no}')
        self.assertEqual(qc.qc_type, 'incoming')
        self.assertEqual(qc.result, 'pending')
        self.assertEqual(MaterialLot.objects.get(gate_entry_no=gate_no).qc_status, 'pending')
        record = ExecutionRecord.objects.get(related_gate_entry_no=gate_no)
        self.assertEqual(record.process_type, 'RAW_MATERIAL')
        self.assertEqual(record.direction, 'IN')
        self.assertEqual(record.unit, 'kg')


class ExternalProcessTests(GateAPITestBase):

    def setUp(self):
        super().setUp()
        self.batch = TestDataFactory.create_batch(self.work_order)

    def send_out(self, pcs=500):
        return self.post_entry(
            direction='OUT', material_type='external_process', gross_weight_kg='250',
            work_order=self.work_order.id, partner=self.partner.id, process_type='Plating',
            challan_no='DC-100', estimated_pcs=pcs
        )

    def receive(self, pcs, qc_required=False):
        return self.post_entry(
            direction='IN', material_type='external_process', gross_weight_kg='150',
            work_order=self.work_order.id, partner=self.partner.id, process_type='Plating',
            estimated_pcs=pcs, qc_required=qc_required
        )

    def test_send_out_creates_move(self):
        response = self.send_out()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        move = WOExternalMove.objects.get(work_order=self.work_order)
        self.assertEqual(move.status, 'sent')
        self.assertEqual(move.quantity_sent, 500)
        self.assertEqual(move.challan_no, 'DC-100')
        self.assertEqual((move.expected_return_date - move.dispatch_date).days, 7)

        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.qty_external_wip, 500)
        self.assertEqual(self.work_order.external_status, 'sent')
        self.assertEqual(self.work_order.material_location, 'Shine Platers')

        self.batch.refresh_from_db()
        self.assertEqual(self.batch.current_location, 'external_partner')
        self.assertEqual(self.batch.current_process, 'Plating')

    def test_partial_then_full_return(self):
        self.send_out()
        response = self.receive(300)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['warnings'], [])
        move = WOExternalMove.objects.get(work_order=self.work_order)
        self.assertEqual(move.status, 'partial')
        self.assertEqual(move.quantity_returned, 300)
        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.qty_external_wip, 200)

        self.receive(200)
        move.refresh_from_db()
        self.assertEqual(move.status, 'completed')
        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.qty_external_wip, 0)
        self.assertIsNone(self.work_order.external_status)
        self.assertEqual(self.work_order.material_location, 'Factory')
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.current_location, 'factory')
        self.assertEqual(self.batch.current_process, 'production')

    def test_return_allocates_fifo_across_moves(self):
        self.send_out(pcs=100)
        self.send_out(pcs=100)
        self.receive(150)
        moves = list(WOExternalMove.objects.filter(work_order=self.work_order).order_by('created_at'))
        self.assertEqual(moves[0].status, 'completed')
        self.assertEqual(moves[0].quantity_returned, 100)
        self.assertEqual(moves[1].status, 'partial')
        self.assertEqual(moves[1].quantity_returned, 50)

    def test_return_with_qc_creates_post_external_record(self):
        self.send_out()
        response = self.receive(500, qc_required=True)
        gate_no = response.data['gate_entry_no']
        qc = QCRecord.objects.get(qc_id=f'QC-EXT-{gate_no}')
        self.assertEqual(qc.qc_type, 'post_external')
        self.assertTrue(InventoryLot.objects.filter(lot_id=f'LOT-EXT-{gate_no}', source='external_return').exists())
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.current_process, 'post_external_qc')

    def test_return_without_pending_move_warns(self):
        response = self.receive(100)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['warnings'], [NO_PENDING_MOVES_WARNING])
        self.assertTrue(GateEntry.objects.filter(pk=response.data['id']).exists())
        self.assertFalse(InventoryLot.objects.filter(source='external_return').exists())

    def test_external_move_list(self):
        self.send_out()
        response = self.client.get(f'/api/v1/external-moves/?wo={self.work_order.id}&status=sent,partial')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['quantity_pending'], 500)


class ExternalReturnsDueTests(GateAPITestBase):

    def setUp(self):
        super().setUp()
        self.as_of = date(2025, 3, 10)
        self.late = self.make_move(self.as_of - timedelta(days=3), challan_no='DC-1')
        self.soon = self.make_move(self.as_of + timedelta(days=1), challan_no='DC-2', status='partial')
        self.later = self.make_move(self.as_of + timedelta(days=5), challan_no='DC-3')
        self.returned = self.make_move(self.as_of - timedelta(days=10), challan_no='DC-4', status='completed')

    def make_move(self, expected, **fields):
        return WOExternalMove.objects.create(
            work_order=self.work_order, process_type='Plating', partner=self.partner,
            quantity_sent=100, dispatch_date=expected - timedelta(days=7), expected_return_date=expected,
            **fields
        )

    def test_overdue_and_due_soon(self):
        moves = list(external_returns_due(as_of=self.as_of))
        self.assertEqual(moves, [self.late, self.soon])
        self.assertEqual(self.late.days_overdue(self.as_of), 3)
        self.assertEqual(self.soon.days_overdue(self.as_of), 0)
        self.assertEqual(self.returned.days_overdue(self.as_of), 0)

        self.assertEqual(len(external_returns_due(as_of=self.as_of, within_days=5)), 3)

    def test_list_filters(self):
        today = timezone.localdate()
        self.late.expected_return_date = today - timedelta(days=3)
        self.late.save()
        self.soon.expected_return_date = today + timedelta(days=1)
        self.soon.save()
        self.later.expected_return_date = today + timedelta(days=5)
        self.later.save()

        response = self.client.get('/api/v1/external-moves/?overdue=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['challan_no'], 'DC-1')
        self.assertEqual(response.data['results'][0]['days_overdue'], 3)

        response = self.client.get('/api/v1/external-moves/?due_within_days=2')
        self.assertEqual([row['challan_no'] for row in response.data['results']], ['DC-1', 'DC-2'])

        response = self.client.get('/api/v1/external-moves/?due_within_days=soon')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['field'], 'due_within_days')

    def test_command(self):
        out = StringIO()
        call_command('check_overdue_external_moves', as_of='2025-03-10', stdout=out)
        output = out.getvalue()
        self.assertIn('OVERDUE 3d', output)
        self.assertIn('DUE IN 1d', output)
        self.assertNotIn('DC-3', output)
        self.assertNotIn('DC-4', output)
        self.assertIn('1 overdue, 1 due within 2 day(s)', output)

        out = StringIO()
        call_command('check_overdue_external_moves', as_of='2025-03-10', days=5, stdout=out)
        self.assertIn('DC-3', out.getvalue())

    def test_command_nothing_due(self):
        out = StringIO()
        call_command('check_overdue_external_moves', as_of='2025-01-01', stdout=out)
        self.assertIn('No external returns overdue or due soon', out.getvalue())

    def test_command_bad_date(self):
        with self.assertRaises(CommandError):
            call_command('check_overdue_external_moves', as_of='10/03/2025', stdout=StringIO())


class FinishedGoodsDispatchTests(GateAPITestBase):

    def test_goods_out_creates_dispatch_note(self):
        response = self.post_entry(
            direction='OUT', material_type='finished_goods', gross_weight_kg='80',
            work_order=self.work_order.id, challan_no='INV-77', estimated_pcs=400
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        gate_no = response.data['gate_entry_no']
        note = DispatchNote.objects.get(dispatch_note_no=f'DN-{gate_no}')
        self.assertEqual(note.dispatched_qty, 400)
        self.work_order.refresh_from_db()
        self.assertEqual(self.work_order.qty_dispatched, 400)
        record = ExecutionRecord.objects.get(related_gate_entry_no=gate_no)
        self.assertEqual(record.process_type, 'DISPATCH')
        self.assertEqual(record.direction, 'OUT')

    def test_scrap_out_records_execution(self):
        response = self.post_entry(
            direction='OUT', material_type='scrap', gross_weight_kg='20', challan_no='SC-4',
            work_order=self.work_order.id
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = ExecutionRecord.objects.get(related_gate_entry_no=response.data['gate_entry_no'])
        self.assertEqual(record.process_type, 'SCRAP')
        self.assertEqual(record.unit, 'kg')
        self.assertEqual(record.direction, 'OUT')
        self.assertEqual(record.quantity, Decimal('20.000'))

    def test_scrap_out_without_work_order_has_no_execution(self):
        self.post_entry(direction='OUT', material_type='scrap', gross_weight_kg='20', challan_no='SC-5')
        self.assertFalse(ExecutionRecord.objects.exists())


class GateCascadeRollbackTests(GateAPITestBase):

    def test_failure_after_lot_insert_rolls_back_everything(self):
        rpo = TestDataFactory.create_rpo(supplier=self.supplier, qty_ordered_kg=Decimal('1000'))
        with patch.object(InventoryLot.objects, 'create', side_effect=IntegrityError('duplicate lot')):
            with self.assertRaises(IntegrityError):
                self.post_entry(
                    direction='IN', material_type='raw_material', gross_weight_kg='600',
                    heat_no='H123', supplier=self.supplier.id, rpo=rpo.id, work_order=self.work_order.id
                )
        self.assertFalse(GateEntry.objects.exists())
        self.assertFalse(MaterialLot.objects.exists())
        self.assertFalse(RawPOReceipt.objects.exists())
        rpo.refresh_from_db()
        self.assertEqual(rpo.status, 'approved')

    def test_audit_log_failure_does_not_block_entry(self):
        with patch.object(AuditLog.objects, 'create', side_effect=IntegrityError('audit insert failed')):
            response = self.post_entry(
                direction='IN', material_type='raw_material', gross_weight_kg='100', heat_no='H8'
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(GateEntry.objects.filter(pk=response.data['id']).exists())
        self.assertTrue(MaterialLot.objects.filter(gate_entry_no=response.data['gate_entry_no']).exists())
        self.assertFalse(AuditLog.objects.exists())


class GateRegisterTests(GateAPITestBase):

    def test_list_filters_by_direction(self):
        self.post_entry(direction='IN', material_type='other', gross_weight_kg='10')
        self.post_entry(direction='OUT', material_type='scrap', gross_weight_kg='20', challan_no='SC-1')
        response = self.client.get('/api/v1/gate-entries/?direction=OUT')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['material_type'], 'scrap')

    def test_gate_tag(self):
        response = self.post_entry(direction='IN', material_type='other', gross_weight_kg='10', item_name='Fixtures')
        tag = self.client.get(f"/api/v1/gate-entries/{response.data['id']}/tag/")
        self.assertEqual(tag.status_code, status.HTTP_200_OK)
        self.assertEqual(tag.data['gate_entry_no'], response.data['gate_entry_no'])
        self.assertTrue(tag.data['image'].startswith('data:image/png;base64,'))
