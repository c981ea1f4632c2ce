"""
Gate register submission.

A gate entry is the first record of any material crossing the gate. Depending on the
direction and material type it also creates the downstream documents: material and
inventory lots, RPO receipts and reconciliations, external process moves, QC records,
dispatch notes and execution records. Everything is written in one transaction.
"""
import logging
from datetime import timedelta
from decimal import Decimal
from django.db import transaction
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log, save_with_unique_code
from backend.inventory.models import InventoryLot, MaterialLot
from backend.logistics.models import DispatchNote
from backend.production.models import ExecutionRecord, ProductionBatch, WorkOrder
from backend.purchasing.models import (
    RECONCILIATION_TOLERANCE_KG, RawPOReceipt, RawPOReconciliation, RawPurchaseOrder
)
from backend.quality.models import QCRecord
from .models import EXTERNAL_RETURN_DAYS, OPEN_MOVE_STATUSES, RETURN_REMINDER_DAYS, GateEntry, WOExternalMove
from .weights import calculate_net, calculate_tare, estimate_pcs, packaging_count, round_half_up, to_decimal

logger = logging.getLogger(__name__)

NO_PENDING_MOVES_WARNING = (
    'No pending external move found for this WO/process. '
    'Entry recorded but could not match to a challan.'
)


def validate_gate_entry(data):
    """Checks that depend on direction and material type together"""
    direction = data.get('direction')
    material_type = data.get('material_type')

    if to_decimal(data.get('gross_weight_kg')) <= 0:
        raise BusinessRuleError('Gross weight is required', field='gross_weight_kg')
    if direction == 'OUT' and not data.get('challan_no'):
        raise BusinessRuleError('Challan number is required for goods out', field='challan_no')
    if material_type == 'raw_material' and direction == 'IN' and not data.get('heat_no'):
        raise BusinessRuleError('Heat number is required for raw material', field='heat_no')
    if material_type == 'external_process':
        if not data.get('work_order'):
            raise BusinessRuleError('Work order is required for external process', field='work_order')
        if not data.get('process_type'):
            raise BusinessRuleError('Process type is required for external process', field='process_type')


def _record_execution(work_order, process_type, quantity, unit, direction, entry, user):
    return ExecutionRecord.objects.create(
        work_order=work_order,
        process_type=process_type,
        quantity=quantity,
        unit=unit,
        direction=direction,
        related_gate_entry_no=entry.gate_entry_no,
        created_by=user,
    )


def _receive_raw_material(entry, user):
    today = timezone.localdate()
    heat = entry.heat_no or 'NH'
    net = entry.net_weight_kg

    entry.material_lot = MaterialLot.objects.create(
        lot_id=f"ML-{entry.gate_entry_no}-{heat}",
        heat_no=entry.heat_no,
        material_grade=entry.material_grade,
        alloy=entry.alloy,
        supplier=entry.supplier,
        gross_weight=entry.gross_weight_kg,
        net_weight=net,
        qc_status='pending' if entry.qc_required else 'not_required',
        status='received',
        gate_entry_no=entry.gate_entry_no,
    )

    lot_id = f"LOT-{entry.gate_entry_no}-{heat}"
    if entry.rpo_id:
        rpo = RawPurchaseOrder.objects.select_for_update().get(pk=entry.rpo_id)
        RawPOReceipt.objects.create(
            rpo=rpo,
            gate_entry_no=entry.gate_entry_no,
            qty_received_kg=net,
            received_date=today,
            notes=f"Gate Entry: {entry.gate_entry_no}. {entry.remarks or ''}".strip(),
        )
        entry.inventory_lot = InventoryLot.objects.create(
            lot_id=lot_id,
            material_grade=entry.material_grade or rpo.material_grade,
            heat_no=entry.heat_no,
            qty_kg=net,
            cost_rate=rpo.rate_per_kg,
            rpo=rpo,
            work_order=entry.work_order or rpo.work_order,
            supplier=entry.supplier or rpo.supplier,
            source='rpo',
            received_date=today,
        )

        total_received = rpo.received_qty_kg
        rpo.status = 'closed' if total_received >= rpo.qty_ordered_kg else 'part_received'
        rpo.save(update_fields=['status', 'updated_at'])

        qty_delta = total_received - rpo.qty_ordered_kg
        if rpo.status == 'closed' and abs(qty_delta) > RECONCILIATION_TOLERANCE_KG:
            RawPOReconciliation.objects.create(
                rpo=rpo,
                reason='short_supply' if qty_delta < 0 else 'excess_supply',
                qty_delta_kg=qty_delta,
                rate_per_kg=rpo.rate_per_kg,
                amount_delta=(qty_delta * rpo.rate_per_kg).quantize(Decimal('0.01')),
                resolution='pending',
                notes=f"Auto-created on RPO closure. Gate Entry: {entry.gate_entry_no}",
            )
            logger.info(f"RPO {rpo.rpo_no} closed with variance {qty_delta} kg, reconciliation raised")
    else:
        entry.inventory_lot = InventoryLot.objects.create(
            lot_id=lot_id,
            material_grade=entry.material_grade,
            heat_no=entry.heat_no,
            qty_kg=net,
            work_order=entry.work_order,
            supplier=entry.supplier,
            source='adhoc',
            received_date=today,
        )

    if entry.work_order_id:
        _record_execution(entry.work_order, 'RAW_MATERIAL', net, 'kg', 'IN', entry, user)
        if entry.qc_required:
            QCRecord.objects.create(
                qc_id=f"QC-INC-{entry.gate_entry_no}",
                work_order=entry.work_order,
                material_lot=entry.material_lot,
                qc_type='incoming',
                result='pending',
                remarks=f"Incoming QC for heat {heat}. Gate Entry: {entry.gate_entry_no}",
            )


def _send_external(entry, quantity, user):
    today = timezone.localdate()
    work_order = WorkOrder.objects.select_for_update().get(pk=entry.work_order_id)
    if not entry.challan_no:
        entry.challan_no = f"DC-{entry.gate_entry_no}"

    entry.external_move = WOExternalMove.objects.create(
        work_order=work_order,
        process_type=entry.process_type,
        partner=entry.partner,
        challan_no=entry.challan_no,
        status='sent',
        quantity_sent=quantity,
        weight_sent_kg=entry.net_weight_kg,
        dispatch_date=today,
        expected_return_date=today + timedelta(days=EXTERNAL_RETURN_DAYS),
        remarks=entry.remarks,
        created_by=user,
    )

    work_order.qty_external_wip += quantity
    work_order.external_status = 'sent'
    work_order.external_process_type = entry.process_type
    if entry.partner:
        work_order.material_location = entry.partner.name
    work_order.save(update_fields=['qty_external_wip', 'external_status', 'external_process_type',
                                   'material_location', 'updated_at'])

    ProductionBatch.objects.filter(
        work_order=work_order,
        ended_at__isnull=True,
        current_location__in=['factory', 'transit'],
    ).update(
        current_location='external_partner',
        external_partner=entry.partner,
        current_process=entry.process_type,
        external_process_type=entry.process_type,
    )

    unit = 'pcs' if entry.estimated_pcs else 'kg'
    sent = quantity if entry.estimated_pcs else entry.net_weight_kg
    _record_execution(work_order, 'EXTERNAL_PROCESS', sent, unit, 'OUT', entry, user)


def _receive_external(entry, quantity, user, warnings):
    today = timezone.localdate()
    pending_moves = list(
        WOExternalMove.objects.select_for_update()
        .filter(work_order_id=entry.work_order_id, process_type=entry.process_type, status__in=OPEN_MOVE_STATUSES)
        .order_by('dispatch_date', 'created_at')
    )
    if not pending_moves:
        logger.warning(
            f"Gate entry {entry.gate_entry_no}: no pending {entry.process_type} move for work order {entry.work_order_id}"
        )
        warnings.append(NO_PENDING_MOVES_WARNING)
        return

    remaining = quantity
    for index, move in enumerate(pending_moves):
        if remaining <= 0:
            break
        pending = move.quantity_pending
        allocated = min(remaining, pending if pending > 0 else remaining)
        move.quantity_returned += allocated
        move.status = 'completed' if move.quantity_returned >= move.quantity_sent else 'partial'
        move.returned_date = today
        if index == 0:
            move.weight_returned_kg += entry.net_weight_kg
        move.save(update_fields=['quantity_returned', 'status', 'returned_date', 'weight_returned_kg', 'updated_at'])
        remaining -= allocated
    entry.external_move = pending_moves[0]

    work_order = WorkOrder.objects.select_for_update().get(pk=entry.work_order_id)
    work_order.qty_external_wip = max(0, work_order.qty_external_wip - quantity)
    if work_order.qty_external_wip == 0:
        work_order.external_status = None
        work_order.material_location = 'Factory'
    work_order.save(update_fields=['qty_external_wip', 'external_status', 'material_location', 'updated_at'])

    ProductionBatch.objects.filter(
        work_order=work_order,
        ended_at__isnull=True,
        current_location='external_partner',
        current_process=entry.process_type,
    ).update(
        current_location='factory',
        current_process='post_external_qc' if entry.qc_required else 'production',
    )

    if entry.qc_required:
        QCRecord.objects.create(
            qc_id=f"QC-EXT-{entry.gate_entry_no}",
            work_order=work_order,
            qc_type='post_external',
            result='pending',
            remarks=(
                f"Post-external QC for {entry.process_type}. Gate Entry: {entry.gate_entry_no}. "
                f"Qty: {quantity} pcs, Weight: {entry.net_weight_kg} kg"
            ),
        )

    entry.inventory_lot = InventoryLot.objects.create(
        lot_id=f"LOT-EXT-{entry.gate_entry_no}",
        material_grade=entry.material_grade or work_order.item_code,
        heat_no=entry.heat_no,
        qty_kg=entry.net_weight_kg,
        work_order=work_order,
        source='external_return',
        received_date=today,
    )

    _record_execution(work_order, 'EXTERNAL_PROCESS', quantity, 'pcs', 'IN', entry, user)


def _dispatch_finished_goods(entry, quantity, user):
    work_order = WorkOrder.objects.select_for_update().get(pk=entry.work_order_id)
    DispatchNote.objects.create(
        dispatch_note_no=f"DN-{entry.gate_entry_no}",
        work_order=work_order,
        dispatched_qty=quantity,
        gate_entry_no=entry.gate_entry_no,
        dispatch_date=timezone.localdate(),
        remarks=entry.remarks,
        created_by=user,
    )
    work_order.qty_dispatched += quantity
    work_order.save(update_fields=['qty_dispatched', 'updated_at'])
    _record_execution(work_order, 'DISPATCH', quantity, 'pcs', 'OUT', entry, user)


@transaction.atomic
def record_gate_entry(data, user=None, request=None):
    """
    Save a gate entry and every document it implies.

    `data` holds validated serializer data (model instances for the links).
    Returns (entry, warnings). Warnings describe situations that were recorded
    but could not be fully matched, such as a return with no pending challan.
    """
    validate_gate_entry(data)
    warnings = []

    packaging = data.get('packaging') or []
    gross = to_decimal(data['gross_weight_kg'])
    tare = calculate_tare(packaging, data.get('manual_tare_kg'))
    computed_net = calculate_net(gross, tare)
    net = computed_net if computed_net > 0 else gross

    pcs = data.get('estimated_pcs')
    if not pcs:
        pcs = estimate_pcs(net, data.get('pcs_sample_weight'), data.get('pcs_sample_count'))

    direction = data['direction']
    material_type = data['material_type']
    qc_required = bool(data.get('qc_required'))

    entry = GateEntry(
        direction=direction,
        material_type=material_type,
        gross_weight_kg=gross,
        tare_weight_kg=tare,
        net_weight_kg=net,
        packaging=packaging,
        packaging_count=packaging_count(packaging),
        estimated_pcs=pcs,
        avg_weight_per_pc=data.get('avg_weight_per_pc'),
        pcs_sample_count=data.get('pcs_sample_count'),
        pcs_sample_weight=data.get('pcs_sample_weight'),
        item_name=data.get('item_name', ''),
        rod_section_size=data.get('rod_section_size', ''),
        material_grade=data.get('material_grade', ''),
        alloy=data.get('alloy', ''),
        heat_no=data.get('heat_no', ''),
        tc_number=data.get('tc_number', ''),
        supplier=data.get('supplier'),
        supplier_name=data.get('supplier_name') or (data['supplier'].name if data.get('supplier') else ''),
        party_code=data.get('party_code', ''),
        partner=data.get('partner'),
        process_type=data.get('process_type', ''),
        work_order=data.get('work_order'),
        rpo=data.get('rpo'),
        customer=data.get('customer'),
        challan_no=data.get('challan_no', ''),
        dc_number=data.get('dc_number', ''),
        vehicle_no=data.get('vehicle_no', ''),
        transporter=data.get('transporter', ''),
        qc_required=qc_required,
        qc_status='pending' if qc_required else 'not_required',
        status='completed',
        remarks=data.get('remarks', ''),
        created_by=user,
    )
    save_with_unique_code(entry, 'gate_entry_no', 'GIN')

    quantity = pcs or round_half_up(net)

    if material_type == 'raw_material' and direction == 'IN':
        _receive_raw_material(entry, user)
    elif material_type == 'external_process' and direction == 'OUT':
        _send_external(entry, quantity, user)
    elif material_type == 'external_process' and direction == 'IN':
        _receive_external(entry, quantity, user, warnings)
    elif material_type == 'finished_goods' and direction == 'OUT' and entry.work_order_id:
        _dispatch_finished_goods(entry, quantity, user)
    elif material_type == 'scrap' and direction == 'OUT' and entry.work_order_id:
        _record_execution(entry.work_order, 'SCRAP', net, 'kg', 'OUT', entry, user)

    entry.save()

    create_audit_log(
        request=request,
        user=user,
        action=f"gate_{direction.lower()}_{material_type}",
        model_name='GateEntry',
        object_id=str(entry.id),
        object_name=entry.gate_entry_no,
        object_reference=entry.challan_no or None,
        changes={
            'direction': direction,
            'material_type': material_type,
            'net_weight_kg': str(net),
            'estimated_pcs': pcs,
            'rpo': entry.rpo.rpo_no if entry.rpo else None,
            'work_order': entry.work_order.wo_number if entry.work_order else None,
            'partner': entry.partner.name if entry.partner else None,
            'process_type': entry.process_type or None,
        },
    )
    logger.info(f"Gate entry {entry.gate_entry_no} recorded ({direction} {material_type}, {net} kg)")
    return entry, warnings


def external_returns_due(as_of=None, within_days=RETURN_REMINDER_DAYS):
    """
    Open external moves that are overdue or expected back within `within_days` days of as_of.
    Earliest expected return first.
    """
    as_of = as_of or timezone.localdate()
    return (
        WOExternalMove.objects.filter(
            status__in=OPEN_MOVE_STATUSES,
            expected_return_date__isnull=False,
            expected_return_date__lte=as_of + timedelta(days=within_days),
        )
        .select_related('work_order', 'work_order__customer', 'partner')
        .order_by('expected_return_date', 'created_at')
    )
