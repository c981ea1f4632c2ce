"""
Shipment and dispatch operations
"""
import logging
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from backend.core.exceptions import BusinessRuleError
from backend.core.utils import create_audit_log, save_with_unique_code
from backend.inventory.utils import finished_goods_summary
from backend.production.models import ProductionBatch, WorkOrder
from .models import Dispatch, Pallet, ScanEvent, Shipment, ShipmentPallet

logger = logging.getLogger(__name__)

OPEN_WO_STATUSES = ['pending', 'in_progress', 'qc', 'packing']


@transaction.atomic
def create_shipment_for_pallet(pallet, user=None, request=None):
    """
    Ship a pallet: every work order on it must have passed final QC.
    Creates the shipment, links the pallet and marks pallet and cartons dispatched.
    """
    pallet = Pallet.objects.select_for_update().get(pk=pallet.pk)
    cartons = list(pallet.cartons.select_related('work_order', 'work_order__customer'))
    if not cartons:
        raise BusinessRuleError('Pallet has no cartons')
    if pallet.status == 'dispatched':
        raise BusinessRuleError('Pallet has already been dispatched')

    blocked = sorted({c.work_order.wo_number for c in cartons if not c.work_order.dispatch_allowed})
    if blocked:
        logger.warning(f"Shipment refused for pallet {pallet.pallet_id}: final QC not passed for {blocked}")
        raise BusinessRuleError('Cannot dispatch: Final QC not passed')

    shipment = Shipment(
        customer=cartons[0].work_order.customer,
        incoterm='EXW',
        ship_date=timezone.now(),
        created_by=user,
    )
    save_with_unique_code(shipment, 'ship_id', 'SHIP')
    ShipmentPallet.objects.create(shipment=shipment, pallet=pallet)
    ScanEvent.objects.create(
        entity_type='pallet',
        entity_id=pallet.pallet_id,
        from_stage=pallet.status,
        to_stage='dispatched',
        user=user,
        remarks=f'Shipment: {shipment.ship_id}',
    )

    pallet.status = 'dispatched'
    pallet.save(update_fields=['status', 'updated_at'])
    pallet.cartons.update(status='dispatched', updated_at=timezone.now())

    create_audit_log(
        request=request,
        user=user,
        action='shipment_create',
        model_name='Shipment',
        object_id=str(shipment.id),
        object_name=shipment.ship_id,
        object_reference=pallet.pallet_id,
        changes={
            'pallet': pallet.pallet_id,
            'cartons': [c.carton_id for c in cartons],
            'work_orders': sorted({c.work_order.wo_number for c in cartons}),
        },
    )
    return shipment


@transaction.atomic
def create_dispatch(work_order, batch, quantity, user=None, shipment=None, remarks='', request=None):
    """Dispatch quantity from a batch. Only QC-approved, not yet dispatched pieces are available."""
    if quantity is None or quantity <= 0:
        raise BusinessRuleError('Quantity must be greater than zero', field='quantity')

    batch = ProductionBatch.objects.select_for_update().get(pk=batch.pk)
    if batch.work_order_id != work_order.id:
        raise BusinessRuleError('Batch does not belong to this work order', field='batch')

    available = batch.available_to_dispatch
    if quantity > available:
        raise BusinessRuleError(f'Cannot dispatch {quantity} pcs. Only {available} pcs available', field='quantity')

    dispatch = Dispatch.objects.create(
        work_order=work_order,
        batch=batch,
        quantity=quantity,
        shipment=shipment,
        remarks=remarks or '',
        dispatched_by=user,
    )

    batch.dispatched_qty += quantity
    batch.save(update_fields=['dispatched_qty'])
    work_order = WorkOrder.objects.select_for_update().get(pk=work_order.pk)
    work_order.qty_dispatched += quantity
    work_order.save(update_fields=['qty_dispatched', 'updated_at'])

    create_audit_log(
        request=request,
        user=user,
        action='dispatch_create',
        model_name='Dispatch',
        object_id=str(dispatch.id),
        object_name=work_order.wo_number,
        object_reference=shipment.ship_id if shipment else None,
        changes={'batch': batch.batch_number, 'quantity': quantity},
    )
    return dispatch


@transaction.atomic
def delete_dispatch(dispatch, user=None, request=None):
    """Remove a dispatch and give the quantity back to its batch and work order"""
    batch = ProductionBatch.objects.select_for_update().get(pk=dispatch.batch_id)
    work_order = WorkOrder.objects.select_for_update().get(pk=dispatch.work_order_id)

    batch.dispatched_qty = max(0, batch.dispatched_qty - dispatch.quantity)
    batch.save(update_fields=['dispatched_qty'])
    work_order.qty_dispatched = max(0, work_order.qty_dispatched - dispatch.quantity)
    work_order.save(update_fields=['qty_dispatched', 'updated_at'])

    create_audit_log(
        request=request,
        user=user,
        action='dispatch_delete',
        model_name='Dispatch',
        object_id=str(dispatch.id),
        object_name=work_order.wo_number,
        changes={'batch': batch.batch_number, 'quantity': dispatch.quantity},
    )
    dispatch.delete()


def dispatch_eligibility(work_orders=None):
    """
    What each work order could ship now: cartons ready for dispatch,
    QC-approved batch quantity not yet dispatched, and finished goods stock for its item.
    """
    if work_orders is None:
        work_orders = WorkOrder.objects.filter(status__in=OPEN_WO_STATUSES)
    work_orders = work_orders.select_related('customer').annotate(
        ready_carton_count=Count('cartons', filter=Q(cartons__status='ready_for_dispatch'), distinct=True),
        ready_carton_qty=Sum('cartons__quantity', filter=Q(cartons__status='ready_for_dispatch')),
    ).order_by('due_date', 'wo_number')

    work_orders = list(work_orders)
    stock = finished_goods_summary({wo.item_code for wo in work_orders})
    batch_available = {}
    for batch in ProductionBatch.objects.filter(work_order__in=work_orders):
        batch_available[batch.work_order_id] = batch_available.get(batch.work_order_id, 0) + batch.available_to_dispatch

    results = []
    for wo in work_orders:
        inventory_qty = stock.get(wo.item_code, {}).get('available', 0)
        ready_qty = wo.ready_carton_qty or 0
        results.append({
            'work_order': wo.id,
            'wo_number': wo.wo_number,
            'item_code': wo.item_code,
            'customer_name': wo.customer_name,
            'quantity': wo.quantity,
            'qty_dispatched': wo.qty_dispatched,
            'dispatch_allowed': wo.dispatch_allowed,
            'ready_cartons': wo.ready_carton_count,
            'ready_carton_qty': ready_qty,
            'batch_available_qty': batch_available.get(wo.id, 0),
            'inventory_qty': inventory_qty,
            'total_available': ready_qty + inventory_qty,
        })
    return results
