from flask import Blueprint, jsonify, request

from sevakart.buisness.errors import DomainValidationError
from sevakart.buisness.ordering.order_context import OrderContext
from sevakart.buisness.ordering.order_factory import OrderFactory
from sevakart.presentation.routes.access import (
    json_body,
    login_identity_required,
    supplier_required,
    vendor_required,
)
from sevakart.services.ordering.order_service import SUPPLIER_TABS, OrderService
from sevakart.utils.logger import get_logger

bp = Blueprint('orders', __name__)
logger = get_logger("sevakart.routes.orders")


@bp.get('/orders')
@login_identity_required
def list_orders(identity):
    tab = request.args.get('tab', type=str)
    if identity.is_supplier and tab:
        if tab not in SUPPLIER_TABS:
            raise DomainValidationError(f"Unknown tab '{tab}'")
        orders = OrderService.supplier_orders(identity.id, status=SUPPLIER_TABS[tab])
    else:
        orders = OrderService.orders_for(identity)
    return jsonify([OrderService.serialize_for(order, identity) for order in orders])


@bp.post('/orders')
@vendor_required
def place_order(identity):
    data = json_body()
    lines = data.get('items')
    if not isinstance(lines, list):
        raise DomainValidationError("'items' must be a list of line items")
    order = OrderFactory(identity).place_order(lines)
    return jsonify(order.to_dict()), 201


@bp.get('/orders/<int:order_id>')
@login_identity_required
def get_order(identity, order_id):
    order = OrderService.get_visible_order(order_id, identity)
    data = OrderService.serialize_for(order, identity)
    data['allowed_actions'] = OrderContext(order_id).allowed_actions() if identity.is_supplier else []
    return jsonify(data)


@bp.post('/orders/<int:order_id>/reorder')
@vendor_required
def reorder(identity, order_id):
    source = OrderService.get_visible_order(order_id, identity)
    order = OrderFactory(identity).reorder(source)
    return jsonify(order.to_dict()), 201


@bp.post('/orders/<int:order_id>/accept')
@supplier_required
def accept(identity, order_id):
    OrderService.get_visible_order(order_id, identity)
    order = OrderContext(order_id).accept()
    logger.info(f"Supplier {identity.id} accepted order {order_id}")
    return jsonify(OrderService.serialize_for(order, identity))


@bp.post('/orders/<int:order_id>/reject')
@supplier_required
def reject(identity, order_id):
    OrderService.get_visible_order(order_id, identity)
    OrderContext(order_id).reject()
    logger.info(f"Supplier {identity.id} rejected order {order_id}")
    return jsonify({'deleted': order_id})


@bp.post('/orders/<int:order_id>/deliver')
@supplier_required
def deliver(identity, order_id):
    OrderService.get_visible_order(order_id, identity)
    order = OrderContext(order_id).mark_delivered()
    logger.info(f"Supplier {identity.id} marked order {order_id} delivered")
    return jsonify(OrderService.serialize_for(order, identity))
