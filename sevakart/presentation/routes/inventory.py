from flask import Blueprint, current_app, jsonify

from sevakart.buisness.inventory.inventory_monitor import InventoryMonitor
from sevakart.presentation.routes.access import json_body, vendor_required

bp = Blueprint('inventory', __name__)


@bp.get('/inventory')
@vendor_required
def list_items(identity):
    monitor = InventoryMonitor.for_identity(identity)
    return jsonify({
        'items': [item.to_dict() for item in monitor.items()],
        'summary': monitor.summary(),
    })


@bp.post('/inventory')
@vendor_required
def add_item(identity):
    data = json_body()
    item = InventoryMonitor.for_identity(identity).add_item(
        name=data.get('name'),
        current_stock=data.get('current_stock', data.get('currentStock')),
        unit=data.get('unit', 'kg'),
    )
    return jsonify(item.to_dict()), 201


@bp.patch('/inventory/<int:item_id>')
@vendor_required
def update_item(identity, item_id):
    data = json_body()
    if 'currentStock' in data:
        data['current_stock'] = data.pop('currentStock')
    item = InventoryMonitor.for_identity(identity).update_item(item_id, data)
    return jsonify(item.to_dict())


@bp.delete('/inventory/<int:item_id>')
@vendor_required
def delete_item(identity, item_id):
    InventoryMonitor.for_identity(identity).delete_item(item_id)
    return jsonify({'deleted': item_id})


@bp.post('/inventory/<int:item_id>/reorder')
@vendor_required
def reorder(identity, item_id):
    quantity = json_body().get('quantity', current_app.config['DEFAULT_REORDER_QUANTITY'])
    order = InventoryMonitor.for_identity(identity).reorder(item_id, quantity)
    return jsonify(order.to_dict())
