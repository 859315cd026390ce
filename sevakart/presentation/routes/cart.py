from flask import Blueprint, jsonify

from sevakart.buisness.catalog.catalog_index import CatalogIndex
from sevakart.buisness.errors import DomainValidationError, ProductNotFoundError
from sevakart.buisness.ordering.cart_context import CartContext
from sevakart.buisness.ordering.order_factory import OrderFactory
from sevakart.presentation.routes.access import json_body, vendor_required

bp = Blueprint('cart', __name__)


def _quantity(data, default=None):
    quantity = data.get('quantity', default)
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise DomainValidationError("Quantity must be a whole number")
    return quantity


@bp.get('/cart')
@vendor_required
def get_cart(identity):
    return jsonify(CartContext.load(identity.id).to_dict())


@bp.post('/cart/items')
@vendor_required
def add_item(identity):
    data = json_body()
    product = CatalogIndex().get_product(data.get('product_id'))
    if product is None:
        raise ProductNotFoundError(f"Product {data.get('product_id')} not found")

    cart = CartContext.load(identity.id)
    cart.add_to_cart(product, _quantity(data, default=1))
    return jsonify(cart.to_dict()), 201


@bp.patch('/cart/items/<product_id>')
@vendor_required
def update_item(identity, product_id):
    cart = CartContext.load(identity.id)
    cart.update_quantity(product_id, _quantity(json_body()))
    return jsonify(cart.to_dict())


@bp.delete('/cart/items/<product_id>')
@vendor_required
def remove_item(identity, product_id):
    cart = CartContext.load(identity.id)
    cart.remove_from_cart(product_id)
    return jsonify(cart.to_dict())


@bp.delete('/cart')
@vendor_required
def clear_cart(identity):
    cart = CartContext.load(identity.id)
    cart.clear_cart()
    return jsonify(cart.to_dict())


@bp.post('/cart/checkout')
@vendor_required
def checkout(identity):
    cart = CartContext.load(identity.id)
    order = OrderFactory(identity).place_order_from_cart(cart)
    return jsonify(order.to_dict()), 201
