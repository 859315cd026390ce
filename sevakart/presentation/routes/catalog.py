from flask import Blueprint, jsonify, request

from sevakart.buisness.catalog.catalog_index import CatalogIndex, filter_by_category, search
from sevakart.buisness.catalog.category_registry import CategoryRegistry
from sevakart.buisness.catalog.product_manager import ProductManager
from sevakart.presentation.routes.access import json_body, login_identity_required, supplier_required
from sevakart.utils.logger import get_logger

bp = Blueprint('catalog', __name__)
logger = get_logger("sevakart.routes.catalog")


@bp.get('/products')
@login_identity_required
def list_products(identity):
    q = request.args.get('q', type=str)
    category = request.args.get('category', type=str)
    mine = request.args.get('mine', type=str) in ('1', 'true')

    index = CatalogIndex()
    products = index.products_for_supplier(identity.id) if mine else index.list_products()
    # Stateless API: both filters may be given and are applied together
    products = filter_by_category(search(products, q), category)

    return jsonify([p.to_dict() for p in products])


@bp.post('/products')
@supplier_required
def add_product(identity):
    data = json_body()
    category = data.get('category')
    if data.get('new_category'):
        category = {'value': category, 'new_name': data.get('new_category')}

    product = ProductManager(identity).add_product(
        name=data.get('name'),
        price=data.get('price'),
        unit=data.get('unit'),
        category=category,
        stock=data.get('stock', 0),
        image=data.get('image'),
    )
    return jsonify(product.to_dict()), 201


@bp.patch('/products/<int:product_id>')
@supplier_required
def update_product(identity, product_id):
    data = json_body()
    if data.get('new_category'):
        data['category'] = {'value': data.get('category'), 'new_name': data.get('new_category')}
    product = ProductManager(identity).update_product(product_id, data)
    return jsonify(product.to_dict())


@bp.delete('/products/<int:product_id>')
@supplier_required
def delete_product(identity, product_id):
    ProductManager(identity).delete_product(product_id)
    return jsonify({'deleted': product_id})


@bp.get('/categories')
@login_identity_required
def list_categories(identity):
    return jsonify(CatalogIndex().categories())


@bp.post('/categories')
@supplier_required
def add_category(identity):
    name = CategoryRegistry().add(json_body().get('name'))
    logger.debug(f"Supplier {identity.id} added category '{name}'")
    return jsonify({'name': name}), 201
