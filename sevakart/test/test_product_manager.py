"""
Supplier product management validation
"""
import pytest

from sevakart.buisness.catalog.category_registry import ADD_NEW_SENTINEL, CategoryRegistry
from sevakart.buisness.catalog.product_manager import ProductManager
from sevakart.buisness.errors import DomainValidationError, ProductNotFoundError
from sevakart.buisness.ordering.order_factory import OrderFactory
from sevakart.data.catalog.category import Category
from sevakart.data.catalog.product import Product
from sevakart.data.ordering.order import Order


@pytest.fixture
def manager(store, supplier):
    store.create(Category(name='Vegetables'))
    return ProductManager(supplier, store=store)


def test_add_product(manager, supplier):
    product = manager.add_product(name=' Tomatoes ', price=40, unit='kg', category='Vegetables', stock=100)

    assert product.name == 'Tomatoes'
    assert product.supplier_id == supplier.id
    assert product.supplier == 'Fresh Mandi'


@pytest.mark.parametrize('fields', [
    {'name': '   '},
    {'price': 0},
    {'price': -5},
    {'stock': -1},
    {'unit': 'dozen'},
    {'category': 'Unknown'},
])
def test_invalid_product_is_rejected_before_writing(manager, store, fields):
    data = {'name': 'Onions', 'price': 30, 'unit': 'kg', 'category': 'Vegetables', 'stock': 10}
    data.update(fields)

    with pytest.raises(DomainValidationError):
        manager.add_product(**data)
    assert store.all(Product) == []


def test_name_is_unique_per_supplier_case_insensitively(manager, store, other_supplier):
    manager.add_product(name='Tomatoes', price=40, unit='kg', category='Vegetables')

    with pytest.raises(DomainValidationError):
        manager.add_product(name='tomatoes ', price=45, unit='kg', category='Vegetables')

    # Another supplier may sell a product with the same name
    ProductManager(other_supplier, store=store).add_product(name='Tomatoes', price=42, unit='kg',
                                                             category='Vegetables')
    assert len(store.all(Product)) == 2


def test_add_with_new_category(manager, store):
    product = manager.add_product(name='Paneer', price=300, unit='kg',
                                  category={'value': ADD_NEW_SENTINEL, 'new_name': 'Dairy'})

    assert product.category == 'Dairy'
    assert CategoryRegistry(store).vocabulary() == ['all', 'Vegetables', 'Dairy']


def test_update_product(manager):
    product = manager.add_product(name='Tomatoes', price=40, unit='kg', category='Vegetables', stock=5)
    manager.add_product(name='Onions', price=30, unit='kg', category='Vegetables')

    updated = manager.update_product(product.id, {'price': 45, 'stock': 50, 'name': 'TOMATOES'})
    assert (updated.price, updated.stock, updated.name) == (45, 50, 'TOMATOES')

    with pytest.raises(DomainValidationError):
        manager.update_product(product.id, {'name': 'onions'})


def test_only_owner_can_change_product(manager, store, other_supplier):
    product = manager.add_product(name='Tomatoes', price=40, unit='kg', category='Vegetables')
    rival = ProductManager(other_supplier, store=store)

    with pytest.raises(ProductNotFoundError):
        rival.update_product(product.id, {'price': 1})
    with pytest.raises(ProductNotFoundError):
        rival.delete_product(product.id)


def test_delete_keeps_order_history(manager, store, vendor, supplier):
    product = manager.add_product(name='Tomatoes', price=40, unit='kg', category='Vegetables')
    order = OrderFactory(vendor, store=store).place_order(
        [{'name': 'Tomatoes', 'qty': 2, 'price': 40, 'supplierId': supplier.id}]
    )

    manager.delete_product(product.id)

    assert store.all(Product) == []
    assert store.get(Order, order.id).items[0].name == 'Tomatoes'


def test_vendors_cannot_manage_products(store, vendor):
    with pytest.raises(DomainValidationError):
        ProductManager(vendor, store=store)
