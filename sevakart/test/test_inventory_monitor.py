"""
Stock classification, valuation and the inventory reorder trigger
"""
from types import SimpleNamespace

import pytest

from sevakart.buisness.errors import DomainValidationError, ProductNotFoundError, RecordNotFoundError
from sevakart.buisness.inventory.inventory_monitor import (
    FALLBACK_UNIT_PRICE,
    InventoryMonitor,
    classify,
    needs_reorder,
    total_value,
)
from sevakart.data.catalog.product import Product
from sevakart.data.ordering.order import Order


@pytest.mark.parametrize('stock, expected', [
    (0, 'critical'),
    (2, 'critical'),
    (3, 'low'),
    (5, 'low'),
    (6, 'good'),
    (250, 'good'),
])
def test_classify_thresholds(stock, expected):
    assert classify(stock) == expected


def test_classify_rejects_negative_and_fractional_stock():
    with pytest.raises(DomainValidationError):
        classify(-1)
    with pytest.raises(DomainValidationError):
        classify(2.5)


def test_needs_reorder():
    assert needs_reorder(SimpleNamespace(current_stock=5))
    assert not needs_reorder(SimpleNamespace(current_stock=6))


def test_total_value_uses_catalog_price_or_fallback():
    products = [Product(name='Tomatoes', price=40), Product(name='Cooking Oil', price=120)]
    items = [
        SimpleNamespace(name='tomatoes', current_stock=3),
        SimpleNamespace(name='Cooking Oil', current_stock=2),
        SimpleNamespace(name='Saffron', current_stock=4),
    ]
    assert total_value(items, products) == 3 * 40 + 2 * 120 + 4 * FALLBACK_UNIT_PRICE
    assert FALLBACK_UNIT_PRICE == 50


def test_add_and_update_recompute_status(store, vendor):
    monitor = InventoryMonitor.for_identity(vendor, store=store)

    item = monitor.add_item(name='  Onions ', current_stock=10, unit='kg')
    assert item.name == 'Onions'
    assert item.status == 'good'

    item = monitor.update_item(item.id, {'current_stock': 4})
    assert item.status == 'low'

    item = monitor.update_item(item.id, {'unit': 'packet'})
    assert item.status == 'low'
    assert item.unit == 'packet'


def test_invalid_items_are_rejected_before_writing(store, vendor):
    monitor = InventoryMonitor.for_identity(vendor, store=store)
    with pytest.raises(DomainValidationError):
        monitor.add_item(name='', current_stock=3)
    with pytest.raises(DomainValidationError):
        monitor.add_item(name='Rice', current_stock=-2)
    with pytest.raises(DomainValidationError):
        monitor.add_item(name='Rice', current_stock=2, unit='tonne')
    assert monitor.items() == []


def test_items_are_vendor_scoped(store, vendor, other_vendor):
    mine = InventoryMonitor.for_identity(vendor, store=store).add_item(name='Rice', current_stock=1)
    theirs = InventoryMonitor.for_identity(other_vendor, store=store)

    assert theirs.items() == []
    with pytest.raises(RecordNotFoundError):
        theirs.delete_item(mine.id)


def test_low_and_critical_listing(store, vendor):
    monitor = InventoryMonitor.for_identity(vendor, store=store)
    monitor.add_item(name='Tomatoes', current_stock=1)
    monitor.add_item(name='Onions', current_stock=4)
    monitor.add_item(name='Rice', current_stock=20)

    assert [i.name for i in monitor.critical_stock_items()] == ['Tomatoes']
    assert [i.name for i in monitor.low_stock_items()] == ['Onions']
    assert [i.name for i in monitor.items_needing_reorder()] == ['Tomatoes', 'Onions']
    assert monitor.summary()['total_items'] == 3


def test_reorder_defaults_to_five_units(store, vendor, supplier, add_product):
    add_product('Tomatoes', 40)
    monitor = InventoryMonitor.for_identity(vendor, store=store)
    item = monitor.add_item(name='Tomatoes', current_stock=1)

    order = monitor.reorder(item.id)

    assert [(line.name, line.qty) for line in order.items] == [('Tomatoes', 5)]
    assert order.total == 200
    assert order.vendor_id == vendor.id


def test_reorder_never_touches_inventory_stock(store, vendor, add_product):
    add_product('Tomatoes', 40)
    monitor = InventoryMonitor.for_identity(vendor, store=store)
    item = monitor.add_item(name='Tomatoes', current_stock=1)

    monitor.reorder(item.id, 10)

    assert monitor.get_item(item.id).current_stock == 1


def test_reorder_for_unknown_product_writes_nothing(store, vendor):
    monitor = InventoryMonitor.for_identity(vendor, store=store)
    item = monitor.add_item(name='Saffron', current_stock=0)

    with pytest.raises(ProductNotFoundError):
        monitor.reorder(item.id)
    assert store.all(Order) == []


def test_monitor_requires_vendor(supplier):
    with pytest.raises(DomainValidationError):
        InventoryMonitor.for_identity(supplier)
