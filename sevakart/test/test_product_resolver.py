"""
Name-based matching of historical order lines against the live catalog
"""
from types import SimpleNamespace

from sevakart.buisness.catalog.product_resolver import (
    REORDER_FALLBACK_CATEGORY,
    REORDER_FALLBACK_STOCK,
    REORDER_FALLBACK_SUPPLIER,
    REORDER_FALLBACK_UNIT,
    resolve_product,
    resolve_reorder_item,
)
from sevakart.data.catalog.product import Product


def _catalog():
    tomatoes = Product(name='Tomatoes', price=45, unit='kg', category='Vegetables',
                       supplier='Fresh Mandi', supplier_id='s1', stock=80, image='tomato.jpg')
    tomatoes.id = 11
    rival = Product(name='Tomatoes', price=42, unit='kg', category='Vegetables',
                    supplier='Other Mandi', supplier_id='s2', stock=10)
    rival.id = 12
    return [tomatoes, rival]


def test_resolve_product_respects_supplier():
    catalog = _catalog()
    assert resolve_product(catalog, 'tomatoes').id == 11
    assert resolve_product(catalog, 'tomatoes', supplier_id='s2').id == 12
    assert resolve_product(catalog, 'tomatoes', supplier_id='s3') is None


def test_reorder_line_matching_catalog_uses_live_details():
    line = SimpleNamespace(name='tomatoes', qty=3, price=40, supplier_id='s1')

    item = resolve_reorder_item(line, _catalog())

    assert item.product_id == '11'
    assert item.unit == 'kg'
    assert item.category == 'Vegetables'
    assert item.supplier == 'Fresh Mandi'
    assert item.stock == 80
    assert item.image == 'tomato.jpg'
    # Frozen values from the order line are kept
    assert item.price == 40
    assert item.quantity == 3
    assert item.name == 'tomatoes'


def test_reorder_line_without_match_uses_fallbacks():
    line = SimpleNamespace(name='Paneer', qty=2, price=300, supplier_id='s9')

    first = resolve_reorder_item(line, _catalog())
    second = resolve_reorder_item(line, _catalog())

    assert first.product_id.startswith('reorder-')
    assert first.product_id != second.product_id
    assert first.unit == REORDER_FALLBACK_UNIT
    assert first.category == REORDER_FALLBACK_CATEGORY
    assert first.supplier == REORDER_FALLBACK_SUPPLIER
    assert first.stock == REORDER_FALLBACK_STOCK
    assert first.supplier_id == 's9'
    assert first.price == 300
