"""
Cart aggregation, totals and best-effort persistence
"""
import logging

import pytest
from sqlalchemy.exc import OperationalError

from sevakart import db
from sevakart.buisness.errors import DomainValidationError, PersistenceError
from sevakart.buisness.ordering.cart_context import CartContext
from sevakart.buisness.ordering.cart_item import CartItem
from sevakart.data.ordering.cart_entry import CartEntry


def test_add_merges_by_product_and_totals(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    onions = add_product('Onions', 30)
    cart = CartContext.load(vendor.id, store=store)

    cart.add_to_cart(tomatoes)
    cart.add_to_cart(tomatoes, 2)
    cart.add_to_cart(onions, 2)

    assert [(item.name, item.quantity) for item in cart.items] == [('Tomatoes', 3), ('Onions', 2)]
    assert cart.total == 180
    assert cart.item_count == 5


def test_add_requires_positive_quantity(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)
    with pytest.raises(DomainValidationError):
        cart.add_to_cart(tomatoes, 0)
    assert cart.is_empty()


def test_add_does_not_check_stock(store, vendor, add_product):
    sold_out = add_product('Green Chili', 80, stock=0)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(sold_out, 4)
    assert cart.total == 320


def test_update_quantity_sets_or_removes(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    onions = add_product('Onions', 30)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(tomatoes)
    cart.add_to_cart(onions)

    cart.update_quantity(tomatoes.id, 5)
    assert cart.find(tomatoes.id).quantity == 5

    cart.update_quantity(onions.id, 0)
    assert cart.find(onions.id) is None
    assert cart.total == 200


def test_remove_missing_item_is_not_an_error(store, vendor, add_product):
    cart = CartContext.load(vendor.id, store=store)
    cart.remove_from_cart('does-not-exist')
    assert cart.is_empty()


def test_cart_is_restored_in_insertion_order(store, vendor, add_product):
    onions = add_product('Onions', 30)
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(onions, 2)
    cart.add_to_cart(tomatoes, 3)

    restored = CartContext.load(vendor.id, store=store)

    assert [(item.name, item.quantity) for item in restored.items] == [('Onions', 2), ('Tomatoes', 3)]
    assert restored.total == 180
    keys = {entry.key for entry in store.query_by(CartEntry, 'vendor_id', vendor.id)}
    assert keys == {f'{vendor.id}_{onions.id}', f'{vendor.id}_{tomatoes.id}'}


def test_cart_keeps_snapshot_after_price_change(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(tomatoes)

    store.update(type(tomatoes), tomatoes.id, {'price': 55})

    assert CartContext.load(vendor.id, store=store).total == 40


def test_clear_cart_persists_empty_state(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(tomatoes)

    cart.clear_cart()

    assert CartContext.load(vendor.id, store=store).is_empty()
    assert store.query_by(CartEntry, 'vendor_id', vendor.id) == []


def test_carts_are_per_vendor(store, vendor, other_vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    CartContext.load(vendor.id, store=store).add_to_cart(tomatoes, 2)
    CartContext.load(other_vendor.id, store=store).add_to_cart(tomatoes, 1)

    assert CartContext.load(vendor.id, store=store).item_count == 2
    assert CartContext.load(other_vendor.id, store=store).item_count == 1


def test_no_vendor_gives_empty_in_memory_cart(store, add_product):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(None, store=store)
    assert cart.is_empty()

    cart.add_to_cart(tomatoes)
    assert cart.total == 40
    assert store.all(CartEntry) == []


def test_replace_does_not_merge(store, vendor, add_product):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)
    cart.add_to_cart(tomatoes, 3)

    cart.replace([CartItem(product_id='reorder-1', name='Paneer', price=300, quantity=1)])

    assert [item.name for item in CartContext.load(vendor.id, store=store).items] == ['Paneer']


def test_failed_write_is_logged_and_local_cart_kept(store, vendor, add_product, monkeypatch, caplog):
    tomatoes = add_product('Tomatoes', 40)
    cart = CartContext.load(vendor.id, store=store)

    def failing_replace(*args, **kwargs):
        raise PersistenceError("store offline")

    monkeypatch.setattr(store, 'replace_where', failing_replace)

    with caplog.at_level(logging.ERROR, logger='sevakart'):
        cart.add_to_cart(tomatoes, 2)

    assert cart.total == 80
    assert any('keeping local cart' in record.getMessage() for record in caplog.records)


def test_replace_combines_items_with_the_same_product(store, vendor):
    cart = CartContext.load(vendor.id, store=store)
    first = CartItem(product_id='7', name='Tomatoes', price=40, quantity=2)

    cart.replace([first, CartItem(product_id='7', name='Tomatoes', price=40, quantity=1)])

    assert [(item.name, item.quantity) for item in CartContext.load(vendor.id, store=store).items] == [('Tomatoes', 3)]
    assert first.quantity == 2


def test_failed_load_rolls_back_session(store, vendor, monkeypatch):
    rollbacks = []
    original_rollback = db.session.rollback

    def failing_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def recording_rollback():
        rollbacks.append(True)
        original_rollback()

    monkeypatch.setattr(store, 'query_by', failing_query)
    monkeypatch.setattr(db.session, 'rollback', recording_rollback)

    cart = CartContext.load(vendor.id, store=store)

    assert cart.is_empty()
    assert rollbacks == [True]
