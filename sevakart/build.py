#!/usr/bin/env python3
"""
Build orchestrator for SevaKart
Creates the tables and optionally loads the demo marketplace
"""

import json
import os
from pathlib import Path

from sevakart import db
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.build")

DEBUG_DATA_FILE = Path(__file__).parent / 'debug' / 'build_data_debug.json'


def build_models():
    """Create every table that does not exist yet"""
    db.create_all()
    logger.info("Database tables created")


def insert_debug_data(data_file=DEBUG_DATA_FILE):
    """
    Insert the demo suppliers, vendor, catalog and inventory.

    Records are looked up by their natural key first, so running the build
    twice does not duplicate anything. Demo passwords come from
    DEMO_USER_PASSWORD (see generate_env.py).

    Raises:
        RuntimeError: If DEMO_USER_PASSWORD is not set
    """
    from sevakart.buisness.inventory.inventory_monitor import classify
    from sevakart.data.catalog.category import Category
    from sevakart.data.catalog.product import Product
    from sevakart.data.core.user import User
    from sevakart.data.inventory.inventory_item import InventoryItem

    password = os.environ.get('DEMO_USER_PASSWORD')
    if not password:
        raise RuntimeError("DEMO_USER_PASSWORD must be set to insert debug data (run generate_env.py)")

    with open(data_file, 'r') as f:
        debug_data = json.load(f)

    try:
        users = {}
        for key, user_data in debug_data.get('Users', {}).items():
            user = User.query.filter_by(username=user_data['username']).first()
            if user is None:
                user = User.from_dict(user_data)
                user.set_password(password)
                db.session.add(user)
                db.session.flush()
                logger.info(f"Inserted demo {user.role}: {user.username}")
            users[key] = user

        for name in debug_data.get('Categories', []):
            if Category.query.filter_by(name=name).first() is None:
                db.session.add(Category(name=name))

        for product_data in debug_data.get('Products', []):
            supplier = users[product_data['supplier']]
            exists = Product.query.filter_by(supplier_id=supplier.uid, name=product_data['name']).first()
            if exists is not None:
                continue
            product = Product.from_dict(product_data, skip_fields=['supplier'])
            product.supplier = supplier.label
            product.supplier_id = supplier.uid
            db.session.add(product)

        for item_data in debug_data.get('Inventory', []):
            vendor = users[item_data['vendor']]
            exists = InventoryItem.query.filter_by(vendor_id=vendor.uid, name=item_data['name']).first()
            if exists is not None:
                continue
            item = InventoryItem.from_dict(item_data)
            item.vendor_id = vendor.uid
            item.status = classify(item.current_stock)
            db.session.add(item)

        db.session.commit()
        logger.info("Debug data inserted")
    except Exception as e:
        db.session.rollback()
        logger.error(f"Debug data insertion failed: {e}")
        raise


def build_database(app, build_only=False, enable_debug_data=True):
    """
    Main build entry point

    Args:
        app: The Flask application to build for
        build_only (bool): Create tables only
        enable_debug_data (bool): Whether to insert the demo marketplace
    """
    with app.app_context():
        logger.info(f"Starting database build (build_only={build_only}, debug_data={enable_debug_data})")
        build_models()

        if build_only or not enable_debug_data:
            logger.info("Skipping debug data")
            return

        insert_debug_data()
