"""
Routes package for SevaKart
JSON blueprints, one per marketplace area
"""

from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .access import register_error_handlers
    from . import cart, catalog, dashboard, inventory, orders

    app.register_blueprint(catalog.bp, url_prefix='/api')
    app.register_blueprint(cart.bp, url_prefix='/api')
    app.register_blueprint(orders.bp, url_prefix='/api')
    app.register_blueprint(inventory.bp, url_prefix='/api')
    app.register_blueprint(dashboard.bp, url_prefix='/api')

    register_error_handlers(app)

    logger.info("All route blueprints registered")
