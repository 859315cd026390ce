from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from sevakart.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    """
    Build the SevaKart Flask application.

    Args:
        test_config (dict, optional): Config overrides applied before the
            extensions are bound (used by the test suite).

    Returns:
        Flask: Configured application
    """
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("sevakart")
    logger.info("Initializing SevaKart application")

    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file in instance/
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'sevakart.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session cookie security configuration
    # Default to True (secure) - only set to False for development (HTTP)
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '3600'))
    app.config['REMEMBER_COOKIE_SECURE'] = _env_flag('REMEMBER_COOKIE_SECURE', 'True')
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True

    # JSON clients send the CSRF token as a header
    app.config['WTF_CSRF_HEADERS'] = ['X-CSRFToken', 'X-CSRF-Token']

    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')
    app.config['RATELIMIT_STORAGE_URI'] = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Quantity offered by the inventory "Reorder" action
    app.config['DEFAULT_REORDER_QUANTITY'] = int(os.environ.get('DEFAULT_REORDER_QUANTITY', '5'))

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    login_manager.login_message = 'Please log in to access this resource.'

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from sevakart.data.core.user import User  # noqa: F401
    from sevakart.data.catalog.product import Product  # noqa: F401
    from sevakart.data.catalog.category import Category  # noqa: F401
    from sevakart.data.ordering.cart_entry import CartEntry  # noqa: F401
    from sevakart.data.ordering.order import Order, OrderLineItem  # noqa: F401
    from sevakart.data.inventory.inventory_item import InventoryItem  # noqa: F401

    logger.debug("Models imported and registered")

    # Shared record store (persistence + change notification)
    from sevakart.buisness.core.record_store import RecordStore
    app.extensions['sevakart_record_store'] = RecordStore()

    # Register blueprints
    from sevakart.auth import auth
    from sevakart.presentation.routes import init_app as init_routes

    app.register_blueprint(auth, url_prefix='/auth')
    init_routes(app)

    logger.info("SevaKart application initialization complete")

    return app
