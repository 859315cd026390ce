from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from sqlalchemy import func

from sevakart import db, limiter, login_manager
from sevakart.data.core.user import ROLES, User
from sevakart.utils.logger import get_logger
from sevakart.utils.logging_sanitizer import sanitize_dict

logger = get_logger("sevakart.auth")
auth = Blueprint('auth', __name__)


@login_manager.unauthorized_handler
def unauthorized():
    logger.debug(f"Unauthenticated request to {request.path}")
    return jsonify({'error': 'Authentication required'}), 401


def _payload():
    return request.get_json(silent=True) or request.form.to_dict()


@auth.route('/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@auth.route('/register', methods=['POST'])
@limiter.limit("10 per minute")
def register():
    data = _payload()
    logger.debug(f"Registration attempt: {sanitize_dict(data)}")

    username = (data.get('username') or '').strip()
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    role = data.get('role')
    display_name = (data.get('display_name') or data.get('displayName') or '').strip()

    if not username or not email or not password:
        return jsonify({'error': 'Username, email and password are required'}), 400
    if len(password) < 8:
        return jsonify({'error': 'Password must be at least 8 characters'}), 400
    if role not in ROLES:
        return jsonify({'error': f"Role must be one of: {', '.join(ROLES)}"}), 400

    existing = User.query.filter(
        (func.lower(User.username) == username.lower()) | (User.email == email)
    ).first()
    if existing is not None:
        logger.warning(f"Registration rejected, username or email already in use: {username}")
        return jsonify({'error': 'Username or email already in use'}), 409

    user = User(username=username, email=email, role=role, display_name=display_name or None)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    login_user(user)
    logger.info(f"Registered new {role}: {username} ({user.uid})")
    return jsonify({'user': user.to_dict()}), 201


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    if current_user.is_authenticated:
        logger.debug(f"User {current_user.username} already authenticated")
        return jsonify({'user': current_user.to_dict()})

    data = _payload()
    username = data.get('username')
    password = data.get('password')

    logger.debug(f"Login attempt for username: {username}")

    if not username or not password:
        logger.warning(f"Login attempt with missing credentials for username: {username}")
        return jsonify({'error': 'Please enter both username and password'}), 400

    user = User.query.filter_by(username=username).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'error': 'Invalid username or password'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {username}")
        return jsonify({'error': 'Account is disabled'}), 403

    login_user(user, remember=bool(data.get('remember')))
    logger.info(f"Successful login for user: {username}")
    return jsonify({'user': user.to_dict()})


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    return jsonify({'message': 'Logged out'})


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})
