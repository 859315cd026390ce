from sevakart import db, login_manager
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from datetime import datetime
from uuid import uuid4
from sevakart.buisness.core.data_insertion_mixin import DataInsertionMixin


ROLE_VENDOR = 'vendor'
ROLE_SUPPLIER = 'supplier'
ROLES = (ROLE_VENDOR, ROLE_SUPPLIER)


def _new_uid():
    return uuid4().hex


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    # Stable account id referenced by orders, carts, products and inventory
    uid = db.Column(db.String(32), unique=True, nullable=False, default=_new_uid)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    display_name = db.Column(db.String(120), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_VENDOR)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_vendor(self):
        return self.role == ROLE_VENDOR

    @property
    def is_supplier(self):
        return self.role == ROLE_SUPPLIER

    @property
    def label(self):
        return self.display_name or self.username

    def to_dict(self, include_audit_fields=True):
        data = super().to_dict(include_audit_fields=include_audit_fields)
        data.pop('password_hash', None)
        return data

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
