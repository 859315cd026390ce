from sevakart import db
from sevakart.data.core.user_created_base import UserCreatedBase


class Category(UserCreatedBase):
    """Product category vocabulary entry (append-only)"""
    __tablename__ = 'categories'

    name = db.Column(db.String(100), unique=True, nullable=False)

    def __repr__(self):
        return f'<Category {self.name}>'
