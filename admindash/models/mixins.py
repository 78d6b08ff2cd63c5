"""Column mixins shared by the owned models."""

from datetime import datetime, timezone

from sqlalchemy.orm import declared_attr

from admindash.extensions import db


def utcnow():
    """Naive UTC timestamp, the same shape SQLite hands back on reload."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value is not None else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class OwnedMixin(TimestampMixin):
    """Row that belongs to exactly one user."""

    @declared_attr
    def user_id(cls):
        return db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)


class ContentMixin(OwnedMixin):
    """Columns common to every linkable content kind."""

    @declared_attr
    def category_id(cls):
        return db.Column(
            db.Integer,
            db.ForeignKey('categories.id', ondelete='SET NULL'),
            nullable=True,
        )

    @declared_attr
    def category(cls):
        return db.relationship('Category')
