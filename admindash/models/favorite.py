"""Favorite model: a free link or a pointer to an owned content item."""

from admindash.extensions import db
from admindash.models.mixins import OwnedMixin, isoformat


class Favorite(OwnedMixin, db.Model):
    __tablename__ = 'favorites'
    __table_args__ = (
        db.Index('ix_favorite_user_position', 'user_id', 'position'),
        db.CheckConstraint(
            '(target_kind IS NULL AND target_id IS NULL) OR '
            '(target_kind IS NOT NULL AND target_id IS NOT NULL)',
            name='ck_favorite_target_pair',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500))
    icon = db.Column(db.String(50))
    url = db.Column(db.String(2048))
    target_kind = db.Column(db.String(20))
    target_id = db.Column(db.Integer)
    position = db.Column(db.Integer, nullable=False, default=0)

    @property
    def has_target(self):
        return self.target_kind is not None and self.target_id is not None

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'icon': self.icon,
            'url': self.url,
            'target_kind': self.target_kind,
            'target_id': self.target_id,
            'position': self.position,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Favorite {self.title}>'
