from admindash.extensions import db
from admindash.models.category import DEFAULT_COLOR
from admindash.models.mixins import OwnedMixin, utcnow


class Tag(OwnedMixin, db.Model):
    __tablename__ = 'tags'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'slug', 'section', name='uq_tag_user_slug_section'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    slug = db.Column(db.String(60), nullable=False, index=True)
    section = db.Column(db.String(20), nullable=True)
    color = db.Column(db.String(7), nullable=False, default=DEFAULT_COLOR)

    items = db.relationship('ItemTag', back_populates='tag', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'section': self.section,
            'color': self.color,
        }

    def __repr__(self):
        return f'<Tag {self.slug} ({self.section or "global"})>'


class ItemTag(db.Model):
    """Polymorphic link between a tag and any registered content kind."""

    __tablename__ = 'item_tags'
    __table_args__ = (
        db.UniqueConstraint('tag_id', 'target_kind', 'target_id', name='uq_item_tag'),
        db.Index('ix_item_tag_target', 'target_kind', 'target_id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    tag_id = db.Column(db.Integer, db.ForeignKey('tags.id', ondelete='CASCADE'), nullable=False)
    target_kind = db.Column(db.String(20), nullable=False)
    target_id = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    tag = db.relationship('Tag', back_populates='items')

    def __repr__(self):
        return f'<ItemTag {self.tag_id} -> {self.target_kind}:{self.target_id}>'
