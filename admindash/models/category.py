from admindash.extensions import db
from admindash.models.mixins import OwnedMixin, isoformat


# Coarse buckets scoping slug uniqueness; None means global
SECTIONS = (
    'SCRIPTS',
    'REGISTRIES',
    'MONITORING',
    'NOTES',
    'PROCEDURES',
    'TODOS',
    'RSS',
)

DEFAULT_COLOR = '#3B82F6'


class Category(OwnedMixin, db.Model):
    __tablename__ = 'categories'
    __table_args__ = (
        # NULL sections are distinct to the database; the service enforces
        # uniqueness inside the global bucket.
        db.UniqueConstraint('user_id', 'slug', 'section', name='uq_category_user_slug_section'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    slug = db.Column(db.String(60), nullable=False, index=True)
    section = db.Column(db.String(20), nullable=True)
    color = db.Column(db.String(7), nullable=False, default=DEFAULT_COLOR)
    icon = db.Column(db.String(50))
    description = db.Column(db.String(200))

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'section': self.section,
            'color': self.color,
            'icon': self.icon,
            'description': self.description,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Category {self.slug} ({self.section or "global"})>'
