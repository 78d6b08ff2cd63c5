from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from admindash.extensions import db


ROLE_ADMIN = 'ADMIN'
ROLE_USER = 'USER'
ROLE_READONLY = 'READONLY'

ROLES = [ROLE_ADMIN, ROLE_USER, ROLE_READONLY]

_CRUD = ('create', 'read', 'update', 'delete')

# Module -> allowed actions, per role
ROLE_PERMISSIONS = {
    ROLE_ADMIN: {
        'favorites': _CRUD,
        'categories': _CRUD,
        'tags': _CRUD,
        'search': ('read',),
        'users': _CRUD,
    },
    ROLE_USER: {
        'favorites': _CRUD,
        'categories': _CRUD,
        'tags': _CRUD,
        'search': ('read',),
    },
    ROLE_READONLY: {
        'favorites': ('read',),
        'categories': ('read',),
        'tags': ('read',),
        'search': ('read',),
    },
}


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True)
    password_hash = db.Column(db.String(256), nullable=False)
    display_name = db.Column(db.String(120))
    role = db.Column(db.String(20), default=ROLE_USER, nullable=False)
    is_active_user = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    last_login = db.Column(db.DateTime, nullable=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        return bool(self.is_active_user)

    def can(self, module, action):
        """Capability check used by the permission_required decorator."""
        modules = ROLE_PERMISSIONS.get(self.role, {})
        return action in modules.get(module, ())

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'display_name': self.display_name,
            'role': self.role,
        }

    def __repr__(self):
        return f'<User {self.username}>'
