"""Resolve a (kind, id) reference to a small display projection."""

import logging

from admindash.extensions import db
from admindash.services.entity_registry import get_kind

logger = logging.getLogger(__name__)


def resolve_target(kind, target_id, user_id=None):
    """Return ``{'id': ..., <label field>: ...}`` for the referenced item.

    Returns None for an unregistered or empty kind, a missing id, an item
    that no longer exists, or (when ``user_id`` is given) an item owned by
    someone else. Never raises for stale references.
    """
    entry = get_kind(kind)
    if entry is None or target_id is None:
        return None

    obj = db.session.get(entry.model, target_id)
    if obj is None:
        logger.debug('Stale %s reference %s', entry.kind, target_id)
        return None
    if user_id is not None and obj.user_id != user_id:
        return None

    return {'id': obj.id, entry.label_field: entry.label_of(obj)}


def target_exists(kind, target_id, user_id):
    return resolve_target(kind, target_id, user_id) is not None
