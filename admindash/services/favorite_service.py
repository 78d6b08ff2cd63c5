"""Favorites service: per-user ordered bookmarks to links or content items."""

import logging

from admindash.errors import NotFoundError, ValidationError
from admindash.extensions import db
from admindash.models.favorite import Favorite
from admindash.services.target_resolver import resolve_target

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'description', 'icon', 'url', 'target_kind', 'target_id', 'position')


def _check_target_pair(target_kind, target_id):
    if (target_kind is None) != (target_id is None):
        raise ValidationError(
            'target_kind and target_id must be provided together',
            details={'target': ['Both target_kind and target_id are required, or neither']},
        )


def serialize_favorite(fav):
    """Favorite as a dict, decorated with its resolved target when it has one."""
    data = fav.to_dict()
    if fav.has_target:
        resolved = resolve_target(fav.target_kind, fav.target_id, fav.user_id)
        if resolved is not None:
            data['resolved_target'] = resolved
            data['broken_link'] = False
        else:
            data['broken_link'] = True
    return data


def get_user_favorites(user_id):
    """Return the user's favorites ordered by position, with resolved targets."""
    favorites = (
        Favorite.query
        .filter_by(user_id=user_id)
        .order_by(Favorite.position, Favorite.id)
        .all()
    )
    return [serialize_favorite(fav) for fav in favorites]


def get_favorite(favorite_id, user_id):
    """Return the Favorite, or raise NotFoundError if missing or not the user's."""
    fav = Favorite.query.filter_by(id=favorite_id, user_id=user_id).first()
    if fav is None:
        raise NotFoundError('Favorite', favorite_id)
    return fav


def next_position(user_id):
    max_position = db.session.query(
        db.func.coalesce(db.func.max(Favorite.position), 0)
    ).filter(Favorite.user_id == user_id).scalar()
    return max_position + 1


def create_favorite(user_id, data):
    """Create a favorite appended after the user's current last position.

    An explicit ``position`` in ``data`` is used as is. Existing entries are
    never renumbered.
    """
    target_kind = data.get('target_kind')
    target_id = data.get('target_id')
    _check_target_pair(target_kind, target_id)

    position = data.get('position')
    if position is None:
        position = next_position(user_id)

    fav = Favorite(
        user_id=user_id,
        title=data['title'],
        description=data.get('description'),
        icon=data.get('icon'),
        url=data.get('url'),
        target_kind=target_kind,
        target_id=target_id,
        position=position,
    )
    db.session.add(fav)
    db.session.commit()
    logger.info('Favorite %s created for user %s at position %s', fav.id, user_id, position)
    return fav


def update_favorite(favorite_id, user_id, data):
    """Apply a partial update. Keys present with None clear the field."""
    fav = get_favorite(favorite_id, user_id)

    target_kind = data['target_kind'] if 'target_kind' in data else fav.target_kind
    target_id = data['target_id'] if 'target_id' in data else fav.target_id
    _check_target_pair(target_kind, target_id)

    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        if field in ('title', 'position') and data[field] is None:
            continue
        setattr(fav, field, data[field])
    db.session.commit()
    return fav


def delete_favorite(favorite_id, user_id):
    """Delete a favorite. Surrounding positions are left untouched."""
    fav = get_favorite(favorite_id, user_id)
    db.session.delete(fav)
    db.session.commit()
    logger.info('Favorite %s deleted for user %s', favorite_id, user_id)


def reorder_favorites(user_id, items):
    """Apply explicit ``{id, position}`` pairs in one transaction.

    Every id must belong to the user; otherwise nothing is written and
    NotFoundError is raised. Positions are taken as given, duplicates
    included.
    """
    try:
        for item in items:
            fav = Favorite.query.filter_by(id=item['id'], user_id=user_id).first()
            if fav is None:
                raise NotFoundError('Favorite', item['id'])
            fav.position = item['position']
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.warning('Reorder of %d favorites for user %s rolled back', len(items), user_id)
        raise
    return {'updated': len(items)}
