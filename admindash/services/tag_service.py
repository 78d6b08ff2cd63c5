"""Tag service: section-scoped tags and their links to content items."""

import logging

from admindash.errors import NotFoundError, ValidationError
from admindash.extensions import db
from admindash.models.category import DEFAULT_COLOR
from admindash.models.tag import Tag, ItemTag
from admindash.services.entity_registry import get_kind
from admindash.services.scoping import slugify, normalize_section, ensure_unique_slug
from admindash.services.target_resolver import target_exists

logger = logging.getLogger(__name__)


def _usage_counts(tag_ids):
    counts = dict.fromkeys(tag_ids, 0)
    if not tag_ids:
        return counts
    rows = (
        db.session.query(ItemTag.tag_id, db.func.count(ItemTag.id))
        .filter(ItemTag.tag_id.in_(tag_ids))
        .group_by(ItemTag.tag_id)
        .all()
    )
    counts.update(rows)
    return counts


def list_tags(user_id, section=None):
    """Return the user's tags as dicts, ordered by name, each with its usage count.

    With a section, the result holds that section's tags plus the global ones.
    """
    query = Tag.query.filter_by(user_id=user_id)
    section = normalize_section(section)
    if section is not None:
        query = query.filter(db.or_(Tag.section == section, Tag.section.is_(None)))
    tags = query.order_by(Tag.name, Tag.id).all()

    usage = _usage_counts([tag.id for tag in tags])
    result = []
    for tag in tags:
        data = tag.to_dict()
        data['usage_count'] = usage[tag.id]
        result.append(data)
    return result


def get_tag(tag_id, user_id):
    tag = Tag.query.filter_by(id=tag_id, user_id=user_id).first()
    if tag is None:
        raise NotFoundError('Tag', tag_id)
    return tag


def create_tag(user_id, data):
    slug = slugify(data['name'])
    section = normalize_section(data.get('section'))
    ensure_unique_slug(Tag, user_id, slug, section, resource='Tag')

    tag = Tag(
        user_id=user_id,
        name=data['name'],
        slug=slug,
        section=section,
        color=data.get('color') or DEFAULT_COLOR,
    )
    db.session.add(tag)
    db.session.commit()
    return tag


def bulk_create_tags(user_id, names):
    """Get-or-create a global tag for every name, in order.

    Names that slugify to an existing global tag return that tag; repeated
    names in the batch collapse onto the first one.
    """
    slugs = [slugify(name) for name in names]
    empty = [name for name, slug in zip(names, slugs) if not slug]
    if empty:
        raise ValidationError(
            'Every tag name needs at least one letter or digit',
            details={'names': [f"'{name}' produces an empty slug" for name in empty]},
        )

    tags = []
    created = []
    for name, slug in zip(names, slugs):
        tag = Tag.query.filter_by(user_id=user_id, slug=slug, section=None).first()
        if tag is None:
            tag = Tag(user_id=user_id, name=name, slug=slug, color=DEFAULT_COLOR)
            db.session.add(tag)
            db.session.flush()
            created.append(tag)
        tags.append(tag)
    db.session.commit()
    logger.info('Bulk tag import for user %s: %d names, %d created', user_id, len(names), len(created))
    return tags


def update_tag(tag_id, user_id, data):
    tag = get_tag(tag_id, user_id)

    slug = slugify(data['name']) if data.get('name') else tag.slug
    section = normalize_section(data['section']) if 'section' in data else tag.section
    if slug != tag.slug or section != tag.section:
        ensure_unique_slug(Tag, user_id, slug, section, exclude_id=tag.id, resource='Tag')

    if data.get('name'):
        tag.name = data['name']
    tag.slug = slug
    tag.section = section
    if data.get('color'):
        tag.color = data['color']
    db.session.commit()
    return tag


def delete_tag(tag_id, user_id):
    tag = get_tag(tag_id, user_id)
    db.session.delete(tag)
    db.session.commit()


def tag_item(user_id, tag_id, kind, target_id):
    """Attach one of the user's tags to one of the user's content items."""
    tag = get_tag(tag_id, user_id)
    entry = get_kind(kind)
    if entry is None:
        raise ValidationError(f"Unknown target kind '{kind}'",
                              details={'target_kind': ['Unknown kind']})
    if not target_exists(entry.kind, target_id, user_id):
        raise NotFoundError(entry.model.__name__, target_id)

    link = ItemTag.query.filter_by(
        tag_id=tag.id, target_kind=entry.kind, target_id=target_id,
    ).first()
    if link is None:
        link = ItemTag(tag_id=tag.id, target_kind=entry.kind, target_id=target_id)
        db.session.add(link)
        db.session.commit()
    return link


def untag_item(user_id, tag_id, kind, target_id):
    """Detach a tag. Returns True if a link was removed."""
    tag = get_tag(tag_id, user_id)
    entry = get_kind(kind)
    if entry is None:
        return False
    removed = ItemTag.query.filter_by(
        tag_id=tag.id, target_kind=entry.kind, target_id=target_id,
    ).delete()
    db.session.commit()
    return removed > 0


def tag_names_for(kind, target_ids):
    """Map target id -> sorted tag names for a batch of items of one kind."""
    names = {target_id: [] for target_id in target_ids}
    if not target_ids:
        return names
    rows = (
        db.session.query(ItemTag.target_id, Tag.name)
        .join(Tag, ItemTag.tag_id == Tag.id)
        .filter(ItemTag.target_kind == kind, ItemTag.target_id.in_(target_ids))
        .order_by(Tag.name)
        .all()
    )
    for target_id, name in rows:
        names[target_id].append(name)
    return names
