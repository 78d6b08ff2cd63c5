"""Category service: user categories with section-scoped slugs."""

from admindash.errors import NotFoundError
from admindash.extensions import db
from admindash.models.category import Category, DEFAULT_COLOR
from admindash.services.entity_registry import all_kinds
from admindash.services.scoping import slugify, normalize_section, ensure_unique_slug


def _count_items(category_ids):
    """Number of content items per category id, across every content kind."""
    totals = dict.fromkeys(category_ids, 0)
    if not category_ids:
        return totals
    for entry in all_kinds():
        model = entry.model
        rows = (
            db.session.query(model.category_id, db.func.count(model.id))
            .filter(model.category_id.in_(category_ids))
            .group_by(model.category_id)
            .all()
        )
        for category_id, count in rows:
            totals[category_id] += count
    return totals


def list_categories(user_id, section=None):
    """Return the user's categories as dicts, ordered by name.

    With a section, the result holds that section's categories plus the
    global ones.
    """
    query = Category.query.filter_by(user_id=user_id)
    section = normalize_section(section)
    if section is not None:
        query = query.filter(db.or_(Category.section == section, Category.section.is_(None)))
    categories = query.order_by(Category.name, Category.id).all()

    totals = _count_items([c.id for c in categories])
    result = []
    for category in categories:
        data = category.to_dict()
        data['total_items'] = totals[category.id]
        result.append(data)
    return result


def get_category(category_id, user_id):
    category = Category.query.filter_by(id=category_id, user_id=user_id).first()
    if category is None:
        raise NotFoundError('Category', category_id)
    return category


def create_category(user_id, data):
    slug = slugify(data['name'])
    section = normalize_section(data.get('section'))
    ensure_unique_slug(Category, user_id, slug, section, resource='Category')

    category = Category(
        user_id=user_id,
        name=data['name'],
        slug=slug,
        section=section,
        color=data.get('color') or DEFAULT_COLOR,
        icon=data.get('icon'),
        description=data.get('description'),
    )
    db.session.add(category)
    db.session.commit()
    return category


def update_category(category_id, user_id, data):
    """Partial update.

    The slug follows the name; a section change alone keeps the slug but
    moves it into another bucket, so uniqueness is checked again.
    """
    category = get_category(category_id, user_id)

    slug = category.slug
    section = category.section
    if data.get('name'):
        slug = slugify(data['name'])
    if 'section' in data:
        section = normalize_section(data['section'])

    if slug != category.slug or section != category.section:
        ensure_unique_slug(Category, user_id, slug, section,
                           exclude_id=category.id, resource='Category')

    if data.get('name'):
        category.name = data['name']
    category.slug = slug
    category.section = section
    for field in ('color', 'icon', 'description'):
        if field in data:
            setattr(category, field, data[field])
    if category.color is None:
        category.color = DEFAULT_COLOR
    db.session.commit()
    return category


def delete_category(category_id, user_id):
    category = get_category(category_id, user_id)
    db.session.delete(category)
    db.session.commit()
