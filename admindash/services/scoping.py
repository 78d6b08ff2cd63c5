"""Slug normalization and per-user, per-section uniqueness.

Categories and tags share the same rule: ``(user_id, slug, section)`` is
unique, and a ``None`` section is its own bucket rather than a wildcard.
"""

import logging
import re

from admindash.errors import ConflictError, ValidationError
from admindash.models.category import SECTIONS

logger = logging.getLogger(__name__)

_STRIP_RE = re.compile(r'[^\w\s-]')
_COLLAPSE_RE = re.compile(r'[\s_-]+')


def slugify(text):
    """Lower-case, drop punctuation, join words with single hyphens.

    >>> slugify('  Infra & Ops__Team ')
    'infra-ops-team'
    """
    slug = _STRIP_RE.sub('', text.lower())
    slug = _COLLAPSE_RE.sub('-', slug)
    return slug.strip('-')


def normalize_section(value):
    """Map an incoming section to a SECTIONS member, or None for global."""
    if value is None:
        return None
    value = str(value).strip().upper()
    if not value:
        return None
    if value not in SECTIONS:
        raise ValidationError(
            f"Unknown section '{value}'",
            details={'section': [f"Must be one of: {', '.join(SECTIONS)}"]},
        )
    return value


def describe_scope(section):
    return f'section {section}' if section else 'the global scope'


def ensure_unique_slug(model, user_id, slug, section, exclude_id=None, resource=None):
    """Raise ConflictError if ``slug`` is taken in the user's ``section`` bucket."""
    if not slug:
        raise ValidationError(
            'Name must contain at least one letter or digit',
            details={'name': ['Name produces an empty slug']},
        )

    query = model.query.filter(model.user_id == user_id, model.slug == slug)
    if section is None:
        query = query.filter(model.section.is_(None))
    else:
        query = query.filter(model.section == section)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)

    if query.first() is not None:
        resource = resource or model.__name__
        logger.warning('%s slug %r already used by user %s in %s',
                       resource, slug, user_id, describe_scope(section))
        raise ConflictError(
            f"A {resource.lower()} named '{slug}' already exists in {describe_scope(section)}",
            resource=resource,
            key={'slug': slug, 'section': section},
        )
