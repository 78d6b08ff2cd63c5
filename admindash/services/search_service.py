"""Global search across every registered content kind.

Each kind is queried on its own (scatter), results are merged and ranked
(gather). A failing kind is logged and contributes nothing; only when every
kind fails does the search as a whole fail.
"""

import logging

from flask import current_app

from admindash.errors import SearchUnavailableError
from admindash.extensions import db
from admindash.models.category import Category
from admindash.models.mixins import isoformat
from admindash.models.tag import Tag, ItemTag
from admindash.services.entity_registry import all_kinds, kinds_for_modules, TARGET_KINDS
from admindash.services.scoping import slugify
from admindash.services.tag_service import tag_names_for

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2

SCORE_EXACT = 3
SCORE_PREFIX = 2
SCORE_LABEL_SUBSTRING = 1
SCORE_ELSEWHERE = 0

# Characters that start a new word inside a label
TOKEN_SEPARATORS = (' ', '-', '_', '.', '/', ':')


def escape_like(value):
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def relevance(label, query):
    """Score a label against the query: exact > prefix > substring > other.

    A prefix match is either at the start of the label or right after one
    of TOKEN_SEPARATORS.
    """
    label = (label or '').lower()
    query = query.lower()
    if label == query:
        return SCORE_EXACT
    if label.startswith(query) or any(sep + query in label for sep in TOKEN_SEPARATORS):
        return SCORE_PREFIX
    if query in label:
        return SCORE_LABEL_SUBSTRING
    return SCORE_ELSEWHERE


def _relevance_expression(entry, query):
    """SQL version of relevance(), so each branch is truncated in rank order."""
    label = db.func.lower(entry.label_column)
    query = query.lower()
    prefix = [label.like(f'{escape_like(query)}%', escape='\\')]
    prefix += [label.like(f'%{escape_like(sep + query)}%', escape='\\') for sep in TOKEN_SEPARATORS]
    return db.case(
        (label == query, SCORE_EXACT),
        (db.or_(*prefix), SCORE_PREFIX),
        (label.like(f'%{escape_like(query)}%', escape='\\'), SCORE_LABEL_SUBSTRING),
        else_=SCORE_ELSEWHERE,
    )


def _name_filter(column_name, column_slug, values):
    names = [v.strip().lower() for v in values if v and v.strip()]
    slugs = [slugify(v) for v in names]
    return db.or_(db.func.lower(column_name).in_(names), column_slug.in_(slugs))


def _tag_condition(entry, user_id, tags):
    tagged = (
        db.select(ItemTag.target_id)
        .join(Tag, ItemTag.tag_id == Tag.id)
        .where(
            ItemTag.target_kind == entry.kind,
            Tag.user_id == user_id,
            _name_filter(Tag.name, Tag.slug, tags),
        )
    )
    return entry.model.id.in_(tagged)


def _category_condition(entry, user_id, categories):
    owned = (
        db.select(Category.id)
        .where(
            Category.user_id == user_id,
            _name_filter(Category.name, Category.slug, categories),
        )
    )
    return entry.model.category_id.in_(owned)


def search_kind(entry, user_id, query, tags, categories, limit):
    """The ``limit`` best matches for one kind, as result dicts."""
    model = entry.model
    pattern = f'%{escape_like(query)}%'
    matches = (
        model.query
        .filter(model.user_id == user_id)
        .filter(db.or_(*[col.ilike(pattern, escape='\\') for col in entry.search_columns()]))
    )
    if tags:
        matches = matches.filter(_tag_condition(entry, user_id, tags))
    if categories:
        matches = matches.filter(_category_condition(entry, user_id, categories))
    items = (
        matches
        .order_by(_relevance_expression(entry, query).desc(), model.updated_at.desc(), model.id)
        .limit(limit)
        .all()
    )

    tag_names = tag_names_for(entry.kind, [obj.id for obj in items])
    results = []
    for obj in items:
        label = entry.label_of(obj)
        results.append({
            'id': obj.id,
            'type': entry.module,
            'kind': entry.kind,
            'title': label,
            'description': entry.description_of(obj),
            'tags': tag_names[obj.id],
            'category': obj.category.name if obj.category is not None else None,
            'score': relevance(label, query),
            'created_at': obj.created_at,
            'updated_at': obj.updated_at,
        })
    return results


def _rank_key(result):
    updated = result['updated_at']
    return (
        -result['score'],
        -updated.timestamp() if updated is not None else 0,
        TARGET_KINDS.index(result['kind']),
        result['id'],
    )


def _scatter(kinds, user_id, branch, *args):
    """Run ``branch`` per kind, isolating failures.

    Returns (results, failed modules).
    """
    results = []
    failed = []
    for entry in kinds:
        try:
            results.extend(branch(entry, user_id, *args))
        except Exception:
            db.session.rollback()
            logger.exception('Search branch %s failed for user %s', entry.module, user_id)
            failed.append(entry.module)
    return results, failed


def global_search(user_id, q, modules=None, tags=None, categories=None, limit=None):
    """Search the user's items of every requested module.

    ``modules``, ``tags`` and ``categories`` are iterables of strings; tags
    and categories match by name or slug, unknown modules are ignored.
    Returns the ranked flat list, the same results grouped by module and a
    per-module count.
    """
    query = (q or '').strip()
    if limit is None:
        limit = current_app.config['SEARCH_DEFAULT_LIMIT']
    kinds = kinds_for_modules(modules)
    empty = {'query': query, 'results': [], 'grouped': {}, 'counts': {}, 'total': 0, 'failed': []}
    if not query or not kinds:
        return empty

    results, failed = _scatter(kinds, user_id, search_kind, query, tags, categories, limit)
    if failed and len(failed) == len(kinds):
        raise SearchUnavailableError()

    results.sort(key=_rank_key)
    results = results[:limit]

    grouped = {}
    for result in results:
        result['created_at'] = isoformat(result['created_at'])
        result['updated_at'] = isoformat(result['updated_at'])
        grouped.setdefault(result['type'], []).append(result)

    return {
        'query': query,
        'results': results,
        'grouped': grouped,
        'counts': {module: len(items) for module, items in grouped.items()},
        'total': len(results),
        'failed': failed,
    }


def suggest_kind(entry, user_id, query, limit):
    model = entry.model
    pattern = f'{escape_like(query)}%'
    items = (
        model.query
        .filter(model.user_id == user_id)
        .filter(entry.label_column.ilike(pattern, escape='\\'))
        .order_by(entry.label_column, model.id)
        .limit(limit)
        .all()
    )
    return [
        {'id': obj.id, 'type': entry.module, 'kind': entry.kind, 'title': entry.label_of(obj)}
        for obj in items
    ]


def get_search_suggestions(user_id, q, limit=None):
    """Autocomplete: label-prefix matches across all kinds.

    Queries shorter than MIN_QUERY_LENGTH return [] without touching the
    database.
    """
    query = (q or '').strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []
    if limit is None:
        limit = current_app.config['SEARCH_SUGGESTION_LIMIT']

    found, _ = _scatter(all_kinds(), user_id, suggest_kind, query, limit)

    seen = set()
    suggestions = []
    for item in sorted(found, key=lambda s: (s['title'].lower(), TARGET_KINDS.index(s['kind']), s['id'])):
        key = (item['kind'], item['id'])
        if key in seen:
            continue
        seen.add(key)
        suggestions.append(item)
        if len(suggestions) >= limit:
            break
    return suggestions
