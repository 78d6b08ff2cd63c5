"""Payload validation for the JSON API.

Every check here is about shape only (types, lengths, formats). Business
rules such as ownership and slug uniqueness live in the services.
"""

import re
from urllib.parse import urlparse

from admindash.errors import ValidationError
from admindash.models.category import SECTIONS
from admindash.services.entity_registry import TARGET_KINDS

COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')

MAX_SEARCH_LIMIT = 100


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_url(value):
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def parse_csv(value):
    """'a, b,,c' -> ['a', 'b', 'c']; None or empty -> None."""
    if not value:
        return None
    items = [part.strip() for part in value.split(',') if part.strip()]
    return items or None


class _Checker:
    def __init__(self, data, partial):
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')
        self.data = data
        self.partial = partial
        self.errors = {}
        self.cleaned = {}

    def error(self, field, message):
        self.errors.setdefault(field, []).append(message)

    def string(self, field, max_length, required=False):
        if field not in self.data:
            if required and not self.partial:
                self.error(field, 'This field is required')
            return
        value = self.data[field]
        if value is None:
            if required:
                self.error(field, 'This field may not be null')
            else:
                self.cleaned[field] = None
            return
        if not isinstance(value, str):
            self.error(field, 'Must be a string')
            return
        value = value.strip()
        if required and not value:
            self.error(field, 'This field may not be blank')
        elif len(value) > max_length:
            self.error(field, f'Ensure this field has no more than {max_length} characters')
        else:
            self.cleaned[field] = value if value or required else None

    def integer(self, field, minimum=None, nullable=True):
        if field not in self.data:
            return
        value = self.data[field]
        if value is None:
            if nullable:
                self.cleaned[field] = None
            else:
                self.error(field, 'This field may not be null')
            return
        if not _is_int(value):
            self.error(field, 'Must be an integer')
        elif minimum is not None and value < minimum:
            self.error(field, f'Must be greater than or equal to {minimum}')
        else:
            self.cleaned[field] = value

    def choice(self, field, choices):
        if field not in self.data:
            return
        value = self.data[field]
        if value is None or value == '':
            self.cleaned[field] = None
            return
        if not isinstance(value, str) or value.upper() not in choices:
            self.error(field, f"Must be one of: {', '.join(choices)}")
        else:
            self.cleaned[field] = value.upper()

    def color(self, field):
        if field not in self.data or self.data[field] is None:
            return
        value = self.data[field]
        if not isinstance(value, str) or not COLOR_RE.match(value):
            self.error(field, 'Must be a hex color like #3B82F6')
        else:
            self.cleaned[field] = value

    def url(self, field):
        if field not in self.data:
            return
        value = self.data[field]
        if value is None or value == '':
            self.cleaned[field] = None
        elif not isinstance(value, str) or len(value) > 2048 or not is_valid_url(value):
            self.error(field, 'Must be a valid http(s) URL')
        else:
            self.cleaned[field] = value

    def result(self):
        if self.errors:
            raise ValidationError(details=self.errors)
        return self.cleaned


def validate_favorite(data, partial=False):
    check = _Checker(data, partial)
    check.string('title', 100, required=True)
    check.string('description', 500)
    check.string('icon', 50)
    check.url('url')
    check.choice('target_kind', TARGET_KINDS)
    check.integer('target_id', minimum=1)
    check.integer('position', minimum=0, nullable=not partial)
    return check.result()


def validate_reorder(data):
    if not isinstance(data, dict) or not isinstance(data.get('items'), list):
        raise ValidationError(details={'items': ['A list of {id, position} objects is required']})
    items = []
    errors = {}
    for index, item in enumerate(data['items']):
        if (not isinstance(item, dict) or not _is_int(item.get('id')) or item['id'] < 1
                or not _is_int(item.get('position')) or item['position'] < 0):
            errors[f'items[{index}]'] = ['Expected {id: positive integer, position: integer >= 0}']
            continue
        items.append({'id': item['id'], 'position': item['position']})
    if errors:
        raise ValidationError(details=errors)
    return items


def validate_category(data, partial=False):
    check = _Checker(data, partial)
    check.string('name', 50, required=True)
    check.string('description', 200)
    check.string('icon', 50)
    check.color('color')
    check.choice('section', SECTIONS)
    return check.result()


def validate_tag(data, partial=False):
    check = _Checker(data, partial)
    check.string('name', 50, required=True)
    check.color('color')
    check.choice('section', SECTIONS)
    return check.result()


def validate_bulk_tags(data):
    names = data.get('names') if isinstance(data, dict) else None
    if not isinstance(names, list) or not names:
        raise ValidationError(details={'names': ['A non-empty list of tag names is required']})
    cleaned = []
    errors = {}
    for index, name in enumerate(names):
        if not isinstance(name, str) or not name.strip() or len(name.strip()) > 50:
            errors[f'names[{index}]'] = ['Expected a string of 1 to 50 characters']
            continue
        cleaned.append(name.strip())
    if errors:
        raise ValidationError(details=errors)
    return cleaned


def validate_item_tag(data):
    check = _Checker(data, partial=False)
    check.choice('target_kind', TARGET_KINDS)
    check.integer('target_id', minimum=1, nullable=False)
    cleaned = check.result()
    if cleaned.get('target_kind') is None or cleaned.get('target_id') is None:
        raise ValidationError(details={'target': ['target_kind and target_id are required']})
    return cleaned


def validate_search_args(args):
    """Parse ``q``, ``modules``, ``tags``, ``categories`` and ``limit`` from query args."""
    q = (args.get('q') or '').strip()
    if not q:
        raise ValidationError('Search query is required', details={'q': ['This field is required']})
    if len(q) > 200:
        raise ValidationError(details={'q': ['Ensure this field has no more than 200 characters']})

    limit = args.get('limit')
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            raise ValidationError(details={'limit': ['Must be an integer']})
        limit = max(1, min(MAX_SEARCH_LIMIT, limit))

    return {
        'q': q,
        'modules': parse_csv(args.get('modules')),
        'tags': parse_csv(args.get('tags')),
        'categories': parse_csv(args.get('categories')),
        'limit': limit,
    }
