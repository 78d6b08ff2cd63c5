"""Entity registry: the one place that knows about every content kind.

Each kind tag (the value stored in ``Favorite.target_kind`` and
``ItemTag.target_kind``) maps to an ``EntityKind`` describing its model,
its human-readable label column and the columns global search looks at.
The resolver and the search aggregator only ever go through this table,
so a new kind is one ``_register`` call below.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Optional, Tuple

from admindash.models.content import (
    Script, Note, Procedure, Project, Todo, RegistryEntry, MonitoringItem, RssFeed,
)


@dataclass(frozen=True)
class EntityKind:
    kind: str
    module: str
    model: type
    label_field: str
    search_fields: Tuple[str, ...]
    description_field: Optional[str] = None

    @property
    def label_column(self):
        return getattr(self.model, self.label_field)

    def search_columns(self):
        return [getattr(self.model, name) for name in self.search_fields]

    def label_of(self, obj):
        return getattr(obj, self.label_field)

    def description_of(self, obj):
        if self.description_field is None:
            return None
        return getattr(obj, self.description_field)


_kinds = {}


def _register(kind, module, model, label_field, search_fields,
              description_field=None):
    _kinds[kind] = EntityKind(
        kind=kind,
        module=module,
        model=model,
        label_field=label_field,
        search_fields=tuple(search_fields),
        description_field=description_field,
    )


_register('SCRIPT', 'script', Script, 'title', ('title', 'description', 'content'), 'description')
_register('NOTE', 'note', Note, 'title', ('title', 'content'))
_register('PROCEDURE', 'procedure', Procedure, 'title', ('title', 'description', 'content'), 'description')
_register('TODO', 'todo', Todo, 'title', ('title', 'description'), 'description')
_register('PROJECT', 'project', Project, 'name', ('name', 'description'), 'description')
_register('REGISTRY', 'registry', RegistryEntry, 'name', ('name', 'key', 'value_name', 'description'), 'description')
_register('MONITORING', 'monitoring', MonitoringItem, 'name', ('name', 'host', 'description'), 'description')
_register('RSS_FEED', 'rss', RssFeed, 'title', ('title', 'description'), 'description')

KINDS = MappingProxyType(_kinds)
TARGET_KINDS = tuple(KINDS)
MODULES = tuple(entry.module for entry in KINDS.values())
_BY_MODULE = MappingProxyType({entry.module: entry for entry in KINDS.values()})


def get_kind(kind) -> Optional[EntityKind]:
    """Return the registry entry for a kind tag, or None if unregistered."""
    if not kind or not isinstance(kind, str):
        return None
    return KINDS.get(kind.upper())


def get_kind_for_module(module) -> Optional[EntityKind]:
    if not module or not isinstance(module, str):
        return None
    return _BY_MODULE.get(module.strip().lower())


def all_kinds():
    return list(KINDS.values())


def kinds_for_modules(modules: Optional[Iterable[str]]):
    """Registry entries for the requested module tags.

    None means every kind. Unknown tags are dropped and duplicates collapsed;
    the result keeps registry order.
    """
    if modules is None:
        return all_kinds()
    wanted = {entry.kind for entry in map(get_kind_for_module, modules) if entry is not None}
    return [entry for entry in KINDS.values() if entry.kind in wanted]
