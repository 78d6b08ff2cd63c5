from admindash.models.user import User
from admindash.models.category import Category
from admindash.models.tag import Tag, ItemTag
from admindash.models.favorite import Favorite
from admindash.models.content import (
    Script, Note, Procedure, Project, Todo, RegistryEntry, MonitoringItem, RssFeed,
)

__all__ = [
    'User', 'Category', 'Tag', 'ItemTag', 'Favorite',
    'Script', 'Note', 'Procedure', 'Project', 'Todo',
    'RegistryEntry', 'MonitoringItem', 'RssFeed',
]
