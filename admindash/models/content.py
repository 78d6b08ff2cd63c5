"""Linkable content kinds.

Only the columns the organization layer reads (owner, label, searchable
text, category, timestamps) plus a few descriptive ones are modelled here.
"""

from admindash.extensions import db
from admindash.models.mixins import ContentMixin


class Script(ContentMixin, db.Model):
    __tablename__ = 'scripts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    content = db.Column(db.Text, nullable=False, default='')
    language = db.Column(db.String(30), default='bash')

    def __repr__(self):
        return f'<Script {self.title}>'


class Note(ContentMixin, db.Model):
    __tablename__ = 'notes'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False, default='')
    is_pinned = db.Column(db.Boolean, default=False)

    def __repr__(self):
        return f'<Note {self.title}>'


class Procedure(ContentMixin, db.Model):
    __tablename__ = 'procedures'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    content = db.Column(db.Text, nullable=False, default='')

    def __repr__(self):
        return f'<Procedure {self.title}>'


class Project(ContentMixin, db.Model):
    __tablename__ = 'projects'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(7))

    todos = db.relationship('Todo', back_populates='project')

    def __repr__(self):
        return f'<Project {self.name}>'


TODO_STATUSES = ('TODO', 'IN_PROGRESS', 'DONE')
TODO_PRIORITIES = ('LOW', 'MEDIUM', 'HIGH', 'URGENT')


class Todo(ContentMixin, db.Model):
    __tablename__ = 'todos'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), default='TODO')
    priority = db.Column(db.String(20), default='MEDIUM')
    due_date = db.Column(db.Date)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='SET NULL'))

    project = db.relationship('Project', back_populates='todos')

    def __repr__(self):
        return f'<Todo {self.title} [{self.status}]>'


class RegistryEntry(ContentMixin, db.Model):
    __tablename__ = 'registry_entries'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    key = db.Column(db.String(500), nullable=False)
    value_name = db.Column(db.String(200))
    value = db.Column(db.Text)
    value_type = db.Column(db.String(20), default='REG_SZ')
    description = db.Column(db.Text)

    def __repr__(self):
        return f'<RegistryEntry {self.name}>'


class MonitoringItem(ContentMixin, db.Model):
    __tablename__ = 'monitoring_items'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    host = db.Column(db.String(200))
    item_type = db.Column(db.String(20), default='ITEM')
    description = db.Column(db.Text)

    def __repr__(self):
        return f'<MonitoringItem {self.name}>'


class RssFeed(ContentMixin, db.Model):
    __tablename__ = 'rss_feeds'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(2048), nullable=False)
    description = db.Column(db.Text)

    def __repr__(self):
        return f'<RssFeed {self.title}>'
