"""Tests for section-scoped tags and item tagging."""

import pytest

from admindash.errors import ConflictError, NotFoundError, ValidationError
from admindash.models.content import Script, Note
from admindash.models.tag import Tag, ItemTag
from admindash.services.tag_service import (
    list_tags, create_tag, bulk_create_tags, update_tag, delete_tag, tag_item, untag_item,
    tag_names_for,
)


class TestTagScoping:
    def test_global_and_section_coexist(self, db, user):
        create_tag(user.id, {'name': 'Urgent'})
        scoped = create_tag(user.id, {'name': 'urgent', 'section': 'TODOS'})
        assert scoped.slug == 'urgent'

    def test_conflict(self, db, user):
        create_tag(user.id, {'name': 'Urgent', 'section': 'TODOS'})
        with pytest.raises(ConflictError) as exc:
            create_tag(user.id, {'name': 'URGENT', 'section': 'todos'})
        assert exc.value.message.startswith("A tag named 'urgent'")

    def test_list_section_includes_global(self, db, user):
        create_tag(user.id, {'name': 'b-global'})
        create_tag(user.id, {'name': 'a-todos', 'section': 'TODOS'})
        create_tag(user.id, {'name': 'c-notes', 'section': 'NOTES'})
        assert [t['name'] for t in list_tags(user.id, 'TODOS')] == ['a-todos', 'b-global']
        assert len(list_tags(user.id)) == 3

    def test_update_conflict(self, db, user):
        create_tag(user.id, {'name': 'ops'})
        other = create_tag(user.id, {'name': 'dev'})
        with pytest.raises(ConflictError):
            update_tag(other.id, user.id, {'name': 'Ops'})

    def test_update_color(self, db, user):
        tag = create_tag(user.id, {'name': 'ops'})
        assert update_tag(tag.id, user.id, {'color': '#000000'}).color == '#000000'

    def test_list_usage_count(self, db, user, make_item):
        a = make_item(Script, user, title='a', content='')
        b = make_item(Note, user, title='b', content='')
        ops = create_tag(user.id, {'name': 'ops'})
        create_tag(user.id, {'name': 'unused'})
        tag_item(user.id, ops.id, 'SCRIPT', a.id)
        tag_item(user.id, ops.id, 'NOTE', b.id)
        usage = {t['name']: t['usage_count'] for t in list_tags(user.id)}
        assert usage == {'ops': 2, 'unused': 0}


class TestBulkCreate:
    def test_creates_global_tags_in_order(self, db, user):
        tags = bulk_create_tags(user.id, ['Linux', 'Windows Server'])
        assert [t.slug for t in tags] == ['linux', 'windows-server']
        assert all(t.section is None for t in tags)

    def test_reuses_existing_global_tag(self, db, user):
        existing = create_tag(user.id, {'name': 'Linux'})
        tags = bulk_create_tags(user.id, ['linux', 'LINUX!', 'macOS'])
        assert tags[0].id == existing.id
        assert tags[1].id == existing.id
        assert Tag.query.filter_by(user_id=user.id).count() == 2

    def test_section_tag_is_not_reused(self, db, user):
        scoped = create_tag(user.id, {'name': 'Linux', 'section': 'SCRIPTS'})
        tags = bulk_create_tags(user.id, ['Linux'])
        assert tags[0].id != scoped.id
        assert tags[0].section is None

    def test_empty_slug_writes_nothing(self, db, user):
        with pytest.raises(ValidationError):
            bulk_create_tags(user.id, ['ok', '!!!'])
        assert Tag.query.count() == 0

    def test_per_user(self, db, user, other_user):
        theirs = bulk_create_tags(other_user.id, ['ops'])[0]
        mine = bulk_create_tags(user.id, ['ops'])[0]
        assert mine.id != theirs.id


class TestItemTagging:
    def test_attach_is_idempotent(self, db, user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(user.id, {'name': 'ops'})
        first = tag_item(user.id, tag.id, 'script', script.id)
        second = tag_item(user.id, tag.id, 'SCRIPT', script.id)
        assert first.id == second.id
        assert ItemTag.query.count() == 1

    def test_attach_unknown_kind(self, db, user):
        tag = create_tag(user.id, {'name': 'ops'})
        with pytest.raises(ValidationError):
            tag_item(user.id, tag.id, 'BOOK', 1)

    def test_attach_missing_or_foreign_item(self, db, user, other_user, make_item):
        tag = create_tag(user.id, {'name': 'ops'})
        theirs = make_item(Note, other_user, title='n', content='')
        with pytest.raises(NotFoundError):
            tag_item(user.id, tag.id, 'NOTE', 9999)
        with pytest.raises(NotFoundError):
            tag_item(user.id, tag.id, 'NOTE', theirs.id)

    def test_attach_foreign_tag(self, db, user, other_user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(other_user.id, {'name': 'ops'})
        with pytest.raises(NotFoundError):
            tag_item(user.id, tag.id, 'SCRIPT', script.id)

    def test_detach(self, db, user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(user.id, {'name': 'ops'})
        tag_item(user.id, tag.id, 'SCRIPT', script.id)
        assert untag_item(user.id, tag.id, 'SCRIPT', script.id) is True
        assert untag_item(user.id, tag.id, 'SCRIPT', script.id) is False

    def test_names_for_batch(self, db, user, make_item):
        a = make_item(Script, user, title='a', content='')
        b = make_item(Script, user, title='b', content='')
        ops = create_tag(user.id, {'name': 'ops'})
        infra = create_tag(user.id, {'name': 'infra'})
        tag_item(user.id, ops.id, 'SCRIPT', a.id)
        tag_item(user.id, infra.id, 'SCRIPT', a.id)
        assert tag_names_for('SCRIPT', [a.id, b.id]) == {a.id: ['infra', 'ops'], b.id: []}

    def test_delete_tag_removes_links(self, db, user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(user.id, {'name': 'ops'})
        tag_item(user.id, tag.id, 'SCRIPT', script.id)
        delete_tag(tag.id, user.id)
        assert ItemTag.query.count() == 0


class TestTagRoutes:
    def test_crud(self, client, auth_headers):
        resp = client.post('/api/v1/tags', json={'name': 'Ops', 'section': 'scripts'},
                           headers=auth_headers)
        assert resp.status_code == 201
        tag = resp.get_json()['data']
        assert tag['section'] == 'SCRIPTS'

        resp = client.put(f"/api/v1/tags/{tag['id']}", json={'name': 'Operations'},
                          headers=auth_headers)
        assert resp.get_json()['data']['slug'] == 'operations'

        resp = client.get('/api/v1/tags?section=SCRIPTS', headers=auth_headers)
        assert [t['name'] for t in resp.get_json()['data']] == ['Operations']

        resp = client.delete(f"/api/v1/tags/{tag['id']}", headers=auth_headers)
        assert resp.status_code == 200

    def test_attach_and_detach(self, client, auth_headers, user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(user.id, {'name': 'ops'})
        payload = {'target_kind': 'SCRIPT', 'target_id': script.id}

        resp = client.post(f'/api/v1/tags/{tag.id}/items', json=payload, headers=auth_headers)
        assert resp.status_code == 201

        resp = client.delete(f'/api/v1/tags/{tag.id}/items', json=payload, headers=auth_headers)
        assert resp.get_json()['data'] == {'removed': True}

    def test_attach_requires_target(self, client, auth_headers, user):
        tag = create_tag(user.id, {'name': 'ops'})
        resp = client.post(f'/api/v1/tags/{tag.id}/items', json={'target_kind': 'SCRIPT'},
                           headers=auth_headers)
        assert resp.status_code == 400

    def test_duplicate_conflict(self, client, auth_headers):
        client.post('/api/v1/tags', json={'name': 'ops'}, headers=auth_headers)
        resp = client.post('/api/v1/tags', json={'name': 'OPS'}, headers=auth_headers)
        assert resp.status_code == 409

    def test_show(self, client, auth_headers, user, other_user):
        tag = create_tag(user.id, {'name': 'ops'})
        resp = client.get(f'/api/v1/tags/{tag.id}', headers=auth_headers)
        assert resp.status_code == 200
        assert resp.get_json()['data']['slug'] == 'ops'

        theirs = create_tag(other_user.id, {'name': 'ops'})
        resp = client.get(f'/api/v1/tags/{theirs.id}', headers=auth_headers)
        assert resp.status_code == 404

    def test_list_includes_usage_count(self, client, auth_headers, user, make_item):
        script = make_item(Script, user, title='s', content='')
        tag = create_tag(user.id, {'name': 'ops'})
        tag_item(user.id, tag.id, 'SCRIPT', script.id)
        resp = client.get('/api/v1/tags', headers=auth_headers)
        assert resp.get_json()['data'][0]['usage_count'] == 1

    def test_bulk(self, client, auth_headers, user):
        create_tag(user.id, {'name': 'Linux'})
        resp = client.post('/api/v1/tags/bulk', json={'names': ['linux', 'Backups']},
                           headers=auth_headers)
        assert resp.status_code == 201
        assert [t['slug'] for t in resp.get_json()['data']] == ['linux', 'backups']

    def test_bulk_validation(self, client, auth_headers):
        resp = client.post('/api/v1/tags/bulk', json={'names': []}, headers=auth_headers)
        assert resp.status_code == 400
        resp = client.post('/api/v1/tags/bulk', json={'names': ['ok', 7]}, headers=auth_headers)
        assert resp.status_code == 400
        assert 'names[1]' in resp.get_json()['error']['details']

    def test_bulk_readonly(self, client, readonly_user, token_headers):
        resp = client.post('/api/v1/tags/bulk', json={'names': ['ops']},
                           headers=token_headers(readonly_user))
        assert resp.status_code == 403
