from models import db, Note, Project, User
from handlers.shaping import stamp_new
from handlers.notes import split_tags, join_tags
from helpers import create


def test_tag_helpers():
    assert split_tags('a, b ,, c ') == ['a', 'b', 'c']
    assert split_tags('') == []
    assert split_tags(None) == []
    assert join_tags(['a', ' b', '']) == 'a, b'
    assert join_tags('x,y') == 'x,y'


def test_tags_round_trip(alice):
    note = create(alice, '/api/notes', title='Ideas', content='...', tags='a, b, c')
    assert note['tags'] == ['a', 'b', 'c']
    assert alice.get('/api/notes').get_json()[0]['tags'] == ['a', 'b', 'c']


def test_tags_as_list(alice):
    note = create(alice, '/api/notes', title='Ideas', tags=['x', 'y'])
    assert note['tags'] == ['x', 'y']

    updated = alice.put(f"/api/notes/{note['id']}", json={'tags': ['z']}).get_json()
    assert updated['tags'] == ['z']
    assert updated['title'] == 'Ideas'


def test_note_links_project_and_task(alice):
    project = create(alice, '/api/projects', name='Launch')
    task = create(alice, '/api/tasks', title='Ship')
    note = create(alice, '/api/notes', title='Log', projectId=project['id'], taskId=task['id'])

    assert note['projectName'] == 'Launch'
    assert note['project'] == {'id': project['id'], 'name': 'Launch'}
    assert note['taskName'] == 'Ship'
    assert note['task'] == {'id': task['id'], 'title': 'Ship'}


def test_note_project_can_be_cleared(alice):
    project = create(alice, '/api/projects', name='Launch')
    note = create(alice, '/api/notes', title='Log', projectId=project['id'])
    updated = alice.patch(f"/api/notes/{note['id']}", json={'projectId': None}).get_json()
    assert updated['projectId'] is None
    assert updated['projectName'] is None


def test_foreign_notes(alice, bob):
    note = create(alice, '/api/notes', title='Secret')
    project = create(alice, '/api/projects', name='Private')

    assert bob.put(f"/api/notes/{note['id']}", json={'title': 'Mine'}).status_code == 403
    assert bob.delete(f"/api/notes/{note['id']}").status_code == 403
    assert bob.post('/api/notes', json={'title': 'x', 'projectId': project['id']}).status_code == 403
    assert bob.get('/api/notes').get_json() == []


def test_delete_note(alice):
    note = create(alice, '/api/notes', title='Temp')
    assert alice.delete(f"/api/notes/{note['id']}").status_code == 204
    assert alice.get('/api/notes').get_json() == []


def test_tags_survive_split_and_rejoin(alice, app):
    note = create(alice, '/api/notes', title='Ideas', tags='a, b, c')
    response = alice.put(f"/api/notes/{note['id']}", json={'tags': ', '.join(note['tags'])})
    assert response.status_code == 200

    with app.app_context():
        assert db.session.get(Note, note['id']).tags == 'a, b, c'


def test_note_hides_foreign_project_on_reused_id(alice, bob, app):
    project = create(alice, '/api/projects', name='Launch')
    note = create(alice, '/api/notes', title='Log', projectId=project['id'])
    alice.delete(f"/api/projects/{project['id']}")

    with app.app_context():
        bob_id = User.query.filter_by(email='bob@example.com').one().id
        db.session.add(stamp_new(Project(id=project['id'], name='Bob project', status='ACTIVE', user_id=bob_id)))
        db.session.commit()

    [shown] = alice.get('/api/notes').get_json()
    assert shown['id'] == note['id']
    assert shown['projectName'] is None
    assert shown['project'] is None
