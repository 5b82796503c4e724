from models import db, Project, User
from handlers.shaping import stamp_new
from helpers import create


def test_create_project(alice):
    project = create(alice, '/api/projects', name='Website', color='#ff0000',
                     dueDate='2026-12-24T00:00:00Z')
    assert project['status'] == 'ACTIVE'
    assert project['dueDate'] == '2026-12-24T00:00:00.000Z'
    assert project['organization'] is None
    assert project['createdAt'] == project['updatedAt']


def test_project_validation(alice):
    assert alice.post('/api/projects', json={'name': 'x', 'status': 'DONE'}).status_code == 422
    assert alice.post('/api/projects', json={'name': 'x', 'color': 'red'}).status_code == 422
    assert alice.post('/api/projects', json={}).status_code == 422


def test_list_projects_includes_tasks_and_organization(alice):
    org = create(alice, '/api/organizations', name='Acme')
    project = create(alice, '/api/projects', name='Launch', organizationId=org['id'])
    task = create(alice, '/api/tasks', title='Ship', projectId=project['id'])

    listed = alice.get('/api/projects').get_json()
    assert len(listed) == 1
    assert listed[0]['organization'] == {'id': org['id'], 'name': 'Acme'}
    assert listed[0]['tasks'] == [{'id': task['id'], 'title': 'Ship', 'status': 'ACTIVE'}]


def test_foreign_organization_is_forbidden(alice, bob):
    org = create(alice, '/api/organizations', name='Acme')
    response = bob.post('/api/projects', json={'name': 'Mine', 'organizationId': org['id']})
    assert response.status_code == 403

    project = create(bob, '/api/projects', name='Mine')
    response = bob.put(f"/api/projects/{project['id']}", json={'organizationId': org['id']})
    assert response.status_code == 403


def test_foreign_project_cannot_be_changed(alice, bob):
    project = create(alice, '/api/projects', name='Private')
    assert bob.put(f"/api/projects/{project['id']}", json={'name': 'Taken'}).status_code == 403
    assert bob.delete(f"/api/projects/{project['id']}").status_code == 403
    assert alice.get('/api/projects').get_json()[0]['name'] == 'Private'


def test_update_project(alice):
    project = create(alice, '/api/projects', name='Old', description='keep')
    updated = alice.patch(f"/api/projects/{project['id']}", json={'name': 'New', 'status': 'ON_HOLD'}).get_json()
    assert updated['name'] == 'New'
    assert updated['status'] == 'ON_HOLD'
    assert updated['description'] == 'keep'
    assert updated['updatedAt'] >= updated['createdAt']


def test_deleting_project_keeps_its_tasks(alice):
    project = create(alice, '/api/projects', name='Doomed')
    task = create(alice, '/api/tasks', title='Survivor', projectId=project['id'])

    assert alice.delete(f"/api/projects/{project['id']}").status_code == 204
    assert alice.get('/api/projects').get_json() == []

    tasks = alice.get('/api/tasks').get_json()
    assert [t['id'] for t in tasks] == [task['id']]
    assert tasks[0]['projectId'] == project['id']
    assert tasks[0]['project'] is None


def test_deleted_project_id_is_not_reused(alice, bob):
    project = create(alice, '/api/projects', name='Alice project')
    create(alice, '/api/tasks', title='Alice secret task', projectId=project['id'])
    assert alice.delete(f"/api/projects/{project['id']}").status_code == 204

    other = create(bob, '/api/projects', name='Bob project')
    assert other['id'] != project['id']
    assert bob.get('/api/projects').get_json()[0]['tasks'] == []
    assert alice.get('/api/tasks').get_json()[0]['project'] is None


def test_project_lookups_ignore_other_users_rows(alice, bob, app):
    project = create(alice, '/api/projects', name='Alice project')
    create(alice, '/api/tasks', title='Alice secret task', projectId=project['id'])
    alice.delete(f"/api/projects/{project['id']}")

    # a foreign row sitting on the old id, as a store that reuses ids would leave it
    with app.app_context():
        bob_id = User.query.filter_by(email='bob@example.com').one().id
        db.session.add(stamp_new(Project(id=project['id'], name='Bob project', status='ACTIVE', user_id=bob_id)))
        db.session.commit()

    assert bob.get('/api/projects').get_json()[0]['tasks'] == []
    assert alice.get('/api/tasks').get_json()[0]['project'] is None
