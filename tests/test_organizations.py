from models import db, Organization, User
from handlers.shaping import stamp_new
from helpers import create


def names(client):
    return [o['name'] for o in client.get('/api/organizations').get_json()]


def test_new_organizations_are_appended(alice):
    first = create(alice, '/api/organizations', name='First')
    second = create(alice, '/api/organizations', name='Second', color='#00ff00')
    assert first['order'] == 0
    assert second['order'] == 1
    assert second['projects'] == []
    assert names(alice) == ['First', 'Second']


def test_reorder(alice):
    create(alice, '/api/organizations', name='A')
    b = create(alice, '/api/organizations', name='B')
    alice.patch(f"/api/organizations/{b['id']}", json={'order': -1})
    assert names(alice) == ['B', 'A']


def test_delete_closes_gap(alice):
    create(alice, '/api/organizations', name='A')
    b = create(alice, '/api/organizations', name='B')
    create(alice, '/api/organizations', name='C')

    assert alice.delete(f"/api/organizations/{b['id']}").status_code == 204
    orgs = alice.get('/api/organizations').get_json()
    assert [(o['name'], o['order']) for o in orgs] == [('A', 0), ('C', 1)]


def test_orders_are_per_user(alice, bob):
    create(alice, '/api/organizations', name='A')
    other = create(bob, '/api/organizations', name='B')
    assert other['order'] == 0
    assert names(bob) == ['B']


def test_foreign_organization(alice, bob):
    org = create(alice, '/api/organizations', name='Acme')
    assert bob.put(f"/api/organizations/{org['id']}", json={'name': 'Mine'}).status_code == 403
    assert bob.delete(f"/api/organizations/{org['id']}").status_code == 403
    assert alice.delete('/api/organizations/999').status_code == 404


def test_organization_lists_its_projects(alice):
    org = create(alice, '/api/organizations', name='Acme')
    project = create(alice, '/api/projects', name='Rocket', organizationId=org['id'])
    orgs = alice.get('/api/organizations').get_json()
    assert orgs[0]['projects'] == [{'id': project['id'], 'name': 'Rocket', 'status': 'ACTIVE'}]


def test_deleted_organization_id_is_not_reused(alice, bob):
    org = create(alice, '/api/organizations', name='Acme')
    create(alice, '/api/projects', name='Alice secret project', organizationId=org['id'])
    alice.delete(f"/api/organizations/{org['id']}")

    other = create(bob, '/api/organizations', name='Bob org')
    assert other['id'] != org['id']
    assert bob.get('/api/organizations').get_json()[0]['projects'] == []


def test_organization_projects_are_scoped_to_owner(alice, bob, app):
    org = create(alice, '/api/organizations', name='Acme')
    create(alice, '/api/projects', name='Alice secret project', organizationId=org['id'])
    alice.delete(f"/api/organizations/{org['id']}")

    with app.app_context():
        bob_id = User.query.filter_by(email='bob@example.com').one().id
        db.session.add(stamp_new(Organization(id=org['id'], name='Bob org', order=0, user_id=bob_id)))
        db.session.commit()

    assert bob.get('/api/organizations').get_json()[0]['projects'] == []
    assert alice.get('/api/projects').get_json()[0]['organization'] is None
