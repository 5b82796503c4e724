from models import db, Project, Organization, Task
from handlers.shaping import stamp_new, touch, iso, to_ms, get_owned, find_owned, apply_patch, summary

NULLABLE = ('description', 'color', 'due_date', 'organization_id')


def shape_project(project, organization=None, tasks=None):
    data = {
        'id': project.id,
        'name': project.name,
        'description': project.description,
        'status': project.status,
        'color': project.color,
        'dueDate': iso(project.due_date),
        'userId': project.user_id,
        'organizationId': project.organization_id,
        'organization': summary(organization, 'name'),
        'createdAt': iso(project.created_at),
        'updatedAt': iso(project.updated_at),
    }
    if tasks is not None:
        data['tasks'] = [{'id': t.id, 'title': t.title, 'status': t.status} for t in tasks]
    return data


def _organization(project):
    if not project.organization_id:
        return None
    return find_owned(Organization, project.organization_id, project.user_id)


def list_projects(user_id):
    projects = Project.query.filter_by(user_id=user_id).all()
    result = []
    for project in projects:
        tasks = Task.query.filter_by(project_id=project.id, user_id=user_id).all()
        result.append(shape_project(project, _organization(project), tasks))
    result.sort(key=lambda p: p['createdAt'], reverse=True)
    return result


def create_project(user_id, name, status='ACTIVE', description=None, color=None,
                   due_date=None, organization_id=None):
    if organization_id is not None:
        get_owned(Organization, organization_id, user_id, 'Organization')

    project = stamp_new(Project(
        name=name,
        description=description,
        status=status,
        color=color,
        due_date=to_ms(due_date),
        organization_id=organization_id,
        user_id=user_id,
    ))
    db.session.add(project)
    db.session.commit()

    project = db.session.get(Project, project.id)
    return shape_project(project, _organization(project))


def update_project(user_id, project_id, changes):
    project = get_owned(Project, project_id, user_id, 'Project')
    if changes.get('organization_id') is not None:
        get_owned(Organization, changes['organization_id'], user_id, 'Organization')
    if 'due_date' in changes:
        changes = dict(changes, due_date=to_ms(changes['due_date']))

    apply_patch(project, changes, NULLABLE)
    touch(project)
    db.session.commit()
    return shape_project(project, _organization(project))


def delete_project(user_id, project_id):
    # Tasks, notes and columns of the project are left in place
    project = get_owned(Project, project_id, user_id, 'Project')
    db.session.delete(project)
    db.session.commit()
