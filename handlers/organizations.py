from models import db, Organization, Project
from handlers.shaping import stamp_new, touch, iso, get_owned, apply_patch

NULLABLE = ('description', 'color', 'order')


def shape_organization(org, projects=None):
    data = {
        'id': org.id,
        'name': org.name,
        'description': org.description,
        'color': org.color,
        'order': org.order,
        'userId': org.user_id,
        'createdAt': iso(org.created_at),
        'updatedAt': iso(org.updated_at),
    }
    if projects is not None:
        data['projects'] = [
            {'id': p.id, 'name': p.name, 'status': p.status} for p in projects
        ]
    return data


def _sort_key(org):
    # Ordered organizations first by their position, the rest newest first
    if org.order is not None:
        return (0, org.order, 0)
    return (1, 0, -org.created_at)


def list_organizations(user_id):
    organizations = Organization.query.filter_by(user_id=user_id).all()
    result = []
    for org in sorted(organizations, key=_sort_key):
        projects = Project.query.filter_by(organization_id=org.id, user_id=user_id).all()
        result.append(shape_organization(org, projects))
    return result


def create_organization(user_id, name, description=None, color=None, order=None):
    if order is None:
        orders = [o.order for o in Organization.query.filter_by(user_id=user_id).all() if o.order is not None]
        order = max(orders, default=-1) + 1

    org = stamp_new(Organization(
        name=name,
        description=description,
        color=color,
        order=order,
        user_id=user_id,
    ))
    db.session.add(org)
    db.session.commit()

    org = db.session.get(Organization, org.id)
    return shape_organization(org, [])


def update_organization(user_id, organization_id, changes):
    org = get_owned(Organization, organization_id, user_id, 'Organization')
    apply_patch(org, changes, NULLABLE)
    touch(org)
    db.session.commit()
    projects = Project.query.filter_by(organization_id=org.id, user_id=user_id).all()
    return shape_organization(org, projects)


def delete_organization(user_id, organization_id):
    org = get_owned(Organization, organization_id, user_id, 'Organization')
    deleted_order = org.order
    db.session.delete(org)

    # Close the gap left in the caller's ordering
    if deleted_order is not None:
        later = Organization.query.filter(
            Organization.user_id == user_id,
            Organization.id != organization_id,
            Organization.order > deleted_order,
        ).all()
        for other in later:
            other.order -= 1

    db.session.commit()
