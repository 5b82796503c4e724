"""Kanban columns.

A column without a project is global and shown on every board; a column with
a project is visible to, and editable by, that project's owner only.
"""

from models import db, KanbanColumn, Project
from errors import NotFoundError, ForbiddenError
from handlers.shaping import stamp_new, touch, iso, get_owned, apply_patch


def shape_column(column):
    return {
        'id': column.id,
        'name': column.name,
        'color': column.color,
        'order': column.order,
        'projectId': column.project_id,
        'createdAt': iso(column.created_at),
        'updatedAt': iso(column.updated_at),
    }


def visible_columns(user_id):
    project_ids = [p.id for p in Project.query.filter_by(user_id=user_id).all()]
    query = KanbanColumn.query.filter(
        db.or_(KanbanColumn.project_id.is_(None), KanbanColumn.project_id.in_(project_ids))
    )
    return sorted(query.all(), key=lambda c: (c.order, c.created_at, c.id))


def list_columns(user_id):
    return [shape_column(c) for c in visible_columns(user_id)]


def get_visible_column(user_id, column_id):
    column = db.session.get(KanbanColumn, column_id)
    if column is None:
        raise NotFoundError("Column not found")
    _check_column_owner(column, user_id)
    return column


def _check_column_owner(column, user_id):
    if column.project_id is None:
        return
    project = db.session.get(Project, column.project_id)
    if project is None or project.user_id != user_id:
        raise ForbiddenError()


def create_column(user_id, name, color, order, project_id=None):
    if project_id is not None:
        get_owned(Project, project_id, user_id, 'Project')

    column = stamp_new(KanbanColumn(name=name, color=color, order=order, project_id=project_id))
    db.session.add(column)
    db.session.commit()
    return shape_column(db.session.get(KanbanColumn, column.id))


def update_column(user_id, column_id, changes):
    column = get_visible_column(user_id, column_id)
    apply_patch(column, changes)
    touch(column)
    db.session.commit()
    return shape_column(column)


def delete_column(user_id, column_id):
    column = get_visible_column(user_id, column_id)
    db.session.delete(column)
    db.session.commit()
