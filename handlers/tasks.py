from models import db, Task, Project
from errors import BadRequestError, NotFoundError
from handlers.shaping import stamp_new, touch, iso, to_ms, get_owned, find_owned, apply_patch, summary
from handlers.kanban import get_visible_column

NULLABLE = ('description', 'due_date', 'project_id', 'parent_id', 'column_id')

# Keys of the built-in board columns; anything else names a KanbanColumn
DEFAULT_COLUMNS = {
    'active': 'ACTIVE',
    'planning': 'PLANNING',
    'in_progress': 'IN_PROGRESS',
    'on_hold': 'ON_HOLD',
    'completed': 'COMPLETED',
}


def shape_task(task, project=None):
    return {
        'id': task.id,
        'title': task.title,
        'description': task.description,
        'status': task.status,
        'priority': task.priority,
        'severity': task.severity,
        'dueDate': iso(task.due_date),
        'projectId': task.project_id,
        'parentId': task.parent_id,
        'columnId': task.column_id,
        'userId': task.user_id,
        'project': summary(project, 'name'),
        'createdAt': iso(task.created_at),
        'updatedAt': iso(task.updated_at),
    }


def _with_project(task):
    project = find_owned(Project, task.project_id, task.user_id)
    return shape_task(task, project)


def _check_references(user_id, project_id=None, parent_id=None, column_id=None, task_id=None):
    if project_id is not None:
        get_owned(Project, project_id, user_id, 'Project')
    if parent_id is not None:
        if task_id is not None and parent_id == task_id:
            raise BadRequestError("A task cannot be its own parent")
        get_owned(Task, parent_id, user_id, 'Parent task')
    if column_id is not None:
        get_visible_column(user_id, column_id)


def list_tasks(user_id):
    tasks = Task.query.filter_by(user_id=user_id).all()
    result = [_with_project(t) for t in tasks]
    result.sort(key=lambda t: t['createdAt'], reverse=True)
    return result


def list_subtasks(user_id, task_id):
    get_owned(Task, task_id, user_id, 'Task')
    subtasks = Task.query.filter_by(parent_id=task_id, user_id=user_id).order_by(Task.created_at.asc()).all()
    return [_with_project(t) for t in subtasks]


def create_task(user_id, title, description=None, status='ACTIVE', priority='P1', severity='S1',
                due_date=None, project_id=None, parent_id=None, column_id=None):
    _check_references(user_id, project_id, parent_id, column_id)

    task = stamp_new(Task(
        title=title,
        description=description,
        status=status,
        priority=priority,
        severity=severity,
        due_date=to_ms(due_date),
        project_id=project_id,
        parent_id=parent_id,
        column_id=column_id,
        user_id=user_id,
    ))
    db.session.add(task)
    db.session.commit()
    return _with_project(db.session.get(Task, task.id))


def update_task(user_id, task_id, changes):
    task = get_owned(Task, task_id, user_id, 'Task')
    _check_references(
        user_id,
        changes.get('project_id'),
        changes.get('parent_id'),
        changes.get('column_id'),
        task_id=task.id,
    )
    if 'due_date' in changes:
        changes = dict(changes, due_date=to_ms(changes['due_date']))

    apply_patch(task, changes, NULLABLE)
    touch(task)
    db.session.commit()
    return _with_project(task)


def move_task(user_id, task_id, column_key):
    task = get_owned(Task, task_id, user_id, 'Task')

    status = DEFAULT_COLUMNS.get(column_key.lower())
    if status is not None:
        task.status = status
    else:
        try:
            column_id = int(column_key)
        except ValueError:
            raise NotFoundError("Column not found")
        task.column_id = get_visible_column(user_id, column_id).id

    touch(task)
    db.session.commit()
    return _with_project(task)


def delete_task(user_id, task_id):
    # Subtasks keep their parent_id; nothing cascades
    task = get_owned(Task, task_id, user_id, 'Task')
    db.session.delete(task)
    db.session.commit()
