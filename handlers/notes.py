from models import db, Note, Project, Task
from handlers.shaping import stamp_new, touch, iso, get_owned, find_owned, apply_patch, summary

NULLABLE = ('project_id', 'task_id')


def split_tags(tags):
    return [tag.strip() for tag in (tags or '').split(',') if tag.strip()]


def join_tags(tags):
    # Strings are stored exactly as typed; lists come back from split_tags
    if tags is None:
        return ''
    if isinstance(tags, str):
        return tags
    return ', '.join(tag.strip() for tag in tags if tag.strip())


def shape_note(note):
    project = find_owned(Project, note.project_id, note.user_id)
    task = find_owned(Task, note.task_id, note.user_id)
    return {
        'id': note.id,
        'title': note.title,
        'content': note.content,
        'tags': split_tags(note.tags),
        'projectId': note.project_id,
        'taskId': note.task_id,
        'userId': note.user_id,
        'projectName': project.name if project else None,
        'project': summary(project, 'name'),
        'taskName': task.title if task else None,
        'task': summary(task, 'title'),
        'createdAt': iso(note.created_at),
        'updatedAt': iso(note.updated_at),
    }


def _check_references(user_id, project_id=None, task_id=None):
    if project_id is not None:
        get_owned(Project, project_id, user_id, 'Project')
    if task_id is not None:
        get_owned(Task, task_id, user_id, 'Task')


def list_notes(user_id):
    notes = Note.query.filter_by(user_id=user_id).all()
    result = [shape_note(n) for n in notes]
    result.sort(key=lambda n: n['createdAt'], reverse=True)
    return result


def create_note(user_id, title, content='', tags='', project_id=None, task_id=None):
    _check_references(user_id, project_id, task_id)

    note = stamp_new(Note(
        title=title,
        content=content,
        tags=join_tags(tags),
        project_id=project_id,
        task_id=task_id,
        user_id=user_id,
    ))
    db.session.add(note)
    db.session.commit()
    return shape_note(db.session.get(Note, note.id))


def update_note(user_id, note_id, changes):
    note = get_owned(Note, note_id, user_id, 'Note')
    _check_references(user_id, changes.get('project_id'), changes.get('task_id'))
    if changes.get('tags') is not None:
        changes = dict(changes, tags=join_tags(changes['tags']))

    apply_patch(note, changes, NULLABLE)
    touch(note)
    db.session.commit()
    return shape_note(note)


def delete_note(user_id, note_id):
    note = get_owned(Note, note_id, user_id, 'Note')
    db.session.delete(note)
    db.session.commit()
