from models import db, PomodoroSession, Task
from handlers.shaping import stamp_new, touch, iso, to_ms, get_owned


def shape_session(session):
    return {
        'id': session.id,
        'duration': session.duration,
        'type': session.type,
        'completed': session.completed,
        'startTime': iso(session.start_time),
        'endTime': iso(session.end_time),
        'taskId': session.task_id,
        'userId': session.user_id,
        'createdAt': iso(session.created_at),
        'updatedAt': iso(session.updated_at),
    }


def list_sessions(user_id):
    sessions = PomodoroSession.query.filter_by(user_id=user_id).order_by(
        PomodoroSession.created_at.desc(), PomodoroSession.id.desc()
    ).all()
    return [shape_session(s) for s in sessions]


def sessions_between(user_id, start_ms, end_ms):
    return PomodoroSession.query.filter(
        PomodoroSession.user_id == user_id,
        PomodoroSession.start_time.isnot(None),
        PomodoroSession.start_time >= start_ms,
        PomodoroSession.start_time < end_ms,
    ).order_by(PomodoroSession.start_time.asc()).all()


def create_session(user_id, duration, type='FOCUS', task_id=None):
    if task_id is not None:
        get_owned(Task, task_id, user_id, 'Task')

    session = stamp_new(PomodoroSession(
        duration=duration,
        type=type,
        completed=False,
        task_id=task_id,
        user_id=user_id,
    ))
    session.start_time = session.created_at
    db.session.add(session)
    db.session.commit()
    return shape_session(db.session.get(PomodoroSession, session.id))


def update_session(user_id, session_id, completed=None, end_time=None):
    session = get_owned(PomodoroSession, session_id, user_id, 'Session')
    if completed is not None:
        session.completed = completed
    if end_time is not None:
        session.end_time = to_ms(end_time)
    touch(session)
    db.session.commit()
    return shape_session(session)


def delete_session(user_id, session_id):
    session = get_owned(PomodoroSession, session_id, user_id, 'Session')
    db.session.delete(session)
    db.session.commit()
