"""Calendar feed: tasks, projects, habit completions and pomodoro sessions
projected into one list of events. Nothing here is stored."""

from datetime import datetime, timezone

from models import Task, Project, Habit, HabitEntry, PomodoroSession
from handlers.shaping import day_start_ms, days_ago_ms

HABIT_WINDOW_DAYS = 30

DEFAULT_TASK_COLOR = '#3b82f6'
DEFAULT_PROJECT_COLOR = '#3b82f6'
HABIT_COLOR = '#10b981'
DEFAULT_POMODORO_COLOR = '#ef4444'
TEXT_COLOR = '#fff'

STATUS_COLORS = {
    'ACTIVE': '#3b82f6',
    'PLANNING': '#8b5cf6',
    'IN_PROGRESS': '#f59e0b',
    'ON_HOLD': '#6b7280',
    'COMPLETED': '#10b981',
}

POMODORO_COLORS = {
    'FOCUS': '#ef4444',
    'SHORT_BREAK': '#10b981',
    'LONG_BREAK': '#3b82f6',
}


def status_color(status):
    return STATUS_COLORS.get(status, DEFAULT_TASK_COLOR)


def pomodoro_color(session_type):
    return POMODORO_COLORS.get(session_type, DEFAULT_POMODORO_COLOR)


def _event(event_id, title, start, color, props, end=None, all_day=True):
    event = {
        'id': event_id,
        'title': title,
        'start': start,
        'allDay': all_day,
        'backgroundColor': color,
        'borderColor': color,
        'textColor': TEXT_COLOR,
        'extendedProps': props,
    }
    if end is not None:
        event['end'] = end
    return event


def task_events(tasks):
    return [
        _event(f"task-{t.id}", t.title, t.due_date, status_color(t.status),
               {'type': 'task', 'status': t.status})
        for t in tasks if t.due_date is not None
    ]


def project_events(projects):
    return [
        _event(f"project-{p.id}", f"📁 {p.name}", p.due_date, p.color or DEFAULT_PROJECT_COLOR,
               {'type': 'project'})
        for p in projects if p.due_date is not None
    ]


def habit_events(habits, entries):
    names = {h.id: h.name for h in habits}
    days = {}
    for entry in sorted(entries, key=lambda e: (e.date, e.id)):
        if not entry.completed or entry.habit_id not in names:
            continue
        days.setdefault(day_start_ms(entry.date), []).append(names[entry.habit_id])

    events = []
    for day, habit_names in sorted(days.items()):
        label = datetime.fromtimestamp(day / 1000, tz=timezone.utc).strftime('%Y-%m-%d')
        events.append(_event(f"habits-{label}", f"✅ {', '.join(habit_names)}", day,
                             HABIT_COLOR, {'type': 'habit'}))
    return events


def pomodoro_events(sessions):
    return [
        _event(f"pomodoro-{s.id}", f"🍅 {s.type} ({s.duration}min)", s.start_time, pomodoro_color(s.type),
               {'type': 'pomodoro', 'pomodoroType': s.type, 'duration': s.duration},
               end=s.end_time, all_day=False)
        for s in sessions if s.start_time is not None and s.end_time is not None
    ]


def get_calendar_events(user_id):
    tasks = Task.query.filter(Task.user_id == user_id, Task.due_date.isnot(None)).all()
    projects = Project.query.filter(Project.user_id == user_id, Project.due_date.isnot(None)).all()
    habits = Habit.query.filter_by(user_id=user_id).all()
    entries = HabitEntry.query.filter(
        HabitEntry.user_id == user_id,
        HabitEntry.date >= days_ago_ms(HABIT_WINDOW_DAYS),
    ).all()
    sessions = PomodoroSession.query.filter(
        PomodoroSession.user_id == user_id,
        PomodoroSession.start_time.isnot(None),
        PomodoroSession.end_time.isnot(None),
    ).all()

    return (
        task_events(tasks)
        + project_events(projects)
        + habit_events(habits, entries)
        + pomodoro_events(sessions)
    )
