from handlers.calendar_events import status_color, pomodoro_color
from helpers import create, ms


def events(client):
    response = client.get('/api/calendar/events')
    assert response.status_code == 200
    return response.get_json()


def test_task_due_date_becomes_one_event(alice):
    task = create(alice, '/api/tasks', title='Deadline', dueDate='2026-11-01T00:00:00Z')
    create(alice, '/api/tasks', title='Undated')

    feed = events(alice)
    assert len(feed) == 1
    event = feed[0]
    assert event['id'] == f"task-{task['id']}"
    assert event['title'] == 'Deadline'
    assert event['start'] == ms(2026, 11, 1)
    assert event['allDay'] is True
    assert event['backgroundColor'] == '#3b82f6'
    assert event['extendedProps'] == {'type': 'task', 'status': 'ACTIVE'}


def test_project_due_date(alice):
    create(alice, '/api/projects', name='Launch', color='#abcdef', dueDate='2026-12-01T00:00:00Z')
    [event] = events(alice)
    assert event['title'] == '📁 Launch'
    assert event['backgroundColor'] == '#abcdef'
    assert event['extendedProps'] == {'type': 'project'}


def test_habit_completions_are_grouped_by_day(alice):
    read = create(alice, '/api/habits', name='Read')
    run = create(alice, '/api/habits', name='Run')
    alice.post(f"/api/habits/{read['id']}/toggle", json={'completed': True})
    alice.post(f"/api/habits/{run['id']}/toggle", json={'completed': True})

    [event] = events(alice)
    assert event['title'] == '✅ Read, Run'
    assert event['id'].startswith('habits-')
    assert event['extendedProps'] == {'type': 'habit'}


def test_only_finished_pomodoros_appear(alice):
    open_session = create(alice, '/api/pomodoro', duration=25)
    create(alice, '/api/pomodoro', duration=5, type='LONG_BREAK')
    alice.patch(f"/api/pomodoro/{open_session['id']}", json={'endTime': '2030-01-01T00:00:00Z'})

    [event] = events(alice)
    assert event['id'] == f"pomodoro-{open_session['id']}"
    assert event['title'] == '🍅 FOCUS (25min)'
    assert event['allDay'] is False
    assert event['end'] == ms(2030, 1, 1)
    assert event['extendedProps'] == {'type': 'pomodoro', 'pomodoroType': 'FOCUS', 'duration': 25}


def test_feed_is_per_user(alice, bob):
    create(alice, '/api/tasks', title='Deadline', dueDate='2026-11-01T00:00:00Z')
    assert events(bob) == []


def test_colors():
    assert status_color('COMPLETED') == '#10b981'
    assert status_color('UNKNOWN') == '#3b82f6'
    assert pomodoro_color('FOCUS') == '#ef4444'
    assert pomodoro_color(None) == '#ef4444'
