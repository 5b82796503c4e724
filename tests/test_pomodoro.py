from helpers import create


def test_start_session(alice):
    session = create(alice, '/api/pomodoro', duration=25)
    assert session['type'] == 'FOCUS'
    assert session['completed'] is False
    assert session['startTime'] == session['createdAt']
    assert session['endTime'] is None


def test_session_validation(alice):
    assert alice.post('/api/pomodoro', json={'duration': 0}).status_code == 422
    assert alice.post('/api/pomodoro', json={'duration': 5, 'type': 'NAP'}).status_code == 422


def test_finish_session(alice):
    session = create(alice, '/api/pomodoro', duration=5, type='SHORT_BREAK')
    updated = alice.patch(f"/api/pomodoro/{session['id']}",
                          json={'completed': True, 'endTime': '2026-10-18T10:05:00Z'}).get_json()
    assert updated['completed'] is True
    assert updated['endTime'] == '2026-10-18T10:05:00.000Z'
    assert updated['duration'] == 5


def test_session_for_foreign_task(alice, bob):
    task = create(alice, '/api/tasks', title='Focus target')
    assert bob.post('/api/pomodoro', json={'duration': 25, 'taskId': task['id']}).status_code == 403
    assert create(alice, '/api/pomodoro', duration=25, taskId=task['id'])['taskId'] == task['id']


def test_foreign_session(alice, bob):
    session = create(alice, '/api/pomodoro', duration=25)
    assert bob.patch(f"/api/pomodoro/{session['id']}", json={'completed': True}).status_code == 403
    assert bob.delete(f"/api/pomodoro/{session['id']}").status_code == 403
    assert bob.get('/api/pomodoro').get_json() == []


def test_delete_session(alice):
    session = create(alice, '/api/pomodoro', duration=25)
    assert alice.delete(f"/api/pomodoro/{session['id']}").status_code == 204
    assert alice.get('/api/pomodoro').get_json() == []
