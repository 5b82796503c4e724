from handlers import organizations, projects, tasks, notes, habits, pomodoro


def build_dashboard(user_id):
    return {
        'tasks': tasks.list_tasks(user_id),
        'projects': projects.list_projects(user_id),
        'habits': habits.list_habits(user_id),
        'pomodoroSessions': pomodoro.list_sessions(user_id),
        'organizations': organizations.list_organizations(user_id),
        'notes': notes.list_notes(user_id),
    }


def load_dashboard(user_id, cache):
    cached = cache.get(user_id)
    if cached is not None:
        return cached
    return cache.set(user_id, build_dashboard(user_id))
