import json
import logging
import os
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from flask import Flask, Blueprint, request, jsonify, redirect, send_file, g, current_app
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

import auth
import schemas
from models import db
from errors import AppError, BadRequestError
from cache import TtlCache
from reports import build_pomodoro_report
from handlers import (
    users, organizations, projects, tasks, kanban, notes, habits, pomodoro,
    calendar_events, dashboard,
)
from handlers.shaping import iso, to_ms

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')

DEFAULT_CONFIG = {
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///database.db',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SECRET_KEY': 'dev-secret-change-me',
    'SESSION_MAX_AGE': 30 * 24 * 60 * 60,  # 30 days
    'SESSION_UPDATE_AGE': 24 * 60 * 60,
    'SESSION_COOKIE_SECURE': False,
    'DASHBOARD_CACHE_TTL': 30,
    'LOG_LEVEL': 'INFO',
    'SITE_URL': 'http://localhost:5000',
}

ENV_OVERRIDES = {
    'DATABASE_URL': ('SQLALCHEMY_DATABASE_URI', str),
    'SECRET_KEY': ('SECRET_KEY', str),
    'SESSION_MAX_AGE': ('SESSION_MAX_AGE', int),
    'SESSION_UPDATE_AGE': ('SESSION_UPDATE_AGE', int),
    'SESSION_COOKIE_SECURE': ('SESSION_COOKIE_SECURE', lambda v: v.lower() in ('1', 'true', 'yes')),
    'DASHBOARD_CACHE_TTL': ('DASHBOARD_CACHE_TTL', int),
    'LOG_LEVEL': ('LOG_LEVEL', str),
    'SITE_URL': ('SITE_URL', str),
}

CREDENTIAL_PARAMS = ('email', 'password')
MUTATING_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')


def create_app(config=None):
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    for env_name, (key, cast) in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            app.config[key] = cast(os.environ[env_name])
    if config:
        app.config.update(config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    if app.config['SECRET_KEY'] == DEFAULT_CONFIG['SECRET_KEY'] and not app.testing:
        logger.warning("SECRET_KEY is not set; sessions are signed with the development key")

    db.init_app(app)
    app.extensions['dashboard_cache'] = TtlCache(app.config['DASHBOARD_CACHE_TTL'])

    app.before_request(strip_credentials_from_url)
    app.after_request(finish_request)
    app.register_error_handler(AppError, handle_app_error)
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    app.register_blueprint(api)

    with app.app_context():
        db.create_all()

    return app


def dashboard_cache():
    return current_app.extensions['dashboard_cache']


# -- request hooks and error mapping

def strip_credentials_from_url():
    if not any(name in request.args for name in CREDENTIAL_PARAMS):
        return None
    logger.warning(
        "Credentials detected in URL parameters: path=%s has_email=%s has_password=%s user_agent=%s",
        request.path,
        'email' in request.args,
        'password' in request.args,
        request.headers.get('User-Agent'),
    )
    remaining = [(k, v) for k, v in request.args.items(multi=True) if k not in CREDENTIAL_PARAMS]
    url = request.path + ('?' + urlencode(remaining) if remaining else '')
    return redirect(url, code=307)


def finish_request(response):
    user_id = getattr(g, 'user_id', None)
    if user_id is not None and request.method in MUTATING_METHODS and response.status_code < 400:
        dashboard_cache().invalidate(user_id)
    return auth.refresh_session_cookie(response)


def handle_app_error(e):
    return jsonify({'error': e.message}), e.status_code


def handle_validation_error(e):
    details = json.loads(e.json(include_url=False))
    return jsonify({'error': 'Invalid request data', 'details': details}), 422


def handle_http_error(e):
    return jsonify({'error': e.description}), e.code


def handle_unexpected_error(e):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({'error': 'Something went wrong'}), 500


def parse(schema):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError('Request body must be a JSON object')
    return schema.model_validate(data)


# -- health and auth

@api.route('/health')
def health():
    return jsonify({'status': 'ok'})


@api.route('/auth/register', methods=['POST'])
def register():
    data = parse(schemas.RegisterRequest)
    user = users.create_user(data.email, data.password, data.name)
    return jsonify({'message': 'User created successfully', 'userId': user.id}), 201


@api.route('/auth/login', methods=['POST'])
def login():
    data = parse(schemas.LoginRequest)
    user = auth.authenticate(data.email.strip().lower(), data.password)
    token = auth.create_session_token(user.id, user.email, user.name)
    response = jsonify({
        'user': {'id': user.id, 'email': user.email, 'name': user.name},
        'token': token,
    })
    return auth.set_session_cookie(response, token)


@api.route('/auth/logout', methods=['POST'])
def logout():
    return auth.clear_session_cookie(jsonify({'status': 'success'}))


@api.route('/auth/session')
@auth.login_required
def session_info():
    return jsonify({
        'user': {'id': g.user.id, 'email': g.user.email, 'name': g.user.name},
        'expires': iso(g.claims['exp'] * 1000),
    })


@api.route('/user/profile', methods=['GET'])
@auth.login_required
def get_profile():
    return jsonify({'user': users.get_profile(g.user_id)})


@api.route('/user/profile', methods=['PUT'])
@auth.login_required
def update_profile():
    data = parse(schemas.ProfileUpdate)
    profile = users.update_profile(
        g.user_id,
        name=data.name,
        email=data.email,
        image=data.image,
        settings=data.settings.model_dump(by_alias=True) if data.settings is not None else None,
    )
    return jsonify({'user': profile})


@api.route('/user/password', methods=['POST'])
@auth.login_required
def change_password():
    data = parse(schemas.PasswordChange)
    users.change_password(g.user_id, data.current_password, data.new_password)
    return jsonify({'status': 'success'})


# -- organizations

@api.route('/organizations', methods=['GET'])
@auth.login_required
def list_organizations():
    return jsonify(organizations.list_organizations(g.user_id))


@api.route('/organizations', methods=['POST'])
@auth.login_required
def create_organization():
    data = parse(schemas.OrganizationCreate)
    return jsonify(organizations.create_organization(g.user_id, **data.model_dump())), 201


@api.route('/organizations/<int:organization_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_organization(organization_id):
    data = parse(schemas.OrganizationUpdate)
    return jsonify(organizations.update_organization(g.user_id, organization_id, data.changes()))


@api.route('/organizations/<int:organization_id>', methods=['DELETE'])
@auth.login_required
def delete_organization(organization_id):
    organizations.delete_organization(g.user_id, organization_id)
    return '', 204


# -- projects

@api.route('/projects', methods=['GET'])
@auth.login_required
def list_projects():
    return jsonify(projects.list_projects(g.user_id))


@api.route('/projects', methods=['POST'])
@auth.login_required
def create_project():
    data = parse(schemas.ProjectCreate)
    return jsonify(projects.create_project(g.user_id, **data.model_dump())), 201


@api.route('/projects/<int:project_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_project(project_id):
    data = parse(schemas.ProjectUpdate)
    return jsonify(projects.update_project(g.user_id, project_id, data.changes()))


@api.route('/projects/<int:project_id>', methods=['DELETE'])
@auth.login_required
def delete_project(project_id):
    projects.delete_project(g.user_id, project_id)
    return '', 204


# -- tasks and kanban columns

@api.route('/tasks', methods=['GET'])
@auth.login_required
def list_tasks():
    return jsonify(tasks.list_tasks(g.user_id))


@api.route('/tasks', methods=['POST'])
@auth.login_required
def create_task():
    data = parse(schemas.TaskCreate)
    return jsonify(tasks.create_task(g.user_id, **data.model_dump())), 201


@api.route('/tasks/<int:task_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_task(task_id):
    data = parse(schemas.TaskUpdate)
    return jsonify(tasks.update_task(g.user_id, task_id, data.changes()))


@api.route('/tasks/<int:task_id>', methods=['DELETE'])
@auth.login_required
def delete_task(task_id):
    tasks.delete_task(g.user_id, task_id)
    return '', 204


@api.route('/tasks/<int:task_id>/subtasks')
@auth.login_required
def list_subtasks(task_id):
    return jsonify(tasks.list_subtasks(g.user_id, task_id))


@api.route('/tasks/<int:task_id>/move', methods=['PATCH'])
@auth.login_required
def move_task(task_id):
    data = parse(schemas.TaskMove)
    return jsonify(tasks.move_task(g.user_id, task_id, data.column_id))


@api.route('/tasks/columns', methods=['GET'])
@auth.login_required
def list_columns():
    return jsonify(kanban.list_columns(g.user_id))


@api.route('/tasks/columns', methods=['POST'])
@auth.login_required
def create_column():
    data = parse(schemas.ColumnCreate)
    return jsonify(kanban.create_column(g.user_id, **data.model_dump())), 201


@api.route('/tasks/columns/<int:column_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_column(column_id):
    data = parse(schemas.ColumnUpdate)
    return jsonify(kanban.update_column(g.user_id, column_id, data.changes()))


@api.route('/tasks/columns/<int:column_id>', methods=['DELETE'])
@auth.login_required
def delete_column(column_id):
    kanban.delete_column(g.user_id, column_id)
    return '', 204


# -- notes

@api.route('/notes', methods=['GET'])
@auth.login_required
def list_notes():
    return jsonify(notes.list_notes(g.user_id))


@api.route('/notes', methods=['POST'])
@auth.login_required
def create_note():
    data = parse(schemas.NoteCreate)
    return jsonify(notes.create_note(g.user_id, **data.model_dump())), 201


@api.route('/notes/<int:note_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_note(note_id):
    data = parse(schemas.NoteUpdate)
    return jsonify(notes.update_note(g.user_id, note_id, data.changes()))


@api.route('/notes/<int:note_id>', methods=['DELETE'])
@auth.login_required
def delete_note(note_id):
    notes.delete_note(g.user_id, note_id)
    return '', 204


# -- habits

@api.route('/habits', methods=['GET'])
@auth.login_required
def list_habits():
    return jsonify(habits.list_habits(g.user_id))


@api.route('/habits', methods=['POST'])
@auth.login_required
def create_habit():
    data = parse(schemas.HabitCreate)
    return jsonify(habits.create_habit(g.user_id, **data.model_dump())), 201


@api.route('/habits/<int:habit_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_habit(habit_id):
    data = parse(schemas.HabitUpdate)
    return jsonify(habits.update_habit(g.user_id, habit_id, data.changes()))


@api.route('/habits/<int:habit_id>/toggle', methods=['POST'])
@auth.login_required
def toggle_habit(habit_id):
    data = parse(schemas.HabitToggle)
    return jsonify(habits.toggle_completion(g.user_id, habit_id, data.completed))


@api.route('/habits/<int:habit_id>', methods=['DELETE'])
@auth.login_required
def delete_habit(habit_id):
    habits.delete_habit(g.user_id, habit_id)
    return '', 204


# -- pomodoro

@api.route('/pomodoro', methods=['GET'])
@auth.login_required
def list_pomodoro_sessions():
    return jsonify(pomodoro.list_sessions(g.user_id))


@api.route('/pomodoro', methods=['POST'])
@auth.login_required
def create_pomodoro_session():
    data = parse(schemas.PomodoroCreate)
    return jsonify(pomodoro.create_session(g.user_id, **data.model_dump())), 201


@api.route('/pomodoro/<int:session_id>', methods=['PUT', 'PATCH'])
@auth.login_required
def update_pomodoro_session(session_id):
    data = parse(schemas.PomodoroUpdate)
    return jsonify(pomodoro.update_session(g.user_id, session_id, **data.changes()))


@api.route('/pomodoro/<int:session_id>', methods=['DELETE'])
@auth.login_required
def delete_pomodoro_session(session_id):
    pomodoro.delete_session(g.user_id, session_id)
    return '', 204


# -- read-only projections

@api.route('/calendar/events')
@auth.login_required
def calendar_feed():
    return jsonify(calendar_events.get_calendar_events(g.user_id))


@api.route('/dashboard')
@auth.login_required
def dashboard_data():
    return jsonify(dashboard.load_dashboard(g.user_id, dashboard_cache()))


def parse_report_date(value, name):
    if not value:
        raise BadRequestError(f"Missing {name} date")
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise BadRequestError(f"Invalid {name} date")


@api.route('/reports/pomodoro.pdf')
@auth.login_required
def pomodoro_report():
    start_date = parse_report_date(request.args.get('start'), 'start')
    end_date = parse_report_date(request.args.get('end'), 'end')
    if end_date < start_date:
        start_date, end_date = end_date, start_date

    start_ms = to_ms(datetime.combine(start_date, datetime.min.time(), tzinfo=timezone.utc))
    end_ms = to_ms(datetime.combine(end_date + timedelta(days=1), datetime.min.time(), tzinfo=timezone.utc))
    sessions = pomodoro.sessions_between(g.user_id, start_ms, end_ms)

    reporter_name = request.args.get('reporter') or g.user.name or g.user.email
    pdf_stream = build_pomodoro_report(sessions, start_date, end_date, reporter_name)
    filename = f"pomodoro_{start_date.isoformat()}_{end_date.isoformat()}.pdf"
    return send_file(pdf_stream, mimetype='application/pdf', as_attachment=True, download_name=filename)


if __name__ == '__main__':
    create_app().run(debug=True)
