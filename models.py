from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

PROJECT_STATUSES = ('ACTIVE', 'PLANNING', 'IN_PROGRESS', 'ON_HOLD', 'COMPLETED')
TASK_PRIORITIES = ('P0', 'P1', 'P2', 'P3')
TASK_SEVERITIES = ('S0', 'S1', 'S2', 'S3')
POMODORO_TYPES = ('FOCUS', 'SHORT_BREAK', 'LONG_BREAK')

# Timestamps are epoch milliseconds, the same layout the hosted store used.
# References between records are plain ids: deleting a parent leaves its
# children pointing at it, so ids are never reused.

class User(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False, default="")
    name = db.Column(db.String(200), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    settings = db.Column(db.Text, nullable=True)  # JSON string
    email_verified = db.Column(db.BigInteger, nullable=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class Organization(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    color = db.Column(db.String(7), nullable=True)
    order = db.Column(db.Integer, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class Project(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="ACTIVE")
    color = db.Column(db.String(7), nullable=True)
    due_date = db.Column(db.BigInteger, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    organization_id = db.Column(db.Integer, nullable=True, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class KanbanColumn(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    color = db.Column(db.String(7), nullable=False)
    order = db.Column(db.Integer, nullable=False, index=True)
    # null project means the column is shared by every board
    project_id = db.Column(db.Integer, nullable=True, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class Task(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default="ACTIVE")
    priority = db.Column(db.String(2), nullable=False, default="P1")
    severity = db.Column(db.String(2), nullable=False, default="S1")
    due_date = db.Column(db.BigInteger, nullable=True)
    project_id = db.Column(db.Integer, nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    parent_id = db.Column(db.Integer, nullable=True, index=True)
    column_id = db.Column(db.Integer, nullable=True, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class Note(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    tags = db.Column(db.String(500), nullable=False, default="")  # comma joined
    project_id = db.Column(db.Integer, nullable=True, index=True)
    task_id = db.Column(db.Integer, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class Habit(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    frequency = db.Column(db.String(20), nullable=False, default="DAILY")
    target = db.Column(db.Integer, nullable=False, default=1)
    color = db.Column(db.String(7), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)

class HabitEntry(db.Model):
    __table_args__ = (
        db.Index('by_habit_date_user', 'habit_id', 'date', 'user_id'),
        {'sqlite_autoincrement': True},
    )

    id = db.Column(db.Integer, primary_key=True)
    habit_id = db.Column(db.Integer, nullable=False, index=True)
    date = db.Column(db.BigInteger, nullable=False)  # UTC midnight
    completed = db.Column(db.Boolean, nullable=False, default=False)
    value = db.Column(db.Integer, nullable=False, default=1)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)

class PomodoroSession(db.Model):
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    duration = db.Column(db.Integer, nullable=False)  # minutes
    type = db.Column(db.String(20), nullable=False, default="FOCUS")
    completed = db.Column(db.Boolean, nullable=False, default=False)
    start_time = db.Column(db.BigInteger, nullable=True)
    end_time = db.Column(db.BigInteger, nullable=True)
    task_id = db.Column(db.Integer, nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.BigInteger, nullable=False)
