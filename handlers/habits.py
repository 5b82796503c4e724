import math
from datetime import datetime, timezone

from models import db, Habit, HabitEntry
from handlers.shaping import (
    DAY_MS, stamp_new, touch, iso, now_ms, today_ms, get_owned, apply_patch,
)

NULLABLE = ('description', 'color')


def habit_stats(habit, entries, today=None):
    """Progress figures shown next to a habit.

    ``entries`` are the habit's HabitEntry rows; all dates are UTC
    midnights in epoch milliseconds.
    """
    today = today_ms() if today is None else today
    done_days = {e.date for e in entries if e.completed}

    weekday = datetime.fromtimestamp(today / 1000, tz=timezone.utc).weekday()
    week_start = today - ((weekday + 1) % 7) * DAY_MS  # Sunday
    weekly = [False] * 7
    for entry in entries:
        offset = (entry.date - week_start) // DAY_MS
        if 0 <= offset < 7:
            weekly[offset] = bool(entry.completed)

    streak = 0
    day = today
    while day in done_days:
        streak += 1
        day -= DAY_MS

    total_days = math.ceil((today - habit.created_at) / DAY_MS)
    rate = (len(done_days) / total_days) * 100 if total_days > 0 else 0

    return {
        'completedToday': today in done_days,
        'streak': streak,
        'weeklyProgress': weekly,
        'completionRate': round(rate, 2),
        'totalCompletedDays': len(done_days),
    }


def shape_habit(habit, entries=None):
    if entries is None:
        entries = HabitEntry.query.filter_by(habit_id=habit.id).all()
    data = {
        'id': habit.id,
        'name': habit.name,
        'description': habit.description,
        'frequency': habit.frequency,
        'target': habit.target,
        'color': habit.color,
        'userId': habit.user_id,
        'createdAt': iso(habit.created_at),
        'updatedAt': iso(habit.updated_at),
    }
    data.update(habit_stats(habit, entries))
    return data


def list_habits(user_id):
    habits = Habit.query.filter_by(user_id=user_id).all()
    result = [shape_habit(h) for h in habits]
    result.sort(key=lambda h: h['createdAt'], reverse=True)
    return result


def create_habit(user_id, name, description=None, frequency='DAILY', target=1, color=None):
    habit = stamp_new(Habit(
        name=name,
        description=description,
        frequency=frequency,
        target=target,
        color=color,
        user_id=user_id,
    ))
    db.session.add(habit)
    db.session.commit()
    return shape_habit(db.session.get(Habit, habit.id), [])


def update_habit(user_id, habit_id, changes):
    habit = get_owned(Habit, habit_id, user_id, 'Habit')
    apply_patch(habit, changes, NULLABLE)
    touch(habit)
    db.session.commit()
    return shape_habit(habit)


def toggle_completion(user_id, habit_id, completed):
    habit = get_owned(Habit, habit_id, user_id, 'Habit')
    today = today_ms()

    entry = HabitEntry.query.filter_by(habit_id=habit.id, date=today, user_id=user_id).first()
    if entry is not None:
        entry.completed = completed
    elif completed:
        db.session.add(HabitEntry(
            habit_id=habit.id,
            user_id=user_id,
            date=today,
            completed=True,
            value=1,
            created_at=now_ms(),
        ))
    db.session.commit()
    return shape_habit(habit)


def delete_habit(user_id, habit_id):
    habit = get_owned(Habit, habit_id, user_id, 'Habit')
    db.session.delete(habit)
    db.session.commit()
