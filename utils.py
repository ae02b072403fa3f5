from datetime import datetime
from flask import request, abort
from services.board_service import time_remaining, is_timer_expired
from services.streak_service import display_streak

def format_minutes(minutes):
    if not minutes:
        return "0m"
    hours = minutes // 60
    mins = minutes % 60
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"

def request_data():
    return request.get_json(silent=True) or request.form

def parse_int_list(values):
    if not isinstance(values, (list, tuple)):
        abort(400)
    try:
        return [int(v) for v in values]
    except (TypeError, ValueError):
        abort(400)

def parse_time(value):
    if not value:
        return None
    try:
        return datetime.strptime(value, '%H:%M').time()
    except ValueError:
        abort(400)

def parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).lower() in ('1', 'true', 'on', 'yes')

def _iso(value):
    return value.isoformat() if value else None

def card_to_dict(card, now):
    remaining = time_remaining(card, now)
    return {
        'id': card.id,
        'habit_id': card.habit_id,
        'habit_name': card.habit_name,
        'emoji': card.emoji,
        'color_hex': card.color_hex,
        'status': card.status,
        'created_at': _iso(card.created_at),
        'moved_to_doing_at': _iso(card.moved_to_doing_at),
        'completed_at': _iso(card.completed_at),
        'timer': None if remaining is None else {
            'duration': card.timer_duration,
            'label': format_minutes(card.timer_duration),
            'started_at': _iso(card.timer_started_at),
            'ends_at': _iso(card.timer_end),
            'seconds_remaining': max(int(remaining.total_seconds()), 0),
            'expired': is_timer_expired(card, now),
        },
    }

def habit_to_dict(habit, today):
    return {
        'id': habit.id,
        'name': habit.name,
        'emoji': habit.emoji,
        'color_hex': habit.color_hex,
        'is_active': habit.is_active,
        'current_streak': habit.current_streak,
        'display_streak': display_streak(habit, today),
        'longest_streak': habit.longest_streak,
        'last_completed_date': _iso(habit.last_completed_date),
        'reminder_enabled': habit.reminder_enabled,
        'reminder_time': habit.reminder_time.strftime('%H:%M') if habit.reminder_time else None,
        'created_at': _iso(habit.created_at),
    }
