from datetime import datetime
from flask import jsonify
from flask_login import login_required, current_user
from . import habits_bp
from utils import request_data, parse_time, parse_bool, habit_to_dict
from services.board_store import BoardStore
from services.habit_service import create_habit, edit_habit, toggle_habit, delete_habit, MAX_HABITS
from services.notification_service import DatabaseNotificationScheduler

@habits_bp.route('', methods=['GET'])
@login_required
def habits():
    today = datetime.now().date()
    user_habits = BoardStore(current_user.id).habits()
    return jsonify({
        'habits': [habit_to_dict(h, today) for h in user_habits],
        'active_count': sum(1 for h in user_habits if h.is_active),
        'can_add': len(user_habits) < MAX_HABITS,
    })

@habits_bp.route('/add', methods=['POST'])
@login_required
def add_habit():
    data = request_data()
    reminder_enabled = parse_bool(data.get('reminder_enabled', False))
    habit = create_habit(
        current_user.id,
        data.get('name'),
        DatabaseNotificationScheduler(current_user.id),
        emoji=data.get('emoji'),
        color_hex=data.get('color_hex'),
        reminder_enabled=reminder_enabled,
        reminder_time=parse_time(data.get('reminder_time')) if reminder_enabled else None,
    )
    return jsonify(habit_to_dict(habit, datetime.now().date())), 201

@habits_bp.route('/<int:habit_id>/edit', methods=['POST'])
@login_required
def update_habit(habit_id):
    data = request_data()
    reminder_enabled = data.get('reminder_enabled')
    if reminder_enabled is not None:
        reminder_enabled = parse_bool(reminder_enabled)
    habit = edit_habit(
        current_user.id,
        habit_id,
        DatabaseNotificationScheduler(current_user.id),
        name=data.get('name'),
        emoji=data.get('emoji'),
        reminder_enabled=reminder_enabled,
        reminder_time=parse_time(data.get('reminder_time')),
    )
    return jsonify(habit_to_dict(habit, datetime.now().date()))

@habits_bp.route('/<int:habit_id>/toggle', methods=['POST'])
@login_required
def toggle(habit_id):
    habit = toggle_habit(current_user.id, habit_id)
    return jsonify(habit_to_dict(habit, datetime.now().date()))

@habits_bp.route('/<int:habit_id>/delete', methods=['POST'])
@login_required
def remove_habit(habit_id):
    delete_habit(current_user.id, habit_id, DatabaseNotificationScheduler(current_user.id))
    return jsonify({'status': 'success'})
