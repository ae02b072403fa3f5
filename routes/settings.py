from datetime import datetime
from flask import jsonify
from flask_login import login_required, current_user
from . import settings_bp
from models import db
from utils import request_data, parse_bool
from services.board_store import BoardStore
from services.notification_service import (
    DatabaseNotificationScheduler, schedule_daily_reminders, schedule_smart_reminders, cancel_daily_reminders,
)

@settings_bp.route('', methods=['GET'])
@login_required
def settings():
    return jsonify({'daily_reminders_enabled': current_user.daily_reminders_enabled})

@settings_bp.route('/notifications', methods=['POST'])
@login_required
def update_notifications():
    enabled = parse_bool(request_data().get('enabled', False))
    current_user.daily_reminders_enabled = enabled
    db.session.commit()

    scheduler = DatabaseNotificationScheduler(current_user.id)
    if enabled:
        schedule_daily_reminders(scheduler)
    else:
        cancel_daily_reminders(scheduler)
    return jsonify({'daily_reminders_enabled': enabled})

@settings_bp.route('/notifications/refresh', methods=['POST'])
@login_required
def refresh_notifications():
    # Called by the client when it goes to the background
    if not current_user.daily_reminders_enabled:
        return jsonify({'status': 'disabled'})

    snapshot = BoardStore(current_user.id).load_snapshot(datetime.now())
    active_habits = len(snapshot.active_habits)
    open_cards = len(snapshot.open_cards)
    schedule_smart_reminders(DatabaseNotificationScheduler(current_user.id), active_habits, open_cards)
    return jsonify({'status': 'success', 'active_habits': active_habits, 'open_cards': open_cards})
