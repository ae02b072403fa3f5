from datetime import datetime
from flask import request, jsonify
from flask_login import login_required, current_user
from . import board_bp
from models import db, Card
from utils import request_data, parse_int_list, card_to_dict
from services.board_store import BoardStore
from services.board_service import move_card, start_timer
from services.card_generator import generate_cards
from services.errors import PolicyViolation, InvalidTimerDuration
from services.notification_service import DatabaseNotificationScheduler
from services.snapshot import CardStatus, WIP_LIMIT

WIP_MESSAGE = "You can only have 2 tasks in progress at once. Complete or move a task first."

def _board_payload(cards, now):
    columns = {s.value: [card_to_dict(c, now) for c in cards if c.status == s.value] for s in CardStatus}
    doing = len(columns[CardStatus.DOING.value])
    return {
        'date': now.date().isoformat(),
        'columns': columns,
        'wip': {'count': doing, 'limit': WIP_LIMIT, 'label': f"{doing}/{WIP_LIMIT}"},
    }

@board_bp.route('/')
@board_bp.route('/board')
@login_required
def board():
    now = datetime.now()
    cards = BoardStore(current_user.id).today_cards(now)
    return jsonify(_board_payload(cards, now))

@board_bp.route('/board/generate', methods=['POST'])
@login_required
def generate():
    data = request_data()
    if request.is_json:
        habit_ids = parse_int_list(data.get('habit_ids') or [])
    else:
        habit_ids = parse_int_list(request.form.getlist('habit_ids'))

    now = datetime.now()
    store = BoardStore(current_user.id)
    result = generate_cards(store.load_snapshot(now), habit_ids, now)
    store.replace_today_cards(result, DatabaseNotificationScheduler(current_user.id), now)

    return jsonify(_board_payload(store.today_cards(now), now)), 201

@board_bp.route('/cards/<int:card_id>/move', methods=['POST'])
@login_required
def move(card_id):
    status = request_data().get('status')
    now = datetime.now()
    store = BoardStore(current_user.id)

    result = move_card(store.load_snapshot(now), card_id, status, now)
    result = store.apply(result, DatabaseNotificationScheduler(current_user.id), now)
    if result.rejected:
        raise PolicyViolation(WIP_MESSAGE)

    card = db.session.get(Card, card_id)
    return jsonify({'outcome': result.outcome.value, 'card': card_to_dict(card, now)})

@board_bp.route('/cards/<int:card_id>/timer', methods=['POST'])
@login_required
def timer(card_id):
    try:
        minutes = int(request_data().get('minutes'))
    except (TypeError, ValueError):
        raise InvalidTimerDuration("Timer duration must be a number of minutes")

    now = datetime.now()
    store = BoardStore(current_user.id)
    result = start_timer(store.load_snapshot(now), card_id, minutes, now)
    store.apply(result, DatabaseNotificationScheduler(current_user.id), now)

    card = db.session.get(Card, card_id)
    return jsonify({'outcome': result.outcome.value, 'card': card_to_dict(card, now)})
