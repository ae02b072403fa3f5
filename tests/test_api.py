from datetime import datetime, timedelta, time
from models import db, Card, Habit, Notification, ScheduledNotification
from services.notification_service import DatabaseNotificationScheduler, deliver_due_notifications

def _add_habits(client, *names):
    for name in names:
        client.post('/habits/add', data={'name': name})
    return [Habit.query.filter_by(name=n).first() for n in names]

def _generate(client, habits):
    return client.post('/board/generate', json={'habit_ids': [h.id for h in habits]})

def test_board_empty(auth_client):
    client, user = auth_client
    response = client.get('/board')
    assert response.status_code == 200
    assert response.json['columns'] == {'TODO': [], 'DOING': [], 'DONE': []}
    assert response.json['wip']['label'] == '0/2'

def test_board_requires_login(client):
    response = client.get('/board')
    assert response.status_code == 401

def test_generate_board(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes', 'Laundry', 'Inbox')

    response = _generate(client, habits[:2])
    assert response.status_code == 201
    todo = response.json['columns']['TODO']
    assert [c['habit_name'] for c in todo] == ['Dishes', 'Laundry']

    # Generating again replaces the day's cards
    response = _generate(client, habits[2:])
    assert [c['habit_name'] for c in response.json['columns']['TODO']] == ['Inbox']
    assert Card.query.filter_by(user_id=user.id).count() == 1

def test_generate_form_and_bad_ids(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes')
    response = client.post('/board/generate', data={'habit_ids': [str(habits[0].id)]})
    assert response.status_code == 201
    response = client.post('/board/generate', json={'habit_ids': ['abc']})
    assert response.status_code == 400
    response = client.post('/board/generate', json={'habit_ids': str(habits[0].id) * 2})
    assert response.status_code == 400
    assert Card.query.filter_by(user_id=user.id).count() == 1

def test_move_card_and_complete(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes')
    card_id = _generate(client, habits).json['columns']['TODO'][0]['id']

    response = client.post(f'/cards/{card_id}/move', json={'status': 'DOING'})
    assert response.status_code == 200
    assert response.json['outcome'] == 'moved'
    assert response.json['card']['moved_to_doing_at'] is not None

    response = client.post(f'/cards/{card_id}/move', json={'status': 'DONE'})
    assert response.json['card']['status'] == 'DONE'
    assert response.json['card']['completed_at'] is not None
    assert response.json['card']['moved_to_doing_at'] is None

    habit = db.session.get(Habit, habits[0].id)
    assert habit.current_streak == 1
    assert habit.longest_streak == 1
    assert client.get('/habits').json['habits'][0]['current_streak'] == 1

def test_habit_list_reports_stored_and_display_streak(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes')
    habit = db.session.get(Habit, habits[0].id)
    habit.current_streak = 4
    habit.longest_streak = 6
    habit.last_completed_date = datetime.now() - timedelta(days=3)
    db.session.commit()

    listed = client.get('/habits').json['habits'][0]
    assert listed['current_streak'] == 4
    assert listed['display_streak'] == 0
    assert listed['longest_streak'] == 6

def test_move_card_invalid_status_and_unknown_card(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes')
    card_id = _generate(client, habits).json['columns']['TODO'][0]['id']

    response = client.post(f'/cards/{card_id}/move', json={'status': 'LATER'})
    assert response.status_code == 400
    assert response.json['error'] == 'INVALID_STATUS'

    response = client.post('/cards/9999/move', json={'status': 'DONE'})
    assert response.status_code == 404

def test_wip_limit(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'A', 'B', 'C')
    ids = [c['id'] for c in _generate(client, habits).json['columns']['TODO']]

    client.post(f'/cards/{ids[0]}/move', json={'status': 'DOING'})
    client.post(f'/cards/{ids[1]}/move', json={'status': 'DOING'})

    response = client.post(f'/cards/{ids[2]}/move', json={'status': 'DOING'})
    assert response.status_code == 409
    assert response.json['error'] == 'WIP_LIMIT_REACHED'
    assert db.session.get(Card, ids[2]).status == 'TODO'

    response = client.post(f'/cards/{ids[0]}/move', json={'status': 'DOING'})
    assert response.status_code == 200
    assert response.json['outcome'] == 'unchanged'

    board = client.get('/board').json
    assert board['wip'] == {'count': 2, 'limit': 2, 'label': '2/2'}

def test_cards_from_other_days_are_not_on_board(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'A')
    old = Card(user_id=user.id, habit_id=habits[0].id, habit_name='A', emoji='📝', color_hex='007AFF',
               created_at=datetime.now() - timedelta(days=1))
    db.session.add(old)
    db.session.commit()

    assert client.get('/board').json['columns']['TODO'] == []
    response = client.post(f'/cards/{old.id}/move', json={'status': 'DONE'})
    assert response.status_code == 404

def test_card_timer(auth_client):
    client, user = auth_client
    habits = _add_habits(client, 'Dishes')
    card_id = _generate(client, habits).json['columns']['TODO'][0]['id']
    key = f"card-timer-{card_id}"

    response = client.post(f'/cards/{card_id}/timer', json={'minutes': 30})
    assert response.status_code == 409
    assert response.json['error'] == 'CARD_NOT_IN_PROGRESS'

    client.post(f'/cards/{card_id}/move', json={'status': 'DOING'})
    response = client.post(f'/cards/{card_id}/timer', json={'minutes': 25})
    assert response.status_code == 400
    response = client.post(f'/cards/{card_id}/timer', json={'minutes': 'soon'})
    assert response.status_code == 400

    response = client.post(f'/cards/{card_id}/timer', json={'minutes': 30})
    assert response.status_code == 200
    timer = response.json['card']['timer']
    assert timer['duration'] == 30
    assert timer['label'] == '30m'
    assert timer['expired'] is False
    assert 0 < timer['seconds_remaining'] <= 30 * 60
    assert ScheduledNotification.query.filter_by(user_id=user.id, key=key).first() is not None

    response = client.post(f'/cards/{card_id}/timer', json={'minutes': 15})
    assert response.status_code == 409
    assert response.json['error'] == 'TIMER_ALREADY_SET'

    response = client.post(f'/cards/{card_id}/move', json={'status': 'TODO'})
    assert response.json['card']['timer'] is None
    assert ScheduledNotification.query.filter_by(user_id=user.id, key=key).first() is None

def test_deliver_timer_notification(auth_client):
    client, user = auth_client
    scheduler = DatabaseNotificationScheduler(user.id)
    scheduler.schedule('card-timer-1', '🧹 Dishes', "Time's up!", fire_at=datetime.now() - timedelta(minutes=1))
    scheduler.schedule('card-timer-2', '📚 Read', "Time's up!", fire_at=datetime.now() + timedelta(hours=1))

    response = client.get('/api/notifications')
    assert [n['key'] for n in response.json] == ['card-timer-1']
    assert ScheduledNotification.query.filter_by(key='card-timer-1').first() is None
    assert ScheduledNotification.query.filter_by(key='card-timer-2').first() is not None

    notif_id = response.json[0]['id']
    client.post(f'/api/notifications/mark_read/{notif_id}')
    assert client.get('/api/notifications').json == []

def test_daily_notification_fires_once_per_day(auth_client):
    client, user = auth_client
    scheduler = DatabaseNotificationScheduler(user.id)
    scheduler.schedule('morning', 'Good Morning! ☀️', 'Board is ready', daily_at=time(8, 0))

    tomorrow = datetime.now().date() + timedelta(days=1)
    assert deliver_due_notifications(user.id, datetime.combine(tomorrow, time(7, 59))) == []
    assert len(deliver_due_notifications(user.id, datetime.combine(tomorrow, time(8, 1)))) == 1
    assert deliver_due_notifications(user.id, datetime.combine(tomorrow, time(12, 0))) == []
    assert len(deliver_due_notifications(user.id, datetime.combine(tomorrow + timedelta(days=1), time(9, 0)))) == 1

    assert ScheduledNotification.query.filter_by(key='morning').first() is not None
    assert Notification.query.filter_by(user_id=user.id, key='morning').count() == 2

def test_mark_all_read(auth_client):
    client, user = auth_client
    db.session.add_all([Notification(user_id=user.id, title='a', message='a'),
                        Notification(user_id=user.id, title='b', message='b')])
    db.session.commit()
    client.post('/api/notifications/mark_all_read')
    assert Notification.query.filter_by(user_id=user.id, is_read=False).count() == 0

def test_settings_daily_reminders(auth_client):
    client, user = auth_client
    response = client.post('/settings/notifications', json={'enabled': True})
    assert response.json['daily_reminders_enabled'] is True
    keys = {r.key for r in ScheduledNotification.query.filter_by(user_id=user.id)}
    assert keys == {'morning', 'evening'}

    # Turning reminders off leaves card timers alone
    DatabaseNotificationScheduler(user.id).schedule('card-timer-5', 't', 'b', fire_at=datetime.now())
    client.post('/settings/notifications', json={'enabled': False})
    keys = {r.key for r in ScheduledNotification.query.filter_by(user_id=user.id)}
    assert keys == {'card-timer-5'}

def test_refresh_smart_reminders(auth_client):
    client, user = auth_client
    response = client.post('/settings/notifications/refresh')
    assert response.json['active_habits'] == 0
    assert ScheduledNotification.query.filter_by(user_id=user.id).count() == 0

    habits = _add_habits(client, 'A', 'B')
    _generate(client, habits[:1])
    response = client.post('/settings/notifications/refresh')
    assert response.json == {'status': 'success', 'active_habits': 2, 'open_cards': 1}

    morning = ScheduledNotification.query.filter_by(user_id=user.id, key='morning').first()
    evening = ScheduledNotification.query.filter_by(user_id=user.id, key='evening').first()
    assert morning.body == "You have 2 active habits. Time to generate today's cards!"
    assert evening.body == "You still have 1 open card. Don't forget to complete it!"

    client.post('/settings/notifications', json={'enabled': False})
    assert client.post('/settings/notifications/refresh').json['status'] == 'disabled'

def test_csrf_token(client):
    response = client.get('/api/csrf-token')
    assert response.status_code == 200
    assert 'csrf_token' in response.json
