from app import app
from models import db, User, Habit
from werkzeug.security import generate_password_hash
from datetime import datetime
from services.board_store import BoardStore
from services.card_generator import generate_cards
from services.habit_service import create_habit
from services.notification_service import DatabaseNotificationScheduler, schedule_daily_reminders

DEMO_HABITS = [
    ('Make the bed', '🛏️'),
    ('Empty the dishwasher', '🍽️'),
    ('Inbox zero', '📧'),
    ('Laundry', '🧺'),
    ('Read 20 pages', '📚'),
]

def create_test_account():
    with app.app_context():
        # 1. Create John
        john = User.query.filter_by(username='john').first()
        if not john:
            john = User(
                username='john',
                password_hash=generate_password_hash('password123', method='scrypt')
            )
            db.session.add(john)
            db.session.commit()
            print("User 'john' created.")
        else:
            print("User 'john' already exists.")

        scheduler = DatabaseNotificationScheduler(john.id)

        # 2. Habits
        for name, emoji in DEMO_HABITS:
            if not Habit.query.filter_by(user_id=john.id, name=name).first():
                create_habit(john.id, name, scheduler, emoji=emoji)
        print(f"{len(DEMO_HABITS)} habits ready.")

        # 3. Today's board from every active habit
        now = datetime.now()
        store = BoardStore(john.id)
        snapshot = store.load_snapshot(now)
        result = generate_cards(snapshot, [h.id for h in snapshot.active_habits], now)
        store.replace_today_cards(result, scheduler, now)
        schedule_daily_reminders(scheduler)

        print("Test data populated successfully.")

if __name__ == "__main__":
    create_test_account()
