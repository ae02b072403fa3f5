import logging
from datetime import datetime, time

from sqlalchemy.exc import SQLAlchemyError

from models import db, Notification, ScheduledNotification
from services.errors import PersistenceFailure
from services.snapshot import ScheduleNotification, CancelNotification, habit_reminder_key

logger = logging.getLogger(__name__)

MORNING_KEY = 'morning'
EVENING_KEY = 'evening'
MORNING_AT = time(8, 0)
EVENING_AT = time(20, 0)

class NotificationScheduler:
    def schedule(self, key, title, body, fire_at=None, daily_at=None):
        raise NotImplementedError

    def cancel(self, key):
        """Remove a pending notification. Unknown keys are ignored."""
        raise NotImplementedError

class InMemoryNotificationScheduler(NotificationScheduler):
    def __init__(self):
        self.pending = {}
        self.cancelled = []

    def schedule(self, key, title, body, fire_at=None, daily_at=None):
        self.pending[key] = ScheduleNotification(key=key, title=title, body=body, fire_at=fire_at, daily_at=daily_at)

    def cancel(self, key):
        self.cancelled.append(key)
        self.pending.pop(key, None)

class DatabaseNotificationScheduler(NotificationScheduler):
    """Keeps one pending row per (user, key); scheduling a key again replaces it."""

    def __init__(self, user_id):
        self.user_id = user_id

    def schedule(self, key, title, body, fire_at=None, daily_at=None):
        row = ScheduledNotification.query.filter_by(user_id=self.user_id, key=key).first()
        if row is None:
            row = ScheduledNotification(user_id=self.user_id, key=key)
            db.session.add(row)
        row.title = title
        row.body = body
        row.fire_at = fire_at
        row.daily_at = daily_at
        row.last_fired_on = None
        row.created_at = datetime.now()
        _commit(f"schedule {key}")

    def cancel(self, key):
        ScheduledNotification.query.filter_by(user_id=self.user_id, key=key).delete()
        _commit(f"cancel {key}")

def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Notification %s failed: %s", action, e)
        raise PersistenceFailure(f"Could not {action}") from e

def dispatch(scheduler, effects):
    for effect in effects:
        if isinstance(effect, CancelNotification):
            scheduler.cancel(effect.key)
        elif isinstance(effect, ScheduleNotification):
            scheduler.schedule(effect.key, effect.title, effect.body, fire_at=effect.fire_at, daily_at=effect.daily_at)
        else:
            raise TypeError(f"Unknown side effect: {effect!r}")

def schedule_daily_reminders(scheduler):
    cancel_daily_reminders(scheduler)
    scheduler.schedule(MORNING_KEY, "Good Morning! ☀️",
                       "Your board is ready for today. Let's get things done!", daily_at=MORNING_AT)
    scheduler.schedule(EVENING_KEY, "Time to wrap up! 🌙",
                       "Don't forget to complete your cards and keep your streak alive!", daily_at=EVENING_AT)

def schedule_smart_reminders(scheduler, active_habits, open_cards):
    """Morning reminder only with active habits, evening only with open cards."""
    cancel_daily_reminders(scheduler)

    if active_habits > 0:
        if active_habits == 1:
            body = "You have 1 active habit. Time to generate today's card!"
        else:
            body = f"You have {active_habits} active habits. Time to generate today's cards!"
        scheduler.schedule(MORNING_KEY, "Good Morning! ☀️", body, daily_at=MORNING_AT)

    if open_cards > 0:
        if open_cards == 1:
            body = "You still have 1 open card. Don't forget to complete it!"
        else:
            body = f"You still have {open_cards} open cards. Keep your streak alive!"
        scheduler.schedule(EVENING_KEY, "Time to wrap up! 🌙", body, daily_at=EVENING_AT)

def cancel_daily_reminders(scheduler):
    # Timer and habit reminders stay in place
    scheduler.cancel(MORNING_KEY)
    scheduler.cancel(EVENING_KEY)

def habit_reminder_effects(habit):
    key = habit_reminder_key(habit.id)
    if not habit.reminder_enabled or habit.reminder_time is None:
        return (CancelNotification(key),)
    return (
        CancelNotification(key),
        ScheduleNotification(
            key=key,
            title=f"{habit.emoji} Time for: {habit.name}",
            body="Don't forget to complete this habit today!",
            daily_at=habit.reminder_time,
        ),
    )

def deliver_due_notifications(user_id, now=None):
    """Turn pending notifications that are due into in-app notifications."""
    now = now or datetime.now()
    today = now.date()
    delivered = []

    for row in ScheduledNotification.query.filter_by(user_id=user_id).all():
        if row.fire_at is not None:
            if row.fire_at <= now:
                delivered.append(Notification(user_id=user_id, title=row.title, message=row.body, key=row.key))
                db.session.delete(row)
        elif row.daily_at is not None:
            fire_today = datetime.combine(today, row.daily_at)
            if now >= fire_today and row.last_fired_on != today and row.created_at <= fire_today:
                delivered.append(Notification(user_id=user_id, title=row.title, message=row.body, key=row.key))
                row.last_fired_on = today

    if delivered:
        db.session.add_all(delivered)
        _commit("deliver notifications")
        logger.info("Delivered %d notification(s) to user %s", len(delivered), user_id)
    return delivered
