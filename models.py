from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime, timedelta

db = SQLAlchemy()

class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    date_joined = db.Column(db.DateTime, default=datetime.utcnow)

    # Morning/evening board reminders
    daily_reminders_enabled = db.Column(db.Boolean, default=True)

    habits = db.relationship('Habit', backref='user', lazy=True, cascade="all, delete-orphan")
    cards = db.relationship('Card', backref='user', lazy=True, cascade="all, delete-orphan")
    notifications = db.relationship('Notification', backref='user', lazy=True, cascade="all, delete-orphan")

class Habit(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    emoji = db.Column(db.String(16), default='📝')
    color_hex = db.Column(db.String(6), default='007AFF')
    is_active = db.Column(db.Boolean, default=True)
    current_streak = db.Column(db.Integer, default=0, nullable=False)
    longest_streak = db.Column(db.Integer, default=0, nullable=False)
    last_completed_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    reminder_enabled = db.Column(db.Boolean, default=False)
    reminder_time = db.Column(db.Time, nullable=True)

class Card(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    # No foreign key: the card keeps its own copy of the habit's name/emoji/color
    habit_id = db.Column(db.Integer, nullable=False)
    habit_name = db.Column(db.String(200), nullable=False)
    emoji = db.Column(db.String(16), nullable=False)
    color_hex = db.Column(db.String(6), nullable=False)
    status = db.Column(db.String(10), default='TODO', nullable=False) # TODO, DOING, DONE
    created_at = db.Column(db.DateTime, default=datetime.now, index=True)
    moved_to_doing_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    timer_duration = db.Column(db.Integer, nullable=True) # minutes: 15, 30, 60, 90
    timer_started_at = db.Column(db.DateTime, nullable=True)

    @property
    def timer_end(self):
        if self.timer_duration is None or self.timer_started_at is None:
            return None
        return self.timer_started_at + timedelta(minutes=self.timer_duration)

class Notification(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.now)
    is_read = db.Column(db.Boolean, default=False)
    key = db.Column(db.String(64), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)

class ScheduledNotification(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    key = db.Column(db.String(64), nullable=False) # card-timer-<id>, morning, evening, habit-<id>
    title = db.Column(db.String(200), nullable=False)
    body = db.Column(db.Text, nullable=False)
    fire_at = db.Column(db.DateTime, nullable=True)  # one-shot
    daily_at = db.Column(db.Time, nullable=True)     # repeats every day
    last_fired_on = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now)

    __table_args__ = (db.UniqueConstraint('user_id', 'key', name='_user_notification_key_uc'),)
