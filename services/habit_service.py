import logging
import random

from models import db, Habit
from services.board_store import BoardStore
from services.errors import DuplicateHabitName, HabitLimitReached, InvalidHabitName, HabitNotFound, InvalidReminderTime
from services.notification_service import dispatch, habit_reminder_effects
from services.snapshot import CancelNotification, habit_reminder_key

logger = logging.getLogger(__name__)

MAX_HABITS = 20
HABIT_COLORS = ["007AFF", "FF9500", "FF3B30", "34C759", "5856D6", "FF2D55", "5AC8FA"]
HABIT_EMOJIS = ["🧹", "🗑️", "📦", "🧺", "📧", "🍽️", "🛏️", "💼", "📚", "👕", "🚗", "💻", "📱", "🧽", "✨", "📝", "🎯", "✅"]
DEFAULT_EMOJI = "📝"

def clean_name(name):
    name = (name or '').strip()
    if not name:
        raise InvalidHabitName("Habit name cannot be empty")
    return name[:200]

def check_unique_name(user_id, name, exclude_id=None):
    for habit in Habit.query.filter_by(user_id=user_id).all():
        if habit.id != exclude_id and habit.name.lower() == name.lower():
            raise DuplicateHabitName("A habit with this name already exists. Please choose a different name.")

def check_reminder(reminder_enabled, reminder_time):
    if reminder_enabled and reminder_time is None:
        raise InvalidReminderTime("Pick a time for the reminder")

def get_habit(user_id, habit_id):
    habit = db.session.get(Habit, habit_id)
    if habit is None or habit.user_id != user_id:
        raise HabitNotFound(f"Habit {habit_id} not found")
    return habit

def create_habit(user_id, name, scheduler, emoji=None, color_hex=None, reminder_enabled=False, reminder_time=None):
    if Habit.query.filter_by(user_id=user_id).count() >= MAX_HABITS:
        raise HabitLimitReached(f"You've reached the maximum of {MAX_HABITS} habits.")
    name = clean_name(name)
    check_unique_name(user_id, name)
    check_reminder(reminder_enabled, reminder_time)

    habit = Habit(
        user_id=user_id,
        name=name,
        emoji=emoji or DEFAULT_EMOJI,
        color_hex=color_hex or random.choice(HABIT_COLORS),
        is_active=True,
        current_streak=0,
        longest_streak=0,
        reminder_enabled=bool(reminder_enabled),
        reminder_time=reminder_time if reminder_enabled else None,
    )
    db.session.add(habit)
    BoardStore(user_id).commit("save the habit")
    logger.info("User %s created habit %s (%s)", user_id, habit.id, habit.name)

    if habit.reminder_enabled:
        dispatch(scheduler, habit_reminder_effects(habit))
    return habit

def edit_habit(user_id, habit_id, scheduler, name=None, emoji=None, reminder_enabled=None, reminder_time=None):
    habit = get_habit(user_id, habit_id)
    if reminder_enabled is not None:
        check_reminder(reminder_enabled, reminder_time)
    if name is not None:
        name = clean_name(name)
        check_unique_name(user_id, name, exclude_id=habit.id)
        habit.name = name
    if emoji:
        habit.emoji = emoji

    reminder_changed = False
    if reminder_enabled is not None:
        new_time = reminder_time if reminder_enabled else None
        enabled = bool(reminder_enabled)
        reminder_changed = habit.reminder_enabled != enabled or habit.reminder_time != new_time
        habit.reminder_enabled = enabled
        habit.reminder_time = new_time

    BoardStore(user_id).commit("update the habit")

    if reminder_changed:
        dispatch(scheduler, habit_reminder_effects(habit))
    return habit

def toggle_habit(user_id, habit_id):
    habit = get_habit(user_id, habit_id)
    habit.is_active = not habit.is_active
    BoardStore(user_id).commit("update the habit")
    return habit

def delete_habit(user_id, habit_id, scheduler):
    # Cards already generated keep their copy of the habit's details
    habit = get_habit(user_id, habit_id)
    key = habit_reminder_key(habit.id)
    db.session.delete(habit)
    BoardStore(user_id).commit("delete the habit")
    dispatch(scheduler, (CancelNotification(key),))
