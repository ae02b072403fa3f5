import logging
from dataclasses import replace
from datetime import timedelta

logger = logging.getLogger(__name__)

def record_completion(habit, now):
    """Return the habit with its streak counters updated for a completion at `now`."""
    current = habit.current_streak

    if habit.last_completed_date is None:
        current = 1
    else:
        gap = (now.date() - habit.last_completed_date.date()).days
        if gap == 1:
            current += 1
        elif gap > 1:
            current = 1
        elif gap < 0:
            # Clock moved backwards; leave the counter alone.
            logger.warning("Habit %s completed %d day(s) before its last completion", habit.id, -gap)

    return replace(
        habit,
        current_streak=current,
        longest_streak=max(habit.longest_streak, current),
        last_completed_date=now,
    )

def is_streak_alive(habit, today):
    if habit.last_completed_date is None:
        return False
    return today - habit.last_completed_date.date() <= timedelta(days=1)

def display_streak(habit, today):
    # The stored counter only changes on completion, so a missed day shows as 0
    return habit.current_streak if is_streak_alive(habit, today) else 0
