import logging
from dataclasses import replace
from datetime import timedelta

from services.errors import CardNotFound, InvalidStatus, InvalidTimerDuration, CardNotInProgress, TimerAlreadySet
from services.snapshot import (
    CardStatus, TransitionOutcome, TransitionResult, ScheduleNotification, CancelNotification,
    WIP_LIMIT, TIMER_DURATIONS, timer_key,
)
from services.streak_service import record_completion

logger = logging.getLogger(__name__)

TIMER_EXPIRED_BODY = "Time's up! Don't forget to finish this task."

def parse_status(value):
    if isinstance(value, CardStatus):
        return value
    try:
        return CardStatus(str(value).upper())
    except ValueError:
        raise InvalidStatus(f"Unknown card status: {value!r}")

def _get_card(snapshot, card_id):
    card = snapshot.card(card_id)
    if card is None:
        raise CardNotFound(f"Card {card_id} is not on today's board")
    return card

def can_enter_doing(snapshot, card):
    return card.status == CardStatus.DOING or snapshot.doing_count < WIP_LIMIT

def move_card(snapshot, card_id, target_status, now):
    card = _get_card(snapshot, card_id)
    target = parse_status(target_status)

    if target == CardStatus.DOING and not can_enter_doing(snapshot, card):
        logger.info("Card %s rejected from DOING: %d/%d in progress", card.id, snapshot.doing_count, WIP_LIMIT)
        return TransitionResult(snapshot=snapshot, outcome=TransitionOutcome.WIP_LIMIT_REACHED)

    previous = card.status
    updated = replace(card, status=target)
    new_snapshot = snapshot
    habit_id = None

    if target == CardStatus.DOING and updated.moved_to_doing_at is None:
        updated = replace(updated, moved_to_doing_at=now)

    if target == CardStatus.DONE and updated.completed_at is None:
        updated = replace(updated, completed_at=now)
        habit = snapshot.habit(card.habit_id)
        if habit is not None:
            new_snapshot = new_snapshot.with_habit(record_completion(habit, now))
            habit_id = habit.id
        else:
            logger.info("Card %s completed after its habit %s was removed", card.id, card.habit_id)

    effects = ()
    if previous == CardStatus.DOING and target != CardStatus.DOING:
        updated = replace(updated, timer_duration=None, timer_started_at=None, moved_to_doing_at=None)
        effects = (CancelNotification(timer_key(card.id)),)

    if updated == card:
        return TransitionResult(snapshot=snapshot, outcome=TransitionOutcome.UNCHANGED)

    return TransitionResult(
        snapshot=new_snapshot.with_card(updated),
        effects=effects,
        outcome=TransitionOutcome.MOVED,
        card_id=card.id,
        habit_id=habit_id,
    )

def start_timer(snapshot, card_id, minutes, now):
    card = _get_card(snapshot, card_id)

    if minutes not in TIMER_DURATIONS:
        raise InvalidTimerDuration(f"Timer must be one of {', '.join(str(m) for m in TIMER_DURATIONS)} minutes")
    if card.status != CardStatus.DOING:
        raise CardNotInProgress("Timers can only be set on cards in DOING")
    if card.timer_duration is not None or card.timer_started_at is not None:
        raise TimerAlreadySet("This card already has a timer")

    updated = replace(card, timer_duration=minutes, timer_started_at=now)
    alert = ScheduleNotification(
        key=timer_key(card.id),
        title=f"{card.emoji} {card.habit_name}",
        body=TIMER_EXPIRED_BODY,
        fire_at=now + timedelta(minutes=minutes),
    )
    return TransitionResult(
        snapshot=snapshot.with_card(updated),
        effects=(alert,),
        outcome=TransitionOutcome.TIMER_STARTED,
        card_id=card.id,
    )

def time_remaining(card, now):
    """Time left on the card's timer, negative once expired, None without a timer."""
    end = card.timer_end
    if end is None:
        return None
    return end - now

def is_timer_expired(card, now):
    remaining = time_remaining(card, now)
    return remaining is not None and remaining <= timedelta(0)
