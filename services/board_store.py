import logging
from datetime import datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from models import db, Habit, Card
from services.errors import CardNotFound, PersistenceFailure
from services.notification_service import dispatch
from services.snapshot import (
    BoardSnapshot, HabitState, CardState, CardStatus, TransitionOutcome, TransitionResult, WIP_LIMIT,
)

logger = logging.getLogger(__name__)

def day_bounds(now):
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=1)

def habit_state(habit):
    return HabitState(
        id=habit.id,
        name=habit.name,
        emoji=habit.emoji,
        color_hex=habit.color_hex,
        is_active=bool(habit.is_active),
        current_streak=habit.current_streak or 0,
        longest_streak=habit.longest_streak or 0,
        last_completed_date=habit.last_completed_date,
        reminder_time=habit.reminder_time,
    )

def card_state(card):
    return CardState(
        id=card.id,
        habit_id=card.habit_id,
        habit_name=card.habit_name,
        emoji=card.emoji,
        color_hex=card.color_hex,
        created_at=card.created_at,
        status=CardStatus(card.status),
        moved_to_doing_at=card.moved_to_doing_at,
        completed_at=card.completed_at,
        timer_duration=card.timer_duration,
        timer_started_at=card.timer_started_at,
    )

def _apply_habit(row, state):
    row.current_streak = state.current_streak
    row.longest_streak = state.longest_streak
    row.last_completed_date = state.last_completed_date

def _card_values(row, state):
    return {
        'status': state.status.value,
        'moved_to_doing_at': state.moved_to_doing_at,
        # completed_at is set once; an older snapshot must not clear it
        'completed_at': row.completed_at or state.completed_at,
        'timer_duration': state.timer_duration,
        'timer_started_at': state.timer_started_at,
    }

class BoardStore:
    """Loads a user's board as a snapshot and writes engine results back."""

    def __init__(self, user_id):
        self.user_id = user_id

    def habits(self):
        return Habit.query.filter_by(user_id=self.user_id).order_by(Habit.created_at, Habit.id).all()

    def today_cards(self, now):
        start, end = day_bounds(now)
        return (Card.query.filter(Card.user_id == self.user_id, Card.created_at >= start, Card.created_at < end)
                .order_by(Card.created_at, Card.id).all())

    def load_snapshot(self, now):
        return BoardSnapshot(
            habits=tuple(habit_state(h) for h in self.habits()),
            cards=tuple(card_state(c) for c in self.today_cards(now)),
        )

    def commit(self, action):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Commit failed while trying to %s: %s", action, e)
            raise PersistenceFailure(f"Could not {action}") from e

    def save(self, result, now):
        """Write back only the rows the transition touched.

        Returns False when another request filled the last DOING slot after
        this one loaded its snapshot; nothing is written in that case.
        """
        card = result.snapshot.card(result.card_id) if result.card_id is not None else None
        if card is not None:
            row = Card.query.filter_by(id=card.id, user_id=self.user_id).first()
            if row is None:
                raise CardNotFound(f"Card {card.id} is not on today's board")
            values = _card_values(row, card)
            if card.status == CardStatus.DOING and row.status != CardStatus.DOING.value:
                if not self._enter_doing(row, values, now):
                    db.session.rollback()
                    return False
            else:
                for name, value in values.items():
                    setattr(row, name, value)

        habit = result.snapshot.habit(result.habit_id) if result.habit_id is not None else None
        if habit is not None:
            row = db.session.get(Habit, habit.id)
            if row is not None and row.user_id == self.user_id:
                _apply_habit(row, habit)

        self.commit("save the board")
        return True

    def _enter_doing(self, row, values, now):
        # The DOING count is re-checked inside the UPDATE itself
        start, end = day_bounds(now)
        others = aliased(Card)
        in_progress = (
            select(func.count(others.id))
            .where(others.user_id == self.user_id, others.status == CardStatus.DOING.value,
                   others.created_at >= start, others.created_at < end, others.id != row.id)
            .scalar_subquery()
        )
        try:
            moved = (Card.query.filter(Card.id == row.id, in_progress < WIP_LIMIT)
                     .update(values, synchronize_session=False))
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Moving card %s into DOING failed: %s", row.id, e)
            raise PersistenceFailure("Could not save the board") from e
        return moved == 1

    def apply(self, result, scheduler, now):
        """Persist a transition, then hand its side effects to the scheduler."""
        if result.outcome in (TransitionOutcome.UNCHANGED, TransitionOutcome.WIP_LIMIT_REACHED):
            return result
        if not self.save(result, now):
            logger.info("Card %s lost the last DOING slot to a concurrent move", result.card_id)
            return TransitionResult(snapshot=self.load_snapshot(now), outcome=TransitionOutcome.WIP_LIMIT_REACHED)
        dispatch(scheduler, result.effects)
        return result

    def replace_today_cards(self, result, scheduler, now):
        # Deletion is committed on its own so a failed insert leaves an empty day, never a mixed one
        if result.removed_card_ids:
            Card.query.filter(Card.user_id == self.user_id, Card.id.in_(result.removed_card_ids)).delete(synchronize_session=False)
            self.commit("remove today's cards")

        rows = [
            Card(
                user_id=self.user_id,
                habit_id=c.habit_id,
                habit_name=c.habit_name,
                emoji=c.emoji,
                color_hex=c.color_hex,
                status=c.status.value,
                created_at=c.created_at,
            )
            for c in result.snapshot.cards
        ]
        db.session.add_all(rows)
        self.commit("create today's cards")

        dispatch(scheduler, result.effects)
        return rows
