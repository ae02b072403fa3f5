from dataclasses import dataclass, field, replace
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Optional, Tuple

WIP_LIMIT = 2
TIMER_DURATIONS = (15, 30, 60, 90)

class CardStatus(str, Enum):
    TODO = 'TODO'
    DOING = 'DOING'
    DONE = 'DONE'

class TransitionOutcome(str, Enum):
    MOVED = 'moved'
    UNCHANGED = 'unchanged'
    WIP_LIMIT_REACHED = 'wip_limit_reached'
    TIMER_STARTED = 'timer_started'

@dataclass(frozen=True)
class HabitState:
    id: int
    name: str
    emoji: str = '📝'
    color_hex: str = '007AFF'
    is_active: bool = True
    current_streak: int = 0
    longest_streak: int = 0
    last_completed_date: Optional[datetime] = None
    reminder_time: Optional[time] = None

@dataclass(frozen=True)
class CardState:
    id: Optional[int]
    habit_id: int
    habit_name: str
    emoji: str
    color_hex: str
    created_at: datetime
    status: CardStatus = CardStatus.TODO
    moved_to_doing_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    timer_duration: Optional[int] = None
    timer_started_at: Optional[datetime] = None

    @property
    def has_timer(self):
        return self.timer_duration is not None and self.timer_started_at is not None

    @property
    def timer_end(self):
        if not self.has_timer:
            return None
        return self.timer_started_at + timedelta(minutes=self.timer_duration)

    def is_from(self, day):
        return self.created_at.date() == day

@dataclass(frozen=True)
class BoardSnapshot:
    habits: Tuple[HabitState, ...] = ()
    cards: Tuple[CardState, ...] = ()

    def card(self, card_id):
        for c in self.cards:
            if c.id == card_id:
                return c
        return None

    def habit(self, habit_id):
        for h in self.habits:
            if h.id == habit_id:
                return h
        return None

    def cards_in(self, status):
        return [c for c in self.cards if c.status == status]

    @property
    def doing_count(self):
        return len(self.cards_in(CardStatus.DOING))

    @property
    def active_habits(self):
        return [h for h in self.habits if h.is_active]

    @property
    def open_cards(self):
        return [c for c in self.cards if c.status != CardStatus.DONE]

    def with_card(self, card):
        return replace(self, cards=tuple(card if c.id == card.id else c for c in self.cards))

    def with_habit(self, habit):
        return replace(self, habits=tuple(habit if h.id == habit.id else h for h in self.habits))

@dataclass(frozen=True)
class ScheduleNotification:
    key: str
    title: str
    body: str
    fire_at: Optional[datetime] = None
    daily_at: Optional[time] = None

@dataclass(frozen=True)
class CancelNotification:
    key: str

@dataclass(frozen=True)
class TransitionResult:
    snapshot: BoardSnapshot
    effects: Tuple[object, ...] = ()
    outcome: TransitionOutcome = TransitionOutcome.MOVED
    # Rows the transition touched; only these are written back
    card_id: Optional[int] = None
    habit_id: Optional[int] = None

    @property
    def rejected(self):
        return self.outcome == TransitionOutcome.WIP_LIMIT_REACHED

@dataclass(frozen=True)
class GenerationResult:
    snapshot: BoardSnapshot
    removed_card_ids: Tuple[int, ...] = ()
    effects: Tuple[object, ...] = field(default_factory=tuple)

def timer_key(card_id):
    return f"card-timer-{card_id}"

def habit_reminder_key(habit_id):
    return f"habit-{habit_id}"
