import logging
from dataclasses import replace

from services.snapshot import CardState, CardStatus, CancelNotification, GenerationResult, timer_key

logger = logging.getLogger(__name__)

def generate_cards(snapshot, selected_habit_ids, now):
    """Replace today's cards with one fresh TODO card per selected active habit.

    Ids that do not name an active habit are ignored. The snapshot only ever
    holds today's cards, so older cards are never touched here.
    """
    selected = set(selected_habit_ids or ())

    removed = tuple(c.id for c in snapshot.cards)
    effects = tuple(CancelNotification(timer_key(c.id)) for c in snapshot.cards if c.has_timer)

    new_cards = tuple(
        CardState(
            id=None,
            habit_id=h.id,
            habit_name=h.name,
            emoji=h.emoji,
            color_hex=h.color_hex,
            created_at=now,
            status=CardStatus.TODO,
        )
        for h in snapshot.active_habits if h.id in selected
    )

    logger.info("Generating %d card(s), replacing %d", len(new_cards), len(removed))
    return GenerationResult(
        snapshot=replace(snapshot, cards=new_cards),
        removed_card_ids=removed,
        effects=effects,
    )
