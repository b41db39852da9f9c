"""
Event service: business logic for the Event aggregate.

Design notes
------------
- Events are created together with their participant associations.
  ``associate`` is the only place that links an event to a participant;
  the ``back_populates`` pair on the relationship mirrors the link onto
  ``Participant.events`` so both sides always agree.
- Logistics items are attached to an existing event looked up by its
  exact description.
- Event detail and logistics-by-date reads go through the cache-aside
  pattern; every write invalidates them via ``cache.invalidate_events``.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.cache import cache
from app.config import settings
from app.models import Event, Logistics, Participant
from app.schemas import EventCreate, LogisticsCreate
from app.services.participant_service import participant_to_dict

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _logistics_to_dict(item: Logistics) -> dict:
    return {
        "id": item.id,
        "description": item.description,
        "reserve": item.reserve,
        "prix_unit": item.prix_unit,
        "quantite": item.quantite,
        "event_id": item.event_id,
    }


def _event_to_dict(event: Event) -> dict:
    """Serialise an Event ORM instance to a plain dict (list view)."""
    return {
        "id": event.id,
        "description": event.description,
        "date_debut": event.date_debut.isoformat() if event.date_debut else None,
        "date_fin": event.date_fin.isoformat() if event.date_fin else None,
        "cost": event.cost,
    }


def _event_detail_to_dict(event: Event) -> dict:
    data = _event_to_dict(event)
    data["participants"] = [participant_to_dict(p) for p in event.participants]
    data["logistics"] = [_logistics_to_dict(item) for item in event.logistics]
    return data


# ---------------------------------------------------------------------------
# Association helper
# ---------------------------------------------------------------------------

def associate(event: Event, participant: Participant) -> None:
    """Link *event* and *participant* on both sides, ignoring repeats."""
    if participant not in event.participants:
        event.participants.append(participant)


def _new_event(data: EventCreate) -> Event:
    return Event(
        description=data.description,
        date_debut=data.date_debut,
        date_fin=data.date_fin,
        cost=data.cost,
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

async def add_affect_event_participant(
    db: AsyncSession, data: EventCreate, participant_id: int
) -> dict | None:
    """
    Create an event and associate it with the participant *participant_id*.

    Returns None (and writes nothing) when the participant does not exist.
    """
    participant = await repository.find_participant(db, participant_id)
    if participant is None:
        return None

    event = _new_event(data)
    associate(event, participant)
    await repository.save_event(db, event)

    await cache.invalidate_events(session=db)
    return _event_detail_to_dict(event)


async def add_affect_event_participants(db: AsyncSession, data: EventCreate) -> dict | None:
    """
    Create an event and associate it with every id in
    ``data.participant_ids``.

    All participants are resolved before anything is written, so an
    unknown id returns None without creating the event.
    """
    participants: list[Participant] = []
    for participant_id in dict.fromkeys(data.participant_ids):
        participant = await repository.find_participant(db, participant_id)
        if participant is None:
            logger.info(
                "Event %r not created: participant %d not found",
                data.description,
                participant_id,
            )
            return None
        participants.append(participant)

    event = _new_event(data)
    for participant in participants:
        associate(event, participant)
    await repository.save_event(db, event)

    await cache.invalidate_events(session=db)
    return _event_detail_to_dict(event)


async def add_affect_log(
    db: AsyncSession, data: LogisticsCreate, description_event: str
) -> dict | None:
    """
    Create a logistics item attached to the event described by
    *description_event*.

    The event's cost is left untouched; it changes only when costs are
    recomputed.  Returns None when no event has that description.
    """
    event = await repository.find_event_by_description(db, description_event)
    if event is None:
        return None

    item = Logistics(
        description=data.description,
        reserve=data.reserve,
        prix_unit=data.prix_unit,
        quantite=data.quantite,
    )
    event.logistics.append(item)
    await repository.save_event(db, event)

    await cache.invalidate_events(event.id, session=db)
    return _logistics_to_dict(item)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_events(db: AsyncSession) -> list[dict]:
    return [_event_to_dict(e) for e in await repository.find_events(db)]


async def get_event(db: AsyncSession, event_id: int) -> dict | None:
    """Return the detail dict for *event_id*, or None when it does not exist."""
    cache_key = f"events:detail:{event_id}"
    cached = await cache.get(cache_key)
    if cached:
        return cached

    event = await repository.find_event(db, event_id)
    if event is None:
        return None

    data = _event_detail_to_dict(event)
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


async def get_logistics_dates(db: AsyncSession, date_debut: date, date_fin: date) -> list[dict]:
    """
    Return the reserved logistics of every event starting between
    *date_debut* and *date_fin* inclusive.

    Events without logistics simply contribute nothing.
    """
    cache_key = f"events:logistics:{date_debut.isoformat()}:{date_fin.isoformat()}"
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    events = await repository.find_events_by_date_debut_between(db, date_debut, date_fin)
    items = [
        _logistics_to_dict(item)
        for event in events
        for item in event.logistics
        if item.reserve
    ]

    await cache.set(cache_key, items, ttl=settings.CACHE_TTL_LOGISTICS)
    return items
