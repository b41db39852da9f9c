"""
Query functions for the event aggregate.

Services never build ``select(...)`` statements themselves; they call the
functions below, which keeps the persistence contract small enough to be
replaced with ``AsyncMock`` in unit tests.  Every function flushes at most;
committing is left to ``get_db``.
"""
from datetime import date

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Event, Logistics, Participant


def _event_query():
    # populate_existing refreshes events already in the identity map, so a
    # logistics row added through its foreign key is visible on the next read.
    return (
        select(Event)
        .options(selectinload(Event.participants), selectinload(Event.logistics))
        .execution_options(populate_existing=True)
    )


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

async def find_participant(db: AsyncSession, participant_id: int) -> Participant | None:
    result = await db.execute(select(Participant).where(Participant.id == participant_id))
    return result.scalar_one_or_none()


async def find_participant_with_events(
    db: AsyncSession, participant_id: int
) -> Participant | None:
    q = (
        select(Participant)
        .where(Participant.id == participant_id)
        .options(selectinload(Participant.events))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def find_participants(db: AsyncSession) -> list[Participant]:
    result = await db.execute(select(Participant).order_by(Participant.id))
    return list(result.scalars().all())


async def save_participant(db: AsyncSession, participant: Participant) -> Participant:
    db.add(participant)
    await db.flush()
    return participant


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

async def find_event(db: AsyncSession, event_id: int) -> Event | None:
    result = await db.execute(_event_query().where(Event.id == event_id))
    return result.scalar_one_or_none()


async def find_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(_event_query().order_by(Event.id))
    return list(result.scalars().all())


async def find_event_by_description(db: AsyncSession, description: str) -> Event | None:
    """
    Return the first event whose description matches exactly.

    Descriptions are not unique; the oldest event wins.
    """
    q = _event_query().where(Event.description == description).order_by(Event.id).limit(1)
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def find_events_by_date_debut_between(
    db: AsyncSession, date_debut: date, date_fin: date
) -> list[Event]:
    """Events starting within ``[date_debut, date_fin]`` (both inclusive)."""
    q = (
        _event_query()
        .where(Event.date_debut.between(date_debut, date_fin))
        .order_by(Event.date_debut, Event.id)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def find_events_by_participant_attributes(
    db: AsyncSession, nom: str, prenom: str, tache: str
) -> list[Event]:
    """
    Events with at least one participant matching *nom*, *prenom* and
    *tache* exactly.

    ``any()`` renders an EXISTS subquery, so an event with several
    matching participants is still returned once.
    """
    q = (
        _event_query()
        .where(
            Event.participants.any(
                and_(
                    Participant.nom == nom,
                    Participant.prenom == prenom,
                    Participant.tache == tache,
                )
            )
        )
        .order_by(Event.id)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def save_event(db: AsyncSession, event: Event) -> Event:
    db.add(event)
    await db.flush()
    return event


async def save_logistics(db: AsyncSession, logistics: Logistics) -> Logistics:
    db.add(logistics)
    await db.flush()
    return logistics
