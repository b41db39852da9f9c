"""
Cost service: recomputes event costs from their reserved logistics.

An event's cost is the sum of ``prix_unit * quantite`` over its logistics
items flagged ``reserve``; unreserved items are ignored.  Recomputation
always starts from zero, so running it twice leaves the same cost.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.cache import cache
from app.models import Event

logger = logging.getLogger(__name__)


def compute_event_cost(event: Event) -> float:
    """Return the total of the reserved logistics attached to *event*."""
    total = 0.0
    for item in event.logistics:
        if item.reserve:
            total += item.prix_unit * item.quantite
    return total


async def recompute_costs(db: AsyncSession, nom: str, prenom: str, tache: str) -> None:
    """
    Recompute and save the cost of every event that has a participant
    named *prenom* *nom* with task *tache* (exact, case-sensitive match).

    Each matching event is saved once with its own total.  Lookup and save
    errors are not caught.
    """
    events = await repository.find_events_by_participant_attributes(db, nom, prenom, tache)
    if not events:
        logger.info("No events for participant %s %s (%s)", prenom, nom, tache)
        return

    for event in events:
        event.cost = compute_event_cost(event)
        await repository.save_event(db, event)
        logger.info("Cost of event %r is now %.2f", event.description, event.cost)
        await cache.invalidate_events(event.id, session=db)
