"""
Participant service: creation and reads for the Participant aggregate.

Participants are never cached: they are written once and read mostly as
part of an event detail, which has its own cache entry.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from app import repository
from app.models import Participant
from app.schemas import ParticipantCreate


def participant_to_dict(participant: Participant) -> dict:
    return {
        "id": participant.id,
        "nom": participant.nom,
        "prenom": participant.prenom,
        "tache": participant.tache,
    }


async def add_participant(db: AsyncSession, data: ParticipantCreate) -> dict:
    """Persist a new participant and return its serialised dict."""
    participant = Participant(nom=data.nom, prenom=data.prenom, tache=data.tache)
    await repository.save_participant(db, participant)
    return participant_to_dict(participant)


async def get_participants(db: AsyncSession) -> list[dict]:
    return [participant_to_dict(p) for p in await repository.find_participants(db)]


async def get_participant(db: AsyncSession, participant_id: int) -> dict | None:
    """
    Return *participant_id* with the ids of the events it takes part in,
    or None when it does not exist.
    """
    participant = await repository.find_participant_with_events(db, participant_id)
    if participant is None:
        return None
    data = participant_to_dict(participant)
    data["event_ids"] = sorted(e.id for e in participant.events)
    return data
