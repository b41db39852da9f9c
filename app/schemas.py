from datetime import date

from pydantic import BaseModel, ConfigDict, Field


# --- Participant ---

class ParticipantBase(BaseModel):
    nom: str = Field(max_length=150)
    prenom: str = Field(max_length=150)
    tache: str = Field("", max_length=50)


class ParticipantCreate(ParticipantBase):
    pass


class ParticipantResponse(ParticipantBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


class ParticipantDetail(ParticipantResponse):
    event_ids: list[int] = []


# --- Logistics ---

class LogisticsBase(BaseModel):
    description: str
    reserve: bool = False
    prix_unit: float = 0.0
    quantite: int = 0


class LogisticsCreate(LogisticsBase):
    pass


class LogisticsResponse(LogisticsBase):
    id: int
    event_id: int | None
    model_config = ConfigDict(from_attributes=True)


# --- Event ---

class EventBase(BaseModel):
    description: str
    date_debut: date | None = None
    date_fin: date | None = None
    cost: float = 0.0


class EventCreate(EventBase):
    participant_ids: list[int] = []  # used when no single participant is given


class EventResponse(EventBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


class EventDetail(EventResponse):
    participants: list[ParticipantResponse] = []
    logistics: list[LogisticsResponse] = []


# --- Cost recomputation ---

class CostRecomputeRequest(BaseModel):
    """Participant criteria; omitted fields fall back to the configured defaults."""

    nom: str | None = None
    prenom: str | None = None
    tache: str | None = None


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_events: int
    total_participants: int
    total_logistics: int
    total_cost: float
    cache_info: dict = {}
