from __future__ import annotations

import enum
from datetime import date
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Tache(str, enum.Enum):
    """Task labels known to the application.  The column stores free text."""

    ORGANISATEUR = "ORGANISATEUR"
    INVITE = "INVITE"
    SERVEUR = "SERVEUR"
    ANIMATEUR = "ANIMATEUR"
    ACCOMPAGNATEUR = "ACCOMPAGNATEUR"


# ---------------------------------------------------------------------------
# Association table: Event <-> Participant (many-to-many)
# ---------------------------------------------------------------------------
event_participants = Table(
    "event_participants",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "participant_id",
        Integer,
        ForeignKey("participants.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


# ---------------------------------------------------------------------------
# Participant
# ---------------------------------------------------------------------------
class Participant(Base):
    __tablename__ = "participants"

    __table_args__ = (
        # Cost recomputation looks participants up by all three fields at once
        Index("ix_participants_nom_prenom_tache", "nom", "prenom", "tache"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nom: Mapped[str] = mapped_column(String(150), nullable=False)
    prenom: Mapped[str] = mapped_column(String(150), nullable=False)
    tache: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    # lazy="raise": services load relationships explicitly
    events: Mapped[List["Event"]] = relationship(
        "Event", secondary=event_participants, back_populates="participants", lazy="raise"
    )


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------
class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    date_debut: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    date_fin: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    participants: Mapped[List["Participant"]] = relationship(
        "Participant", secondary=event_participants, back_populates="events", lazy="raise"
    )
    logistics: Mapped[List["Logistics"]] = relationship(
        "Logistics", back_populates="event", lazy="raise"
    )


# ---------------------------------------------------------------------------
# Logistics
# ---------------------------------------------------------------------------
class Logistics(Base):
    __tablename__ = "logistics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reserve: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    prix_unit: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    quantite: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    event_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True
    )

    event: Mapped[Optional["Event"]] = relationship(
        "Event", back_populates="logistics", lazy="raise"
    )
