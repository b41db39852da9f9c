"""Populate the events database with a demo dataset."""
import asyncio
import argparse
import logging
import random
import time
from datetime import date, timedelta

from app.config import settings
from app.database import async_session, create_tables
from app.models import Event, Logistics, Participant, Tache

logger = logging.getLogger("seed")

FIRST_NAMES = ["Ahmed", "Sarra", "Yassine", "Amal", "Mehdi", "Ines", "Karim", "Nour"]
LAST_NAMES = ["Tounsi", "Ben Ali", "Trabelsi", "Gharbi", "Jebali", "Mansour"]
SUPPLIES = ["Chaises", "Tables", "Sono", "Projecteur", "Traiteur", "Tente", "Eclairage"]


async def seed(small: bool = False) -> None:
    num_participants = 20 if small else 200
    num_events = 30 if small else 2000

    logger.info("Seeding %d participants and %d events", num_participants, num_events)
    start = time.perf_counter()

    await create_tables(drop=True)

    async with async_session() as session:
        # The configured cost participant always exists so recomputation has work to do.
        participants = [
            Participant(
                nom=settings.COST_PARTICIPANT_NOM,
                prenom=settings.COST_PARTICIPANT_PRENOM,
                tache=settings.COST_PARTICIPANT_TACHE,
            )
        ]
        for _ in range(num_participants - 1):
            participants.append(
                Participant(
                    nom=random.choice(LAST_NAMES),
                    prenom=random.choice(FIRST_NAMES),
                    tache=random.choice(list(Tache)).value,
                )
            )
        session.add_all(participants)
        await session.flush()

        today = date.today()
        for i in range(num_events):
            debut = today + timedelta(days=random.randint(-180, 180))
            event = Event(
                description=f"Event {i}",
                date_debut=debut,
                date_fin=debut + timedelta(days=random.randint(0, 3)),
            )
            event.participants.extend(random.sample(participants, k=random.randint(1, 5)))
            for _ in range(random.randint(0, 4)):
                event.logistics.append(
                    Logistics(
                        description=random.choice(SUPPLIES),
                        reserve=random.random() > 0.3,
                        prix_unit=round(random.uniform(5, 500), 2),
                        quantite=random.randint(1, 50),
                    )
                )
            session.add(event)
            if i % 500 == 499:
                await session.flush()
                logger.info("  %d events staged", i + 1)

        await session.commit()

    logger.info("Seeding complete in %.1fs", time.perf_counter() - start)


def main():
    parser = argparse.ArgumentParser(description="Seed the events database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset (30 events)")
    args = parser.parse_args()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(message)s")
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
