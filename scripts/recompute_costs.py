"""Recompute event costs once for a participant, outside the HTTP API."""
import asyncio
import argparse
import logging

from app.config import settings
from app.database import async_session, session_scope
from app.services.cost_service import recompute_costs

logger = logging.getLogger("recompute_costs")


async def run(nom: str, prenom: str, tache: str) -> None:
    async with session_scope(async_session) as session:
        await recompute_costs(session, nom, prenom, tache)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--nom", default=settings.COST_PARTICIPANT_NOM)
    parser.add_argument("--prenom", default=settings.COST_PARTICIPANT_PRENOM)
    parser.add_argument("--tache", default=settings.COST_PARTICIPANT_TACHE)
    args = parser.parse_args()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Recomputing costs for %s %s (%s)", args.prenom, args.nom, args.tache)
    asyncio.run(run(args.nom, args.prenom, args.tache))


if __name__ == "__main__":
    main()
