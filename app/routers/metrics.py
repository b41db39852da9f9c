from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.models import Event, Logistics, Participant
from app.schemas import MetricsResponse
from app.cache import cache

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(db: AsyncSession = Depends(get_db)):

    total_events = (await db.execute(select(func.count()).select_from(Event))).scalar_one()

    total_participants = (await db.execute(select(func.count()).select_from(Participant))).scalar_one()

    total_logistics = (await db.execute(select(func.count()).select_from(Logistics))).scalar_one()

    total_cost = (await db.execute(select(func.coalesce(func.sum(Event.cost), 0.0)))).scalar_one()

    return MetricsResponse(
        total_events=total_events,
        total_participants=total_participants,
        total_logistics=total_logistics,
        total_cost=round(float(total_cost), 2),
        cache_info=cache.stats,
    )
