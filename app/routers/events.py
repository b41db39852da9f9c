from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.dependencies import DatePeriod
from app.schemas import (
    CostRecomputeRequest,
    EventCreate,
    EventDetail,
    EventResponse,
    LogisticsCreate,
    LogisticsResponse,
)
from app.services import cost_service, event_service

router = APIRouter(prefix="/api/v1/events", tags=["events"])

# Fixed paths are declared before "/{event_id}".

@router.get("/logistics", response_model=list[LogisticsResponse])
async def get_logistics_dates(
    period: DatePeriod = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.get_logistics_dates(db, period.date_debut, period.date_fin)

@router.post("/logistics", status_code=201, response_model=LogisticsResponse)
async def add_affect_log(
    data: LogisticsCreate,
    description_event: str = Query(..., description="Exact description of the target event."),
    db: AsyncSession = Depends(get_db),
):
    item = await event_service.add_affect_log(db, data, description_event)
    if not item:
        raise HTTPException(status_code=404, detail="Event not found")
    return item

@router.post("/costs/recompute", status_code=204)
async def recompute_costs(
    criteria: CostRecomputeRequest | None = None,
    db: AsyncSession = Depends(get_db),
):
    criteria = criteria or CostRecomputeRequest()
    await cost_service.recompute_costs(
        db,
        criteria.nom if criteria.nom is not None else settings.COST_PARTICIPANT_NOM,
        criteria.prenom if criteria.prenom is not None else settings.COST_PARTICIPANT_PRENOM,
        criteria.tache if criteria.tache is not None else settings.COST_PARTICIPANT_TACHE,
    )
    return Response(status_code=204)

@router.get("", response_model=list[EventResponse])
async def list_events(db: AsyncSession = Depends(get_db)):
    return await event_service.get_events(db)

@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
    event = await event_service.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event

@router.post("", status_code=201, response_model=EventDetail)
async def add_affect_event_participant(
    data: EventCreate,
    participant_id: int | None = Query(
        None,
        description="Single participant to attach. Cannot be combined with participant_ids in the body.",
    ),
    db: AsyncSession = Depends(get_db),
):
    if participant_id is not None and data.participant_ids:
        raise HTTPException(
            status_code=422,
            detail="Give either participant_id or participant_ids, not both",
        )
    if participant_id is not None:
        event = await event_service.add_affect_event_participant(db, data, participant_id)
    else:
        event = await event_service.add_affect_event_participants(db, data)
    if not event:
        raise HTTPException(status_code=404, detail="Participant not found")
    return event
