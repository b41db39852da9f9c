from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.schemas import ParticipantCreate, ParticipantDetail, ParticipantResponse
from app.services import participant_service

router = APIRouter(prefix="/api/v1/participants", tags=["participants"])

@router.get("", response_model=list[ParticipantResponse])
async def list_participants(db: AsyncSession = Depends(get_db)):
    return await participant_service.get_participants(db)

@router.get("/{participant_id}", response_model=ParticipantDetail)
async def get_participant(participant_id: int, db: AsyncSession = Depends(get_db)):
    participant = await participant_service.get_participant(db, participant_id)
    if not participant:
        raise HTTPException(status_code=404, detail="Participant not found")
    return participant

@router.post("", status_code=201, response_model=ParticipantResponse)
async def add_participant(data: ParticipantCreate, db: AsyncSession = Depends(get_db)):
    return await participant_service.add_participant(db, data)
