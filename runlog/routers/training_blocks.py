from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import blocks, ingest
from ..blocks import BlockValidationError
from ..config import settings
from ..db import get_session
from ..models import TrainingBlock
from ..schedule import block_weeks
from ..schemas import BlockWeeksOut, MessageOut, TrainingBlockCreate, TrainingBlockOut, TrainingBlockUpdate
from .weekly import report_out

router = APIRouter(prefix="/api/training-blocks", tags=["training-blocks"])

def _get_or_404(db: Session, block_id: int) -> TrainingBlock:
    block = blocks.get_block(db, block_id)
    if not block:
        raise HTTPException(status_code=404, detail="Training block not found")
    return block

@router.post("", response_model=TrainingBlockOut, status_code=201)
def create(payload: TrainingBlockCreate, db: Session = Depends(get_session)):
    try:
        block = blocks.create_block(db, payload)
    except BlockValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return blocks.to_block_out(block)

@router.get("", response_model=list[TrainingBlockOut])
def find_all(db: Session = Depends(get_session)):
    return [blocks.to_block_out(b) for b in blocks.list_blocks(db)]

@router.get("/{block_id}", response_model=TrainingBlockOut)
def find_one(block_id: int, db: Session = Depends(get_session)):
    return blocks.to_block_out(_get_or_404(db, block_id))

@router.get("/{block_id}/weeks", response_model=BlockWeeksOut)
def weeks(block_id: int, db: Session = Depends(get_session)):
    block = _get_or_404(db, block_id)
    activities = ingest.list_activities(db, settings.PRIMARY_ACTIVITY_TYPE)
    reports = block_weeks(activities, block.start_date, block.duration_weeks)
    return BlockWeeksOut(block=blocks.to_block_out(block), weeks=[report_out(r) for r in reports])

@router.patch("/{block_id}", response_model=TrainingBlockOut)
def update(block_id: int, payload: TrainingBlockUpdate, db: Session = Depends(get_session)):
    block = _get_or_404(db, block_id)
    try:
        block = blocks.update_block(db, block, payload)
    except BlockValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return blocks.to_block_out(block)

@router.delete("/{block_id}", response_model=MessageOut)
def remove(block_id: int, db: Session = Depends(get_session)):
    block = _get_or_404(db, block_id)
    blocks.delete_block(db, block)
    return MessageOut(success=True, message="Training block deleted successfully")
