from datetime import date

from loguru import logger
from sqlalchemy.orm import Session

from .models import TrainingBlock
from .schedule import weeks_remaining
from .schemas import TrainingBlockCreate, TrainingBlockOut, TrainingBlockUpdate
from .utils_time import parse_date

class BlockValidationError(ValueError):
    pass

def _check_order(start: date, race: date):
    if start >= race:
        raise BlockValidationError("Start date must be before race date")

def _required_date(raw: str | None, label: str) -> date:
    if not raw or not str(raw).strip():
        raise BlockValidationError(f"{label} is required")
    parsed = parse_date(raw)
    if parsed is None:
        raise BlockValidationError(f"Invalid {label.lower()}")
    return parsed

def validate_create(payload: TrainingBlockCreate) -> dict:
    if not payload.race_name or not payload.race_name.strip():
        raise BlockValidationError("Race name is required")
    if not payload.identifier or not payload.identifier.strip():
        raise BlockValidationError("Identifier is required")
    race_date = _required_date(payload.race_date, "Race date")
    start_date = _required_date(payload.start_date, "Start date")
    if not payload.duration_weeks or payload.duration_weeks <= 0:
        raise BlockValidationError("Duration weeks must be greater than 0")
    _check_order(start_date, race_date)
    return {
        "race_name": payload.race_name.strip(),
        "identifier": payload.identifier.strip(),
        "race_date": race_date,
        "start_date": start_date,
        "duration_weeks": payload.duration_weeks,
    }

def validate_update(payload: TrainingBlockUpdate, existing: TrainingBlock) -> dict:
    """Only the fields present in the payload; dates are checked against the merged record."""
    sent = payload.model_fields_set
    changes: dict = {}

    for field, label in (("race_name", "Race name"), ("identifier", "Identifier")):
        if field in sent:
            value = getattr(payload, field)
            if not value or not value.strip():
                raise BlockValidationError(f"{label} is required")
            changes[field] = value.strip()

    for field, label in (("race_date", "Race date"), ("start_date", "Start date")):
        if field in sent:
            changes[field] = _required_date(getattr(payload, field), label)

    if "duration_weeks" in sent:
        if not payload.duration_weeks or payload.duration_weeks <= 0:
            raise BlockValidationError("Duration weeks must be greater than 0")
        changes["duration_weeks"] = payload.duration_weeks

    if "start_date" in changes or "race_date" in changes:
        _check_order(
            changes.get("start_date", existing.start_date),
            changes.get("race_date", existing.race_date),
        )
    return changes

def to_block_out(block: TrainingBlock) -> TrainingBlockOut:
    return TrainingBlockOut(
        id=block.id,
        race_name=block.race_name,
        identifier=block.identifier,
        race_date=block.race_date,
        start_date=block.start_date,
        duration_weeks=block.duration_weeks,
        weeks_remaining=weeks_remaining(block.race_date),
        created_at=block.created_at,
        updated_at=block.updated_at,
    )

def list_blocks(db: Session) -> list[TrainingBlock]:
    return db.query(TrainingBlock).order_by(TrainingBlock.race_date.asc()).all()

def get_block(db: Session, block_id: int) -> TrainingBlock | None:
    return db.get(TrainingBlock, block_id)

def create_block(db: Session, payload: TrainingBlockCreate) -> TrainingBlock:
    block = TrainingBlock(**validate_create(payload))
    logger.info(f"Creating training block: {block.race_name}")
    db.add(block)
    db.commit()
    db.refresh(block)
    return block

def update_block(db: Session, block: TrainingBlock, payload: TrainingBlockUpdate) -> TrainingBlock:
    changes = validate_update(payload, block)
    logger.info(f"Updating training block: {block.id}")
    for key, value in changes.items():
        setattr(block, key, value)
    db.add(block)
    db.commit()
    db.refresh(block)
    return block

def delete_block(db: Session, block: TrainingBlock) -> None:
    logger.info(f"Deleting training block: {block.id}")
    db.delete(block)
    db.commit()
