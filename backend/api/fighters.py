import math

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.db.repositories import FighterFilters, FighterRepository
from backend.schemas.fighter import (
    FighterCreate,
    FighterResponse,
    FighterUpdate,
    MessageResponse,
    PaginatedFightersResponse,
    Pagination,
)
from backend.services.dependencies import get_fighter_repository
from scraper.models.fighter import WeightClass

router = APIRouter()


@router.get("/", response_model=PaginatedFightersResponse)
@router.get("", response_model=PaginatedFightersResponse, include_in_schema=False)
async def list_fighters(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=100, description="Number of fighters per page"),
    weight_class: WeightClass | None = Query(None, description="Only this division"),
    is_active: bool | None = Query(None, description="Filter on active status"),
    search: str | None = Query(None, description="Case-insensitive name substring"),
    repository: FighterRepository = Depends(get_fighter_repository),
) -> PaginatedFightersResponse:
    """List fighters with pagination, newest first."""
    filters = FighterFilters(
        weight_class=weight_class.value if weight_class else None,
        is_active=is_active,
        search=search,
    )
    fighters, total = await repository.find_many(filters, page=page, limit=limit)
    return PaginatedFightersResponse(
        data=[FighterResponse.model_validate(fighter) for fighter in fighters],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get("/{fighter_id}", response_model=FighterResponse)
async def get_fighter(
    fighter_id: int,
    repository: FighterRepository = Depends(get_fighter_repository),
) -> FighterResponse:
    fighter = await repository.get(fighter_id)
    if not fighter:
        raise HTTPException(status_code=404, detail="Fighter not found")
    return FighterResponse.model_validate(fighter)


@router.post("/", response_model=FighterResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "",
    response_model=FighterResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_fighter(
    payload: FighterCreate,
    repository: FighterRepository = Depends(get_fighter_repository),
) -> FighterResponse:
    fighter = await repository.create(payload.model_dump(mode="json"))
    return FighterResponse.model_validate(fighter)


@router.put("/{fighter_id}", response_model=FighterResponse)
async def update_fighter(
    fighter_id: int,
    payload: FighterUpdate,
    repository: FighterRepository = Depends(get_fighter_repository),
) -> FighterResponse:
    """Update only the fields present in the request body."""
    fighter = await repository.update(fighter_id, payload.changes())
    if not fighter:
        raise HTTPException(status_code=404, detail="Fighter not found")
    return FighterResponse.model_validate(fighter)


@router.delete("/{fighter_id}", response_model=MessageResponse)
async def delete_fighter(
    fighter_id: int,
    repository: FighterRepository = Depends(get_fighter_repository),
) -> MessageResponse:
    if not await repository.delete(fighter_id):
        raise HTTPException(status_code=404, detail="Fighter not found")
    return MessageResponse(message="Fighter deleted")
