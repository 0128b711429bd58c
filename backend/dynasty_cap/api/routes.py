from datetime import datetime, timezone
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from dynasty_cap.api.schemas import (
    ContractCreateRequest,
    ContractOperationResponse,
    DeadMoneyConfigPayload,
    DeadMoneyLedgerResponse,
    ExtendRequest,
    LeagueCreateRequest,
    LeagueResponse,
    PlayerCreateRequest,
    PlayerResponse,
    ReleasePreviewResponse,
    ReleaseRequest,
    TagValuationView,
    TeamCapResponse,
    TeamCreateRequest,
    TeamResponse,
    TradeRequest,
    TradeResponse,
    TransactionRecord,
    TurnoverCommitRequest,
    TurnoverResponse,
)
from dynasty_cap.core.config import settings
from dynasty_cap.db.session import get_db
from dynasty_cap.engine import CapEngineError, ValidationError
from dynasty_cap.services import cap as cap_service
from dynasty_cap.services import contracts as contract_service
from dynasty_cap.services import leagues as league_service
from dynasty_cap.services import turnover as turnover_service
from dynasty_cap.services.transactions import TransactionError, get_league, get_team, list_transactions

router = APIRouter()


def _http_error(exc: Union[CapEngineError, TransactionError]) -> HTTPException:
    if isinstance(exc, TransactionError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict())
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.to_dict())


@router.get("/health")
def read_health():
    """Return minimal health metadata for smoke checks."""
    return {
        "status": "ok",
        "service": settings.project_name,
        "version": settings.version,
        "environment": settings.environment,
        "commit": settings.commit_sha,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }


@router.post("/leagues", response_model=LeagueResponse, status_code=status.HTTP_201_CREATED)
def create_league(request: LeagueCreateRequest, db: Session = Depends(get_db)):
    try:
        fields = request.model_dump(exclude={"name", "dead_money_config"})
        if request.dead_money_config is not None:
            fields["dead_money_config"] = request.dead_money_config.model_dump()
        return league_service.create_league(db, request.name, **fields)
    except CapEngineError as exc:
        raise _http_error(exc)


@router.get("/leagues/{league_id}", response_model=LeagueResponse)
def read_league(league_id: int, db: Session = Depends(get_db)):
    try:
        return get_league(db, league_id)
    except TransactionError as exc:
        raise _http_error(exc)


@router.put("/leagues/{league_id}/dead-money-config", response_model=LeagueResponse)
def update_dead_money_config(league_id: int, request: DeadMoneyConfigPayload, db: Session = Depends(get_db)):
    try:
        return league_service.update_dead_money_config(db, league_id, request.model_dump())
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)


@router.post("/leagues/{league_id}/teams", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(league_id: int, request: TeamCreateRequest, db: Session = Depends(get_db)):
    try:
        return league_service.create_team(db, league_id, request.name, request.abbreviation)
    except TransactionError as exc:
        raise _http_error(exc)


@router.post("/players", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
def create_player(request: PlayerCreateRequest, db: Session = Depends(get_db)):
    return league_service.create_player(db, request.name, request.position)


@router.get("/teams/{team_id}", response_model=TeamResponse)
def read_team(team_id: int, db: Session = Depends(get_db)):
    try:
        return get_team(db, team_id)
    except TransactionError as exc:
        raise _http_error(exc)


@router.get("/teams/{team_id}/cap", response_model=TeamCapResponse)
def get_team_cap(
    team_id: int,
    projection_years: int = Query(default=0, ge=0, le=5, description="Seasons of cap outlook to include."),
    db: Session = Depends(get_db),
):
    try:
        summary = cap_service.team_cap_summary(db, team_id)
        if projection_years:
            summary["projection"] = cap_service.team_cap_projection(db, team_id, projection_years)
    except TransactionError as exc:
        raise _http_error(exc)
    return TeamCapResponse(**summary)


@router.get("/teams/{team_id}/dead-money", response_model=DeadMoneyLedgerResponse)
def get_team_dead_money(
    team_id: int,
    year: Optional[int] = Query(default=None, description="Only entries charged to this season."),
    db: Session = Depends(get_db),
):
    try:
        return DeadMoneyLedgerResponse(**cap_service.dead_money_for_team(db, team_id, year))
    except TransactionError as exc:
        raise _http_error(exc)


@router.post("/contracts", response_model=ContractOperationResponse, status_code=status.HTTP_201_CREATED)
def sign_contract(request: ContractCreateRequest, db: Session = Depends(get_db)):
    try:
        result = contract_service.sign_contract(db, **request.model_dump())
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.post("/contracts/{contract_id}/extend", response_model=ContractOperationResponse)
def extend_contract(contract_id: int, request: ExtendRequest, db: Session = Depends(get_db)):
    try:
        result = contract_service.extend(
            db, contract_id, additional_years=request.additional_years, new_salary=request.new_salary
        )
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.get("/contracts/{contract_id}/tag-value", response_model=TagValuationView)
def read_tag_value(contract_id: int, db: Session = Depends(get_db)):
    try:
        return TagValuationView(**contract_service.tag_value_for_contract(db, contract_id))
    except TransactionError as exc:
        raise _http_error(exc)


@router.post("/contracts/{contract_id}/tag", response_model=ContractOperationResponse)
def tag_contract(contract_id: int, db: Session = Depends(get_db)):
    try:
        result = contract_service.franchise_tag(db, contract_id)
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.get("/contracts/{contract_id}/release-preview", response_model=ReleasePreviewResponse)
def preview_release(
    contract_id: int,
    practice_squad: bool = Query(default=False),
    db: Session = Depends(get_db),
):
    try:
        return ReleasePreviewResponse(
            **contract_service.preview_release(db, contract_id, practice_squad=practice_squad)
        )
    except TransactionError as exc:
        raise _http_error(exc)


@router.post("/contracts/{contract_id}/release", response_model=ContractOperationResponse)
def release_contract(
    contract_id: int,
    request: Optional[ReleaseRequest] = None,
    db: Session = Depends(get_db),
):
    request = request or ReleaseRequest()
    try:
        result = contract_service.release(
            db, contract_id, practice_squad=request.practice_squad, reason=request.reason
        )
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.post("/contracts/{contract_id}/trade", response_model=TradeResponse)
def trade_contract(contract_id: int, request: TradeRequest, db: Session = Depends(get_db)):
    try:
        result = contract_service.trade(db, contract_id, to_team_id=request.to_team_id)
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return TradeResponse(**result)


@router.post("/contracts/{contract_id}/fourth-year-option", response_model=ContractOperationResponse)
def activate_option(contract_id: int, db: Session = Depends(get_db)):
    try:
        result = contract_service.activate_option(db, contract_id)
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.post("/contracts/{contract_id}/expire", response_model=ContractOperationResponse)
def expire_contract(contract_id: int, db: Session = Depends(get_db)):
    try:
        result = contract_service.expire(db, contract_id)
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return ContractOperationResponse(**result)


@router.get("/leagues/{league_id}/season-turnover/preview", response_model=TurnoverResponse)
def preview_turnover(league_id: int, db: Session = Depends(get_db)):
    try:
        return TurnoverResponse(**turnover_service.preview_turnover(db, league_id))
    except TransactionError as exc:
        raise _http_error(exc)


@router.post("/leagues/{league_id}/season-turnover", response_model=TurnoverResponse)
def commit_turnover(league_id: int, request: TurnoverCommitRequest, db: Session = Depends(get_db)):
    try:
        result = turnover_service.commit_turnover(db, league_id, request.from_season)
    except (CapEngineError, TransactionError) as exc:
        raise _http_error(exc)
    return TurnoverResponse(**result)


@router.get("/transactions", response_model=List[TransactionRecord])
def read_transactions(
    league_id: Optional[int] = Query(default=None),
    team_id: Optional[int] = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return list_transactions(db, league_id=league_id, team_id=team_id, limit=limit)
