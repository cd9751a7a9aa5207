from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.errors import domain_error
from app.api.schemas import (
    AddBuyInRequest,
    AddCashOutRequest,
    CreateSessionRequest,
    CreateSessionResponse,
    PlayerIn,
    PlayerSummaryOut,
    SessionSnapshotResponse,
    SettlementResponse,
)
from app.config import get_settings
from app.domain import DomainValidationError, to_minor_units
from app.service import SessionService
from app.storage.database import get_db
from app.storage.repository import SessionRepository

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_service(db: Session = Depends(get_db)) -> SessionService:
    return SessionService(SessionRepository(db), bank_policy=get_settings().bank_policy)


@router.post(
    "",
    response_model=CreateSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a new poker session",
)
def create_session(payload: CreateSessionRequest, service: SessionService = Depends(get_service)) -> CreateSessionResponse:
    try:
        big_blind_cents = None if payload.big_blind is None else to_minor_units(payload.big_blind)
        session_id = service.start_session(payload.name, big_blind_cents)
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return CreateSessionResponse(session_id=session_id)


@router.get("/{session_id}", response_model=SessionSnapshotResponse)
def get_session(session_id: int, service: SessionService = Depends(get_service)) -> SessionSnapshotResponse:
    try:
        snapshot = service.snapshot(session_id)
    except DomainValidationError as exc:
        raise domain_error(exc) from exc

    return SessionSnapshotResponse(
        session_id=snapshot.id,
        name=snapshot.name,
        big_blind_cents=snapshot.big_blind_cents,
        players=[PlayerIn(id=player.id, name=player.name) for player in snapshot.players],
        buyins=[
            {
                "id": buyin.id,
                "player_id": buyin.player_id,
                "amount_cents": buyin.amount_cents,
                "funding_source": buyin.funding_source.value,
                "timestamp": buyin.timestamp.isoformat() if buyin.timestamp else None,
            }
            for buyin in snapshot.buyins
        ],
        cashouts=[
            {
                "player_id": cashout.player_id,
                "amount_cents": cashout.amount_cents,
                "stack_value_cents": cashout.stack_value_cents,
                "timestamp": cashout.timestamp.isoformat() if cashout.timestamp else None,
            }
            for cashout in snapshot.cashouts
        ],
    )


@router.post("/{session_id}/players", status_code=status.HTTP_201_CREATED)
def add_player(session_id: int, payload: PlayerIn, service: SessionService = Depends(get_service)) -> dict[str, Any]:
    try:
        player = payload.to_domain()
        service.add_player(session_id, player)
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return {"status": "ok", "player_id": player.id}


@router.post("/{session_id}/buyins", status_code=status.HTTP_201_CREATED)
def add_buyin(session_id: int, payload: AddBuyInRequest, service: SessionService = Depends(get_service)) -> dict[str, Any]:
    try:
        buyin = service.add_buyin(
            session_id,
            payload.player_id,
            to_minor_units(payload.amount),
            payload.funding_source,
        )
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return {"status": "ok", "buyin_id": buyin.id}


@router.post("/{session_id}/cashouts", status_code=status.HTTP_201_CREATED)
def add_cashout(session_id: int, payload: AddCashOutRequest, service: SessionService = Depends(get_service)) -> dict[str, Any]:
    try:
        service.add_cashout(
            session_id,
            payload.player_id,
            to_minor_units(payload.amount),
            None if payload.stack_value is None else to_minor_units(payload.stack_value),
        )
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return {"status": "ok"}


@router.get(
    "/{session_id}/settlement",
    response_model=SettlementResponse,
    summary="Transfers that settle the session",
)
def get_settlement(session_id: int, service: SessionService = Depends(get_service)) -> SettlementResponse:
    try:
        result = service.get_settlement(session_id)
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return SettlementResponse.from_domain(result)


@router.get("/{session_id}/summary", response_model=list[PlayerSummaryOut])
def get_summary(session_id: int, service: SessionService = Depends(get_service)) -> list[PlayerSummaryOut]:
    try:
        summaries = service.get_summary(session_id)
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return [PlayerSummaryOut.from_domain(summary) for summary in summaries]
