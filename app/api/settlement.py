from __future__ import annotations

from fastapi import APIRouter

from app.api.errors import domain_error
from app.api.schemas import SettlementRequest, SettlementResponse
from app.config import get_settings
from app.domain import DomainValidationError, compute_settlement

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post(
    "",
    response_model=SettlementResponse,
    summary="Compute transfers for a session snapshot",
)
def settle_snapshot(payload: SettlementRequest) -> SettlementResponse:
    try:
        result = compute_settlement(
            [player.to_domain() for player in payload.players],
            [buyin.to_domain() for buyin in payload.buyins],
            [cashout.to_domain() for cashout in payload.cashouts],
            bank_policy=payload.bank_policy or get_settings().bank_policy,
        )
    except DomainValidationError as exc:
        raise domain_error(exc) from exc
    return SettlementResponse.from_domain(result)
