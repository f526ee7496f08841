from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.auth.auth import get_authenticated_user_id, scope_user
from src.api.database.database import get_db
from src.api.errors import ValidationError
from src.api.services.portfolio_service import PortfolioStore, summarize
from src.models.portfolio_schemas import (
    PortfolioHoldingCreate,
    PortfolioHoldingEnvelope,
    PortfolioHoldingUpdate,
    PortfolioResponse,
)
from src.models.watchlist_schemas import MessageResponse

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


def get_portfolio_store(db: Session = Depends(get_db)) -> PortfolioStore:
    return PortfolioStore(db)


@router.get("", response_model=PortfolioResponse)
def get_portfolio(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: PortfolioStore = Depends(get_portfolio_store),
):
    """Holdings of a user, newest first, with totals across all of them."""
    owner = scope_user(auth_user_id, user_id)
    holdings = store.list_holdings(owner)
    return {"portfolio": holdings, "summary": summarize(holdings)}


@router.post("", response_model=PortfolioHoldingEnvelope, status_code=status.HTTP_201_CREATED)
def add_holding(
    payload: PortfolioHoldingCreate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: PortfolioStore = Depends(get_portfolio_store),
):
    owner = scope_user(auth_user_id, payload.user_id)
    holding = store.add_holding(
        owner,
        payload.ticker,
        payload.shares,
        payload.avg_price,
        payload.current_price,
        name=payload.name,
        market=payload.market,
        currency=payload.currency,
        exchange=payload.exchange,
    )
    return {"message": f"{holding.ticker} added to portfolio!", "item": holding}


@router.put("", response_model=PortfolioHoldingEnvelope)
def update_holding(
    payload: PortfolioHoldingUpdate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: PortfolioStore = Depends(get_portfolio_store),
):
    owner = scope_user(auth_user_id, payload.user_id)
    holding = store.update_holding(owner, payload.id, payload.shares, payload.avg_price, payload.current_price)
    return {"message": "Portfolio item updated!", "item": holding}


@router.delete("", response_model=MessageResponse)
def remove_holding(
    holding_id: Optional[int] = Query(default=None, alias="id"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: PortfolioStore = Depends(get_portfolio_store),
):
    if holding_id is None:
        raise ValidationError("Missing required parameters: id")
    owner = scope_user(auth_user_id, user_id)
    store.remove_holding(owner, holding_id)
    return {"message": "Portfolio item deleted!"}
