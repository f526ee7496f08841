from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.auth.auth import get_authenticated_user_id, scope_user
from src.api.database.database import get_db
from src.api.errors import ValidationError
from src.api.services.watchlist_service import WatchlistStore
from src.models.watchlist_schemas import (
    AlertsResponse,
    MessageResponse,
    StockAlertCreate,
    StockAlertCreatedResponse,
    WatchlistItemCreate,
    WatchlistItemCreatedResponse,
    WatchlistResponse,
)

router = APIRouter(prefix="/api", tags=["watchlist"])


def get_watchlist_store(db: Session = Depends(get_db)) -> WatchlistStore:
    return WatchlistStore(db)


def _require_id(item_id: Optional[int]) -> int:
    if item_id is None:
        raise ValidationError("Missing required parameters: id")
    return item_id


# WATCHLIST --------------------------------------------------------------------------------------

@router.get("/watchlist", response_model=WatchlistResponse)
def get_user_watchlist(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """Watchlist of a user, newest first."""
    owner = scope_user(auth_user_id, user_id)
    return {"watchlist": store.list_watchlist(owner)}


@router.post("/watchlist", response_model=WatchlistItemCreatedResponse, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    payload: WatchlistItemCreate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    """Add a ticker to a user's watchlist. 409 if the ticker is already on it for that market."""
    owner = scope_user(auth_user_id, payload.user_id)
    item = store.add_watchlist_item(
        owner,
        payload.ticker,
        name=payload.name,
        market=payload.market,
        currency=payload.currency,
    )
    return {"message": f"{item.ticker} added to watchlist!", "item": item}


@router.delete("/watchlist", response_model=MessageResponse)
def remove_from_watchlist(
    item_id: Optional[int] = Query(default=None, alias="id"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    owner = scope_user(auth_user_id, user_id)
    store.remove_watchlist_item(owner, _require_id(item_id))
    return {"message": "Watchlist item deleted!"}


# ALERTS -----------------------------------------------------------------------------------------

@router.get("/alerts", response_model=AlertsResponse)
def get_user_alerts(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    owner = scope_user(auth_user_id, user_id)
    return {"alerts": store.list_alerts(owner)}


@router.post("/alerts", response_model=StockAlertCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_alert(
    payload: StockAlertCreate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    owner = scope_user(auth_user_id, payload.user_id)
    alert = store.add_alert(
        owner,
        payload.ticker,
        payload.alert_type,
        payload.target_value,
        name=payload.name,
        market=payload.market,
        currency=payload.currency,
    )
    return {"message": f"Alert created for {alert.ticker}!", "alert": alert}


@router.delete("/alerts", response_model=MessageResponse)
def delete_alert(
    alert_id: Optional[int] = Query(default=None, alias="id"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: WatchlistStore = Depends(get_watchlist_store),
):
    owner = scope_user(auth_user_id, user_id)
    store.remove_alert(owner, _require_id(alert_id))
    return {"message": "Alert deleted!"}
