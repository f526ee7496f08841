from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

AlertType = Literal["price_above", "price_below", "volume_spike", "earnings", "news"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class WatchlistItemCreate(CamelModel):
    user_id: Optional[str] = None
    ticker: RequiredStr
    name: Optional[str] = None
    market: Optional[str] = None
    currency: Optional[str] = None


class WatchlistItemResponse(CamelModel):
    id: int
    user_id: str
    ticker: str
    name: str
    market: str
    currency: str
    added_at: datetime


class WatchlistResponse(CamelModel):
    success: bool = True
    watchlist: List[WatchlistItemResponse]


class WatchlistItemCreatedResponse(CamelModel):
    success: bool = True
    message: str
    item: WatchlistItemResponse


class StockAlertCreate(CamelModel):
    user_id: Optional[str] = None
    ticker: RequiredStr
    name: Optional[str] = None
    alert_type: AlertType
    # Kept loose so the store can reject non-numeric strings itself.
    target_value: Union[float, RequiredStr]
    market: Optional[str] = None
    currency: Optional[str] = None


class StockAlertResponse(CamelModel):
    id: int
    user_id: str
    ticker: str
    name: str
    alert_type: AlertType
    target_value: float
    market: str
    currency: str
    is_active: bool
    triggered_at: Optional[datetime]
    created_at: datetime


class AlertsResponse(CamelModel):
    success: bool = True
    alerts: List[StockAlertResponse]


class StockAlertCreatedResponse(CamelModel):
    success: bool = True
    message: str
    alert: StockAlertResponse


class MessageResponse(CamelModel):
    success: bool = True
    message: str
