from datetime import datetime
from typing import List, Optional, Union

from src.models.watchlist_schemas import CamelModel, RequiredStr

# Amounts stay loose so the store can reject non-numeric strings itself.
Amount = Union[float, RequiredStr]


class PortfolioHoldingCreate(CamelModel):
    user_id: Optional[str] = None
    ticker: RequiredStr
    name: Optional[str] = None
    shares: Amount
    avg_price: Amount
    current_price: Amount
    market: Optional[str] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None


class PortfolioHoldingUpdate(CamelModel):
    id: int
    user_id: Optional[str] = None
    shares: Amount
    avg_price: Amount
    current_price: Amount


class PortfolioHoldingResponse(CamelModel):
    id: int
    user_id: str
    ticker: str
    name: str
    shares: float
    avg_price: float
    current_price: float
    total_value: float
    gain_loss: float
    gain_loss_percent: float
    market: str
    currency: str
    exchange: str
    added_at: datetime
    updated_at: datetime


class PortfolioSummary(CamelModel):
    total_value: float
    total_invested: float
    total_gain_loss: float
    total_gain_loss_percent: float
    item_count: int


class PortfolioResponse(CamelModel):
    success: bool = True
    portfolio: List[PortfolioHoldingResponse]
    summary: PortfolioSummary


class PortfolioHoldingEnvelope(CamelModel):
    success: bool = True
    message: str
    item: PortfolioHoldingResponse
