"""Models for CoinGecko API payloads."""

from pydantic import BaseModel, ConfigDict, Field


class MarketData(BaseModel):
    """Market data of a coin on one day."""

    current_price: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")


class CoinHistory(BaseModel):
    """Response of /coins/{id}/history. market_data is absent before listing."""

    id: str | None = None
    symbol: str | None = None
    market_data: MarketData | None = None

    model_config = ConfigDict(extra="ignore")
