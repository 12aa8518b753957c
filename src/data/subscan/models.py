"""Models for Subscan API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from src.data.subscan.constants import REWARD_EVENT_IDS
from src.export.models import RewardEvent
from src.helpers.parsers import timestamp_to_day


class RewardSlashRequest(BaseModel):
    """Body of a reward_slash page request."""

    address: str
    page: int
    row: int


class RewardSlashEntry(BaseModel):
    """One reward or slash event of an account."""

    block_num: int
    block_timestamp: int
    amount: int = Field(..., ge=0, description="Plancks, sent as a decimal string")
    event_id: str | None = None
    event_index: str | None = None

    model_config = ConfigDict(extra="allow")

    @property
    def is_reward(self) -> bool:
        return self.event_id is None or self.event_id in REWARD_EVENT_IDS

    def to_reward_event(self) -> RewardEvent:
        return RewardEvent(
            block_num=self.block_num,
            day=timestamp_to_day(self.block_timestamp),
            amount=self.amount,
        )


class RewardSlashData(BaseModel):
    """Page of reward_slash entries, newest first."""

    count: int = 0
    # Subscan sends "list": null past the last page
    entries: list[RewardSlashEntry] | None = Field(default=None, alias="list")

    model_config = ConfigDict(populate_by_name=True)


class RewardSlashResponse(BaseModel):
    """Envelope of every Subscan response. A non-zero code is an API error."""

    code: int
    message: str = ""
    data: RewardSlashData | None = None
