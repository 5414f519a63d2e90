from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ===== Huddle management (snake_case on the wire) =====


class CreateHuddle(BaseModel):
    created_by: str = Field(min_length=1)


class Membership(BaseModel):
    huddle_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class EndHuddle(BaseModel):
    huddle_id: str = Field(min_length=1)


class HuddleCreated(BaseModel):
    huddle_id: str
    channel_name: str
    created_by: str
    created_at: str
    app_id: str


class HuddleSummary(BaseModel):
    huddle_id: str
    channel_name: str
    created_by: str
    created_at: str
    participant_count: int
    participants: List[str]


class HuddleList(BaseModel):
    huddles: List[HuddleSummary]


class Message(BaseModel):
    message: str


# ===== Token issuance (camelCase on the wire) =====


# rtcToken, huddleId, ... to match existing clients
class CamelCase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class RtcTokenOk(CamelCase):
    rtc_token: str
    channel_name: str
    huddle_id: str
    app_id: str


class RtmTokenOk(CamelCase):
    rtm_token: str


class RteTokensOk(CamelCase):
    rtc_token: str
    rtm_token: str
    channel_name: str
    huddle_id: str
    app_id: str
