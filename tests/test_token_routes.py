from __future__ import annotations

import jwt
import pytest

from tests.conftest import APP_CERTIFICATE, APP_ID


def decode(token: str) -> dict:
    return jwt.decode(token, APP_CERTIFICATE, algorithms=["HS256"])


@pytest.mark.asyncio
async def test_rtc_token_creates_and_joins_huddle(client, registry) -> None:
    response = await client.get("/rtc/standup/publisher/userAccount/alice")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"rtcToken", "channelName", "huddleId", "appId"}
    assert body["channelName"] == "standup"
    assert body["appId"] == APP_ID

    huddle = registry.get(body["huddleId"])
    assert huddle.channel_name == "standup"
    assert huddle.created_by == "alice"
    assert huddle.participants == ("alice",)

    claims = decode(body["rtcToken"])
    assert claims["channel"] == "standup"
    assert claims["role"] == "publisher"


@pytest.mark.asyncio
async def test_rtc_token_reuses_huddle_for_channel(client, registry) -> None:
    first = (await client.get("/rtc/standup/publisher/uid/1")).json()
    second = (await client.get("/rtc/standup/subscriber/uid/2")).json()

    assert first["huddleId"] == second["huddleId"]
    assert registry.get(first["huddleId"]).participants == ("1", "2")
    assert decode(second["rtcToken"])["uid"] == 2


@pytest.mark.asyncio
async def test_rtc_token_honours_expiry(client, monkeypatch) -> None:
    monkeypatch.setattr("huddle_backend.service.credentials.time.time", lambda: 1_700_000_000.0)

    body = (await client.get("/rtc/standup/publisher/userAccount/alice", params={"expiry": "90"})).json()

    claims = jwt.decode(
        body["rtcToken"], APP_CERTIFICATE, algorithms=["HS256"], options={"verify_exp": False}
    )
    assert claims["exp"] == 1_700_000_090


@pytest.mark.asyncio
async def test_rtc_token_bad_expiry(client, registry) -> None:
    response = await client.get("/rtc/standup/publisher/userAccount/alice", params={"expiry": "later"})

    assert response.status_code == 400
    assert response.json() == {
        "status": 400,
        "message": "Error Generating RTC token: failed to parse expireTime: later",
    }
    assert registry.list() == []


@pytest.mark.asyncio
async def test_rtm_token_bad_expiry(client) -> None:
    response = await client.get("/rtm/alice/", params={"expiry": "later"})

    assert response.status_code == 400
    assert response.json() == {
        "status": 400,
        "message": "Error Generating RTM token: failed to parse expireTime: later",
    }


@pytest.mark.asyncio
async def test_rtc_token_unknown_type_still_tracks_huddle(client, registry) -> None:
    response = await client.get("/rtc/standup/publisher/bogus/alice")

    assert response.status_code == 400
    assert "unknown tokenType: bogus" in response.json()["error"]
    assert registry.get_by_channel("standup").participants == ("alice",)


@pytest.mark.asyncio
async def test_rtc_token_non_numeric_uid(client) -> None:
    response = await client.get("/rtc/standup/publisher/uid/alice")

    assert response.status_code == 400
    assert "Failed to parse uidStr" in response.json()["error"]


@pytest.mark.asyncio
async def test_rtm_token(client, registry) -> None:
    response = await client.get("/rtm/alice/")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"rtmToken"}
    assert decode(body["rtmToken"])["sub"] == "alice"
    assert registry.list() == []


@pytest.mark.asyncio
async def test_rte_tokens(client, registry) -> None:
    response = await client.get("/rte/standup/publisher/userAccount/alice/")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"rtcToken", "rtmToken", "channelName", "huddleId", "appId"}
    assert decode(body["rtcToken"])["channel"] == "standup"
    assert decode(body["rtmToken"])["scope"] == "rtm"
    assert registry.get(body["huddleId"]).participants == ("alice",)


@pytest.mark.asyncio
async def test_rte_tokens_error_shape(client) -> None:
    response = await client.get("/rte/standup/publisher/bogus/alice/")

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["message"] == "Error generating RTC token: failed to generate RTC token for unknown tokenType: bogus"


@pytest.mark.asyncio
async def test_rte_tokens_bad_expiry(client, registry) -> None:
    response = await client.get("/rte/standup/publisher/userAccount/alice/", params={"expiry": "-5"})

    assert response.status_code == 400
    assert response.json() == {
        "status": 400,
        "message": "Error Generating RTC token params: failed to parse expireTime: -5",
    }
    assert registry.list() == []


@pytest.mark.asyncio
async def test_token_then_list_and_end(client) -> None:
    await client.get("/rtc/standup/publisher/userAccount/alice")
    await client.get("/rtc/standup/publisher/userAccount/bob")

    (entry,) = (await client.get("/huddles")).json()["huddles"]
    assert entry["channel_name"] == "standup"
    assert entry["participant_count"] == 2

    ended = await client.delete("/huddles/standup")
    assert ended.status_code == 200
    assert (await client.get("/huddles")).json() == {"huddles": []}
