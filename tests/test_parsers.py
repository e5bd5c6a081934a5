"""Tests for consumer reply decoding and key-point field defaults."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from transcript_relay.enrichment.models import TranscriptChunk
from transcript_relay.enrichment.parsers import (
    parse_keypoint_response,
    parse_speaker_response,
    to_keypoint_items,
)
from transcript_relay.enrichment.prompts import build_prompt_payload

CHUNK = TranscriptChunk(
    text="Let's buy milk tomorrow",
    speaker_tag="Guest-1",
    is_final=True,
    timestamp=datetime(2025, 3, 4, 15, 30, tzinfo=timezone.utc),
)


# ---------------------------------------------------------------------------
# Key-point replies
# ---------------------------------------------------------------------------


class TestParseKeypointResponse:
    def test_parse_full_item(self) -> None:
        response = parse_keypoint_response(
            json.dumps(
                {
                    "items": [
                        {
                            "guestId": "Guest-1",
                            "point": "Buy milk tomorrow",
                            "todo": True,
                            "suggestedBy": "Guest-1",
                            "needsFollowUp": False,
                        }
                    ]
                }
            )
        )

        assert response is not None
        items = to_keypoint_items(response, CHUNK)
        assert len(items) == 1
        item = items[0]
        assert item.text == "Buy milk tomorrow"
        assert item.speaker_tag == "Guest-1"
        assert item.suggested_by == "Guest-1"
        assert item.is_action_item is True
        assert item.needs_follow_up is False
        assert item.timestamp == CHUNK.timestamp

    def test_missing_fields_get_defaults(self) -> None:
        """guestId, suggestedBy and timestamp fall back to Unknown / chunk time."""
        response = parse_keypoint_response('{"items":[{"point":"Buy milk","todo":true}]}')

        assert response is not None
        (item,) = to_keypoint_items(response, CHUNK)
        assert item.speaker_tag == "Unknown"
        assert item.suggested_by == "Unknown"
        assert item.timestamp == CHUNK.timestamp
        assert item.is_action_item is True
        assert item.needs_follow_up is False

    def test_suggested_by_falls_back_to_guest_id(self) -> None:
        response = parse_keypoint_response('{"items":[{"guestId":"Guest-3","point":"Ship v2"}]}')

        assert response is not None
        (item,) = to_keypoint_items(response, CHUNK)
        assert item.suggested_by == "Guest-3"

    def test_consumer_timestamp_is_kept_as_utc(self) -> None:
        response = parse_keypoint_response(
            '{"items":[{"point":"Review budget","timestamp":"2025-03-04T09:00:00"}]}'
        )

        assert response is not None
        (item,) = to_keypoint_items(response, CHUNK)
        assert item.timestamp == datetime(2025, 3, 4, 9, 0, tzinfo=timezone.utc)

    def test_blank_points_are_discarded(self) -> None:
        response = parse_keypoint_response(
            '{"items":[{"point":""},{"point":"   "},{"todo":true},{"point":"Keep me"}]}'
        )

        assert response is not None
        items = to_keypoint_items(response, CHUNK)
        assert [i.text for i in items] == ["Keep me"]

    def test_empty_and_missing_items(self) -> None:
        for payload in ('{"items": []}', "{}", '{"items": null}'):
            response = parse_keypoint_response(payload)
            assert response is not None
            assert to_keypoint_items(response, CHUNK) == []

    @pytest.mark.parametrize(
        "payload",
        [
            "Sure! Here are the key points: buy milk.",
            '{"items": [',
            '[{"point": "Buy milk"}]',
            '{"items": "Buy milk"}',
            '{"items": [{"point": "Buy milk", "timestamp": "tomorrow"}]}',
        ],
    )
    def test_malformed_reply_returns_none(self, payload: str) -> None:
        assert parse_keypoint_response(payload) is None

    def test_blank_reply_returns_none(self) -> None:
        assert parse_keypoint_response("") is None
        assert parse_keypoint_response("   \n") is None
        assert parse_keypoint_response(None) is None

    def test_code_fenced_reply_is_unwrapped(self) -> None:
        payload = '```json\n{"items":[{"point":"Buy milk"}]}\n```'

        response = parse_keypoint_response(payload)

        assert response is not None
        assert [i.text for i in to_keypoint_items(response, CHUNK)] == ["Buy milk"]

    def test_malformed_reply_is_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("DEBUG", logger="transcript_relay.enrichment.parsers"):
            parse_keypoint_response("not json")

        records = [r for r in caplog.records if r.name == "transcript_relay.enrichment.parsers"]
        assert len(records) == 1
        assert records[0].levelname == "DEBUG"
        assert "not json" in records[0].getMessage()


# ---------------------------------------------------------------------------
# Speaker replies
# ---------------------------------------------------------------------------


class TestParseSpeakerResponse:
    def test_parse_resolution(self) -> None:
        resolution = parse_speaker_response(
            '{"guestId":"Guest-2","guestName":"Bob","jobTitle":"PM","confidence":0.95}'
        )

        assert resolution is not None
        assert resolution.speaker_tag == "Guest-2"
        assert resolution.display_name == "Bob"
        assert resolution.title == "PM"
        assert resolution.confidence == 0.95
        assert resolution.carries_identity is True

    def test_empty_name_and_title_carry_no_identity(self) -> None:
        resolution = parse_speaker_response(
            '{"guestId":"g2","guestName":"","jobTitle":"","confidence":0.9}'
        )

        assert resolution is not None
        assert resolution.carries_identity is False

    def test_missing_guest_id_carries_no_identity(self) -> None:
        resolution = parse_speaker_response('{"guestName":"Alice","jobTitle":"Engineer"}')

        assert resolution is not None
        assert resolution.speaker_tag == ""
        assert resolution.carries_identity is False

    def test_title_alone_is_enough(self) -> None:
        resolution = parse_speaker_response('{"guestId":"g4","guestName":null,"jobTitle":"CTO"}')

        assert resolution is not None
        assert resolution.display_name == ""
        assert resolution.carries_identity is True

    @pytest.mark.parametrize("payload", ["I think this is Bob.", '"Bob"', '{"guestId": 5'])
    def test_malformed_reply_returns_none(self, payload: str) -> None:
        assert parse_speaker_response(payload) is None


class TestPromptPayload:
    def test_payload_fields(self) -> None:
        payload = json.loads(build_prompt_payload(CHUNK))

        assert payload == {
            "transcript": "Let's buy milk tomorrow",
            "guestId": "Guest-1",
            "timestamp": "2025-03-04T15:30:00+00:00",
        }
