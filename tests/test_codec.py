"""Tests for the soul hash codec."""

import base64
import json
import zlib

import pytest
from lzstring import LZString

from core.codec import MAX_LEGACY_TOKEN_CHARS, decode_soul, encode_soul
from core.profile import PROFILE_VERSION, SoulProfile
from questionnaires.questions import Scenario


def _token_for(document) -> str:
    """Build a structurally valid token around an arbitrary JSON document."""
    raw = json.dumps(document).encode("utf-8")
    return base64.urlsafe_b64encode(zlib.compress(raw)).decode("ascii").rstrip("=")


def _legacy_token_for(document) -> str:
    """Token as the first release's lz-string encoder wrote it."""
    return LZString().compressToEncodedURIComponent(json.dumps(document))


class TestRoundTrip:
    def test_round_trip_preserves_profile(self, make_profile):
        profile = make_profile(scenario=Scenario.FRIEND, name="Mia", answers=[1, 2, 3, 4, 5, 1, 2, 3])
        decoded = decode_soul(encode_soul(profile))
        assert decoded == profile
        assert decoded.name == "Mia"
        assert decoded.scenario is Scenario.FRIEND
        assert decoded.version == PROFILE_VERSION

    def test_encode_stamps_timestamp(self, make_profile):
        token = encode_soul(make_profile(), clock=lambda: 1700000000000)
        assert decode_soul(token).timestamp == 1700000000000

    def test_token_is_url_safe(self, make_profile):
        token = encode_soul(make_profile(name="Zoë & Léa?"))
        assert all(ch.isalnum() or ch in "-_" for ch in token)

    def test_unicode_name_survives(self, make_profile):
        token = encode_soul(make_profile(name="小明"))
        assert decode_soul(token).name == "小明"

    def test_missing_type_defaults_to_couple(self):
        token = _token_for({"version": 2, "answers": [3] * 50})
        profile = decode_soul(token)
        assert profile.scenario is Scenario.COUPLE
        assert profile.name is None

    def test_answers_are_not_range_checked(self):
        # The scorer handles out-of-range values; the codec only checks shape.
        profile = decode_soul(_token_for({"version": 2, "type": "friend", "answers": [9, "x"]}))
        assert profile.answers == (9, "x")


class TestRejection:
    @pytest.mark.parametrize("token", [
        "",
        "not a token",
        "+/+/",
        "AAAA",
        "@@@@",
        "a" * 7,
    ])
    def test_garbage_is_rejected(self, token):
        assert decode_soul(token) is None

    def test_non_string_is_rejected(self):
        assert decode_soul(None) is None
        assert decode_soul(12345) is None

    def test_base64_of_non_zlib_data_is_rejected(self):
        token = base64.urlsafe_b64encode(b"hello there, not compressed").decode().rstrip("=")
        assert decode_soul(token) is None

    def test_flipped_character_is_rejected(self, make_profile):
        token = encode_soul(make_profile(fill=2))
        middle = len(token) // 2
        flipped = "B" if token[middle] != "B" else "C"
        assert decode_soul(token[:middle] + flipped + token[middle + 1:]) is None

    def test_truncated_token_is_rejected(self, make_profile):
        token = encode_soul(make_profile(fill=4))
        assert decode_soul(token[:-6]) is None

    def test_trailing_data_is_rejected(self, make_profile):
        token = encode_soul(make_profile(fill=4))
        assert decode_soul(token + "AAAA") is None

    @pytest.mark.parametrize("document", [
        {"answers": [3] * 50},
        {"version": "2", "answers": [3] * 50},
        {"version": True, "answers": [3] * 50},
        {"version": 2, "answers": "33333"},
        {"version": 2},
        {"version": 2, "type": "rivals", "answers": [3] * 8},
        [2, [3] * 50],
        "just a string",
    ])
    def test_wrong_shape_is_rejected(self, document):
        assert decode_soul(_token_for(document)) is None

    def test_oversized_payload_is_rejected(self):
        document = {"version": 2, "answers": [3] * 50, "name": "x" * 100_000}
        assert decode_soul(_token_for(document)) is None


class TestLegacyTokens:
    def test_lz_string_token_decodes(self):
        token = _legacy_token_for({"version": 2, "name": "Mia", "type": "friend", "answers": [1, 2, 3, 4, 5, 1, 2, 3], "timestamp": 1})
        profile = decode_soul(token)
        assert profile.name == "Mia"
        assert profile.scenario is Scenario.FRIEND
        assert profile.answers == (1, 2, 3, 4, 5, 1, 2, 3)

    def test_lz_string_token_without_type_is_couple(self):
        profile = decode_soul(_legacy_token_for({"version": 1, "answers": [3] * 50}))
        assert profile.scenario is Scenario.COUPLE
        assert profile.version == 1

    def test_lz_string_token_with_wrong_shape_is_rejected(self):
        assert decode_soul(_legacy_token_for({"answers": [3] * 50})) is None

    def test_overlong_token_is_rejected(self):
        assert decode_soul("A" * (MAX_LEGACY_TOKEN_CHARS + 1)) is None


class TestProfile:
    def test_to_dict_shape(self):
        profile = SoulProfile(answers=(1, 2), scenario=Scenario.FRIEND, name="Kai", timestamp=5)
        assert profile.to_dict() == {
            "version": PROFILE_VERSION,
            "name": "Kai",
            "type": "friend",
            "answers": [1, 2],
            "timestamp": 5,
        }

    def test_timestamp_not_part_of_equality(self):
        assert SoulProfile(answers=(1,), timestamp=1) == SoulProfile(answers=(1,), timestamp=2)
