import json

import pytest

from ravenpost import PatternScrubber
from ravenpost.scrubber import MASK


def test_masks_sensitive_keys():
    text = json.dumps({"extra": {"password": "hunter2", "db_password": "s3cr3t", "user": "bob"}}, separators=(",", ":"))
    scrubbed = PatternScrubber().scrub(text)
    assert "hunter2" not in scrubbed
    assert "s3cr3t" not in scrubbed
    assert json.loads(scrubbed)["extra"] == {"password": MASK, "db_password": MASK, "user": "bob"}


def test_key_match_is_case_insensitive():
    scrubbed = PatternScrubber().scrub('{"API_KEY":"abc"}')
    assert scrubbed == f'{{"API_KEY":"{MASK}"}}'


def test_masks_credit_card_numbers():
    scrubbed = PatternScrubber().scrub('{"message":"card 4111 1111 1111 1111 declined"}')
    assert "4111" not in scrubbed
    assert f"card {MASK} declined" in scrubbed


def test_leaves_short_numbers_alone():
    text = '{"message":"order 12345 shipped"}'
    assert PatternScrubber().scrub(text) == text


def test_extra_patterns():
    scrubber = PatternScrubber(patterns=[r"sk_live_[A-Za-z0-9]+"])
    assert scrubber.scrub('"key sk_live_abc123"') == f'"key {MASK}"'


def test_long_bare_numbers_keep_json_valid():
    text = json.dumps({"extra": {"started_ms": 1700000000000}}, separators=(",", ":"))
    scrubbed = PatternScrubber().scrub(text)
    assert json.loads(scrubbed) == {"extra": {"started_ms": 1700000000000}}


@pytest.mark.parametrize("value", [123456, 12.5, True, None, {"nested": "hunter2"}, ["hunter2", 1]])
def test_masks_non_string_sensitive_values(value):
    scrubbed = PatternScrubber().scrub(json.dumps({"extra": {"password": value}}))
    assert json.loads(scrubbed) == {"extra": {"password": MASK}}
    assert "hunter2" not in scrubbed


def test_non_json_text_gets_patterns_only():
    assert PatternScrubber().scrub("card 4111111111111111 password=x") == f"card {MASK} password=x"
