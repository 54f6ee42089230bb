"""Unit tests for the analysis cache change-detection hash."""

from datetime import datetime

import pytest

from placemaker_ai.analytics.hashing import _to_base36, feedback_hash, rolling_hash
from placemaker_ai.analytics.models import FeedbackItem


def _item(item_id: str, content: str) -> FeedbackItem:
    return FeedbackItem(id=item_id, type="pin", content=content, created_at=datetime(2024, 5, 1))


class TestRollingHash:
    """Test the 32-bit polynomial hash and its base-36 rendering."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", "0"),
            ("a", "2p"),
            ("ab", "2e9"),
            # Wraps to exactly -2**31
            ("polygenelubricants", "-zik0zk"),
        ],
    )
    def test_known_values(self, text, expected):
        assert rolling_hash(text) == expected

    def test_astral_characters_hash_as_surrogate_pairs(self):
        """A character outside the BMP contributes two UTF-16 units."""
        # 0xD83D * 31 + 0xDE00
        assert rolling_hash("\U0001F600") == _to_base36(1772899)
        assert rolling_hash("\U0001F600") == "11zz7"

    def test_base36_helper(self):
        assert _to_base36(0) == "0"
        assert _to_base36(35) == "z"
        assert _to_base36(36) == "10"
        assert _to_base36(-36) == "-10"


class TestFeedbackHash:
    """Test hashing of a feedback set."""

    def test_independent_of_order(self):
        a = [_item("pin-1", "More trees"), _item("form-2", "Too tall"), _item("enquiry-3", "When?")]
        assert feedback_hash(a) == feedback_hash(list(reversed(a)))

    def test_matches_hash_of_sorted_pairs(self):
        items = [_item("pin-2", "b"), _item("pin-1", "a")]
        assert feedback_hash(items) == rolling_hash("pin-1:a|pin-2:b")

    def test_changes_when_content_changes(self):
        before = [_item("pin-1", "More trees")]
        after = [_item("pin-1", "More trees please")]
        assert feedback_hash(before) != feedback_hash(after)

    def test_changes_when_item_added(self):
        items = [_item("pin-1", "More trees")]
        assert feedback_hash(items) != feedback_hash(items + [_item("pin-2", "Less traffic")])

    def test_empty_set(self):
        assert feedback_hash([]) == "0"
