"""Tests for duplicate / update / new session detection."""

from datetime import datetime, timezone

from models.activity import Activity
from services.session_matcher import MatchOutcome, find_match, merge_session

T = datetime(2024, 3, 10, 18, 30, tzinfo=timezone.utc)


def make(elapsed=100, config=0, action="Play", when=T, **kwargs):
    return Activity(
        id_configuration=config,
        game_action_name=action,
        date_session=when,
        elapsed_seconds=elapsed,
        **kwargs,
    )


class TestFindMatch:
    """Test the (timestamp, configuration, action) key."""

    def test_matches_full_triple(self):
        existing = make()
        assert find_match([existing], T, 0, "Play") is existing

    def test_each_key_part_matters(self):
        items = [make()]
        assert find_match(items, T.replace(minute=31), 0, "Play") is None
        assert find_match(items, T, 1, "Play") is None
        assert find_match(items, T, 0, "play") is None

    def test_missing_action_compares_as_empty(self):
        existing = make(action=None)
        assert find_match([existing], T, 0, "") is existing

    def test_records_without_timestamp_never_match(self):
        assert find_match([make(when=None), None], T, 0, "Play") is None


class TestMergeSession:
    """Test the merge policy."""

    def test_no_match_appends(self):
        items = []
        candidate = make()

        assert merge_session(items, candidate) is MatchOutcome.APPLIED
        assert items == [candidate]

    def test_longer_session_updates_elapsed_only(self):
        existing = make(elapsed=100, source_id=None, platform_ids=[])
        items = [existing]

        outcome = merge_session(items, make(elapsed=150, platform_ids=None))

        assert outcome is MatchOutcome.UPDATED
        assert len(items) == 1
        assert existing.elapsed_seconds == 150
        assert existing.platform_ids == []

    def test_equal_elapsed_is_skipped(self):
        existing = make(elapsed=100)

        assert merge_session([existing], make(elapsed=100)) is MatchOutcome.SKIPPED
        assert existing.elapsed_seconds == 100

    def test_shorter_session_is_skipped(self):
        existing = make(elapsed=100)

        assert merge_session([existing], make(elapsed=50)) is MatchOutcome.SKIPPED
        assert existing.elapsed_seconds == 100
