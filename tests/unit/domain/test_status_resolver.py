"""Tests for session status resolution from the audit feed"""

from datetime import timedelta

import pytest

from mediguard.domain import (
    FixedClock,
    MatchKind,
    RequestId,
    ResolverState,
    resolve,
)

WINDOW = timedelta(seconds=5)


@pytest.fixture
def polling_started_at(fixed_clock: FixedClock):
    """Polling began 3 seconds before fixed_clock.now()"""
    return fixed_clock.now() - timedelta(seconds=3)


def _resolve(request_id, polling_started_at, records, fixed_clock):
    return resolve(
        request_id=request_id,
        polling_started_at=polling_started_at,
        records=records,
        now=fixed_clock.now(),
        window=WINDOW,
    )


class TestExactMatch:
    """Records carrying request_id"""

    def test_verified_record_for_session(self, make_record, request_id, polling_started_at, fixed_clock):
        record = make_record(verified=True, request_id=request_id, seconds_ago=1)

        resolution = _resolve(request_id, polling_started_at, [record], fixed_clock)

        assert resolution.state is ResolverState.VERIFIED
        assert resolution.matched_by is MatchKind.REQUEST_ID
        assert resolution.matched_record == record
        assert resolution.is_terminal

    def test_exact_match_ignores_window(self, make_record, request_id, polling_started_at, fixed_clock):
        """A record for this session settles it no matter how old it is"""
        record = make_record(verified=True, request_id=request_id, seconds_ago=600)

        resolution = _resolve(request_id, polling_started_at, [record], fixed_clock)

        assert resolution.state is ResolverState.VERIFIED

    def test_failed_attempt_keeps_waiting(self, make_record, request_id, polling_started_at, fixed_clock):
        record = make_record(verified=False, request_id=request_id, seconds_ago=1)

        resolution = _resolve(request_id, polling_started_at, [record], fixed_clock)

        assert resolution.state is ResolverState.WAITING
        assert resolution.failed_attempt == record
        assert not resolution.is_terminal

    def test_retry_after_failure(self, make_record, request_id, polling_started_at, fixed_clock):
        failed = make_record(verified=False, request_id=request_id, seconds_ago=2)
        verified = make_record(verified=True, request_id=request_id, seconds_ago=1)

        resolution = _resolve(request_id, polling_started_at, [failed, verified], fixed_clock)

        assert resolution.state is ResolverState.VERIFIED
        assert resolution.matched_record == verified

    def test_other_session_never_attributed(self, make_record, request_id, polling_started_at, fixed_clock):
        other = make_record(verified=True, request_id=RequestId(value="req_other"), seconds_ago=1)

        resolution = _resolve(request_id, polling_started_at, [other], fixed_clock)

        assert resolution.state is ResolverState.WAITING
        assert resolution.matched_record is None


class TestTimeWindowFallback:
    """Records without request_id"""

    def test_no_records(self, request_id, polling_started_at, fixed_clock):
        assert _resolve(request_id, polling_started_at, [], fixed_clock).state is ResolverState.WAITING

    def test_newest_verified_inside_window(self, make_record, request_id, polling_started_at, fixed_clock):
        record = make_record(verified=True, seconds_ago=2)

        resolution = _resolve(request_id, polling_started_at, [record], fixed_clock)

        assert resolution.state is ResolverState.VERIFIED
        assert resolution.matched_by is MatchKind.TIME_WINDOW
        assert resolution.ambiguity is None

    def test_newest_not_verified(self, make_record, request_id, polling_started_at, fixed_clock):
        records = [make_record(verified=True, seconds_ago=2), make_record(verified=False, seconds_ago=1)]

        assert _resolve(request_id, polling_started_at, records, fixed_clock).state is ResolverState.WAITING

    def test_record_before_polling_started(self, make_record, request_id, polling_started_at, fixed_clock):
        """A stale success from a previous session is not picked up"""
        record = make_record(verified=True, seconds_ago=4)

        assert _resolve(request_id, polling_started_at, [record], fixed_clock).state is ResolverState.WAITING

    def test_record_outside_window(self, make_record, request_id, fixed_clock):
        started = fixed_clock.now() - timedelta(seconds=60)
        record = make_record(verified=True, seconds_ago=6)

        assert _resolve(request_id, started, [record], fixed_clock).state is ResolverState.WAITING

    def test_window_boundary_is_inclusive(self, make_record, request_id, fixed_clock):
        started = fixed_clock.now() - timedelta(seconds=60)
        record = make_record(verified=True, seconds_ago=5)

        assert _resolve(request_id, started, [record], fixed_clock).state is ResolverState.VERIFIED

    def test_only_newest_record_considered(self, make_record, request_id, polling_started_at, fixed_clock):
        """An id-carrying record for another session hides older id-less ones"""
        records = [
            make_record(verified=True, seconds_ago=2),
            make_record(verified=True, request_id=RequestId(value="req_other"), seconds_ago=1),
        ]

        assert _resolve(request_id, polling_started_at, records, fixed_clock).state is ResolverState.WAITING

    def test_ambiguity_flagged(self, make_record, request_id, polling_started_at, fixed_clock):
        records = [make_record(verified=True, seconds_ago=2), make_record(verified=True, seconds_ago=1)]

        resolution = _resolve(request_id, polling_started_at, records, fixed_clock)

        assert resolution.state is ResolverState.VERIFIED
        assert resolution.matched_record == records[1]
        assert resolution.ambiguity is not None
        assert resolution.ambiguity.candidates == 2

    def test_input_order_does_not_matter(self, make_record, request_id, polling_started_at, fixed_clock):
        older_failed = make_record(verified=False, seconds_ago=2)
        newer_verified = make_record(verified=True, seconds_ago=1)

        forward = _resolve(request_id, polling_started_at, [older_failed, newer_verified], fixed_clock)
        backward = _resolve(request_id, polling_started_at, [newer_verified, older_failed], fixed_clock)

        assert forward.state is backward.state is ResolverState.VERIFIED


class TestAge18Scenario:
    """Provider asks for age >= 18; the holder proves it; the next poll resolves"""

    def test_resolves_on_next_poll(self, make_record, request_id, fixed_clock):
        polling_started_at = fixed_clock.now()
        assert _resolve(request_id, polling_started_at, [], fixed_clock).state is ResolverState.WAITING

        fixed_clock.advance(1.0)
        record = make_record(verified=True)
        fixed_clock.advance(1.0)

        resolution = _resolve(request_id, polling_started_at, [record], fixed_clock)

        assert resolution.state is ResolverState.VERIFIED
        assert resolution.matched_record.predicate_human_readable == "age >= 18"
