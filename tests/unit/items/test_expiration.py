"""
cachebridge — Expiration Normalization Tests
"""

from datetime import UTC, datetime, timedelta

import pytest

from cachebridge.errors import InvalidArgumentError
from cachebridge.items import expiration
from cachebridge.items.expiration import AbsoluteTime, NoExpiry, RelativeDuration

from tests.helpers import FROZEN_NOW, Clock


class TestVariants:
    """Mapping raw arguments onto the three expiration variants."""

    def test_absolute_accepts_datetime(self) -> None:
        when = datetime(2030, 1, 1, tzinfo=UTC)
        assert expiration.absolute(when) == AbsoluteTime(when)

    def test_absolute_accepts_none(self) -> None:
        assert expiration.absolute(None) == NoExpiry()

    @pytest.mark.parametrize("value", [1893456000, "2030-01-01", timedelta(seconds=5), 1.5])
    def test_absolute_rejects_other_types(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            expiration.absolute(value)

        assert type(value).__name__ in str(exc_info.value)
        assert exc_info.value.details["type"] == type(value).__name__

    def test_relative_accepts_int_timedelta_and_none(self) -> None:
        assert expiration.relative(60) == RelativeDuration(60)
        assert expiration.relative(timedelta(minutes=2)) == RelativeDuration(120)
        assert expiration.relative(None) == NoExpiry()

    @pytest.mark.parametrize("value", [True, 1.5, "60", [60]])
    def test_relative_rejects_other_types(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            expiration.relative(value)

        message = str(exc_info.value)
        assert repr(value) in message
        assert type(value).__name__ in message

    def test_invalid_argument_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            expiration.relative("soon")


class TestResolve:
    def test_absolute_resolves_to_epoch_seconds(self) -> None:
        when = datetime(2030, 1, 1, tzinfo=UTC)
        assert expiration.resolve(AbsoluteTime(when)) == 1893456000

    def test_relative_is_added_to_now(self, clock: Clock) -> None:
        assert expiration.resolve(RelativeDuration(3600)) == FROZEN_NOW + 3600

    def test_relative_with_explicit_current(self) -> None:
        assert expiration.resolve(RelativeDuration(10), current=100) == 110

    def test_no_expiry_resolves_to_never(self) -> None:
        assert expiration.resolve(NoExpiry()) == expiration.NEVER == 0


class TestTtlFor:
    def test_never_maps_to_zero_ttl(self, clock: Clock) -> None:
        assert expiration.ttl_for(expiration.NEVER) == 0

    def test_remaining_seconds(self, clock: Clock) -> None:
        assert expiration.ttl_for(FROZEN_NOW + 90) == 90

    def test_past_timestamp_is_not_positive(self, clock: Clock) -> None:
        assert expiration.ttl_for(FROZEN_NOW - 5) == -5
