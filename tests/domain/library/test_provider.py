"""Tests for provider state and value coercion helpers."""

import pytest

from camelot_sort.domain.library.provider import (
    ProviderConfig,
    ProviderState,
    parse_duration_ms,
    parse_tempo,
)


class TestProviderState:
    """ProviderState is never mutated in place."""

    def test_with_authenticated_returns_new_state(self) -> None:
        state = ProviderState(config=ProviderConfig(name="spotify"))
        new_state = state.with_authenticated(True)

        assert new_state.authenticated is True
        assert state.authenticated is False

    def test_with_cache_merges(self) -> None:
        state = ProviderState(config=ProviderConfig(name="spotify"), cache={"a": 1})
        new_state = state.with_cache(b=2)

        assert new_state.cache == {"a": 1, "b": 2}
        assert state.cache == {"a": 1}


class TestParseDuration:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (200000, 200000),
            ("200000", 200000),
            (215, 215000),
            (3.5, 3500),
            (0, None),
            (-1, None),
            (None, None),
            (True, None),
            ("abc", None),
        ],
    )
    def test_values(self, value, expected) -> None:
        assert parse_duration_ms(value) == expected


class TestParseTempo:
    @pytest.mark.parametrize(
        "value,expected",
        [(120, 120.0), ("98.5", 98.5), (0, None), (-5, None), ("", None), (None, None), (False, None)],
    )
    def test_values(self, value, expected) -> None:
        assert parse_tempo(value) == expected
