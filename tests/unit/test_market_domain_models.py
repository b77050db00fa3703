import pytest

from src.pm_common.enums import MarketPhase, MarketStatus, Side
from src.pm_common.errors import (
    AlreadyResolvedError,
    InvalidParameterError,
    MarketNotEndedError,
)
from src.pm_market.domain.models import Market


def _make_market(**overrides) -> Market:
    defaults = dict(id=0, start_price=50_000, start_block=10, end_block=20)
    defaults.update(overrides)
    return Market(**defaults)


class TestPhase:
    def test_pending_before_start(self) -> None:
        assert _make_market().phase_at(9) == MarketPhase.PENDING

    def test_open_at_start_block(self) -> None:
        assert _make_market().phase_at(10) == MarketPhase.OPEN

    def test_open_just_before_end(self) -> None:
        assert _make_market().phase_at(19) == MarketPhase.OPEN

    def test_closed_at_end_block(self) -> None:
        assert _make_market().phase_at(20) == MarketPhase.CLOSED

    def test_resolved_overrides_block(self) -> None:
        m = _make_market()
        m.resolve(51_000, 25)
        assert m.phase_at(25) == MarketPhase.RESOLVED


class TestStakeTotals:
    def test_add_stake_per_side(self) -> None:
        m = _make_market()
        m.add_stake(Side.UP, 1_000_000)
        m.add_stake(Side.DOWN, 3_000_000)
        assert m.total_up_stake == 1_000_000
        assert m.total_down_stake == 3_000_000
        assert m.total_stake == 4_000_000
        assert m.stake_on(Side.UP) == 1_000_000
        assert m.stake_on(Side.DOWN) == 3_000_000

    def test_totals_frozen_after_resolve(self) -> None:
        m = _make_market()
        m.resolve(51_000, 20)
        with pytest.raises(AlreadyResolvedError):
            m.add_stake(Side.UP, 1)


class TestResolve:
    def test_up_wins_on_strict_increase(self) -> None:
        m = _make_market()
        m.resolve(50_001, 20)
        assert m.status == MarketStatus.RESOLVED
        assert m.resolved
        assert m.end_price == 50_001
        assert m.resolved_block == 20
        assert m.winning_side == Side.UP

    def test_tie_resolves_down(self) -> None:
        m = _make_market()
        m.resolve(50_000, 20)
        assert m.winning_side == Side.DOWN

    def test_drop_resolves_down(self) -> None:
        m = _make_market()
        m.resolve(49_999, 20)
        assert m.winning_side == Side.DOWN

    def test_unresolved_has_no_winner(self) -> None:
        assert _make_market().winning_side is None

    def test_before_end_block_rejected(self) -> None:
        m = _make_market()
        with pytest.raises(MarketNotEndedError):
            m.resolve(51_000, 19)
        assert not m.resolved

    def test_second_resolve_rejected(self) -> None:
        m = _make_market()
        m.resolve(51_000, 20)
        with pytest.raises(AlreadyResolvedError):
            m.resolve(40_000, 21)
        assert m.end_price == 51_000

    def test_non_positive_price_rejected(self) -> None:
        m = _make_market()
        with pytest.raises(InvalidParameterError):
            m.resolve(0, 20)
