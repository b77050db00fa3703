import pytest

from src.pm_settlement.domain.payout import ClaimBreakdown, calc_fee, compute_claim


class TestCalcFee:
    def test_two_percent(self) -> None:
        assert calc_fee(4_000_000, 2) == 80_000

    def test_floors(self) -> None:
        # 1_333_333 * 2 / 100 = 26_666.66
        assert calc_fee(1_333_333, 2) == 26_666

    def test_zero_percent(self) -> None:
        assert calc_fee(4_000_000, 0) == 0

    def test_hundred_percent(self) -> None:
        assert calc_fee(4_000_000, 100) == 4_000_000

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            calc_fee(100, 101)
        with pytest.raises(ValueError):
            calc_fee(100, -1)


class TestComputeClaim:
    def test_two_sided_pool(self) -> None:
        # 1M UP vs 3M DOWN, UP wins: winner takes the whole 4M pool
        result = compute_claim(1_000_000, 4_000_000, 1_000_000, 2)
        assert result == ClaimBreakdown(gross_share=4_000_000, fee=80_000, payout=3_920_000)

    def test_one_sided_pool_returns_stake_minus_fee(self) -> None:
        result = compute_claim(2_000_000, 2_000_000, 2_000_000, 2)
        assert result.gross_share == 2_000_000
        assert result.fee == 40_000
        assert result.payout == 1_960_000

    def test_truncation_dust(self) -> None:
        # three 1M winners share 4_000_001
        result = compute_claim(1_000_000, 4_000_001, 3_000_000, 2)
        assert result.gross_share == 1_333_333
        assert result.fee == 26_666
        assert result.payout == 1_306_667
        assert 4_000_001 - 3 * result.gross_share == 2

    def test_payout_plus_fee_is_gross(self) -> None:
        result = compute_claim(1_234_567, 9_876_543, 3_333_333, 7)
        assert result.payout + result.fee == result.gross_share

    def test_no_overflow_on_large_amounts(self) -> None:
        big = 10**30
        result = compute_claim(big, 3 * big, big, 0)
        assert result.gross_share == 3 * big

    def test_rejects_non_positive_stake(self) -> None:
        with pytest.raises(ValueError):
            compute_claim(0, 100, 100, 2)

    def test_rejects_winning_stake_below_own_stake(self) -> None:
        with pytest.raises(ValueError):
            compute_claim(100, 500, 50, 2)

    def test_rejects_total_below_winning(self) -> None:
        with pytest.raises(ValueError):
            compute_claim(100, 100, 200, 2)
