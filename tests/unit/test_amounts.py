import pytest

from src.pm_common.amounts import MICRO_PER_UNIT, amount_to_display, floor_div


class TestFloorDiv:
    def test_exact(self) -> None:
        assert floor_div(4_000_000, 4) == 1_000_000

    def test_truncates(self) -> None:
        assert floor_div(7, 2) == 3
        assert floor_div(1, 3) == 0

    def test_zero_numerator(self) -> None:
        assert floor_div(0, 5) == 0

    def test_zero_denominator_rejected(self) -> None:
        with pytest.raises(ValueError):
            floor_div(10, 0)

    def test_negative_numerator_rejected(self) -> None:
        with pytest.raises(ValueError):
            floor_div(-10, 3)


class TestAmountToDisplay:
    def test_whole_units(self) -> None:
        assert amount_to_display(3 * MICRO_PER_UNIT) == "3.000000"

    def test_fractional(self) -> None:
        assert amount_to_display(3_920_000) == "3.920000"

    def test_sub_unit(self) -> None:
        assert amount_to_display(80_000) == "0.080000"

    def test_negative(self) -> None:
        assert amount_to_display(-1_500) == "-0.001500"

    def test_thousands_separator(self) -> None:
        assert amount_to_display(1_234 * MICRO_PER_UNIT + 5) == "1,234.000005"
