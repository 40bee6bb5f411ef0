from decimal import Decimal

import pytest

from services.imports.policies import (
    UnitLayout,
    estimate_layout_from_rent,
    single_unit_layout,
)


@pytest.mark.parametrize(
    "rent, expected",
    [
        ("500", UnitLayout(1, 1, 650)),
        ("799.99", UnitLayout(1, 1, 650)),
        ("800", UnitLayout(2, 1, 850)),
        ("899", UnitLayout(2, 1, 850)),
        ("900", UnitLayout(2, 2, 850)),
        ("1199", UnitLayout(2, 2, 850)),
        ("1200", UnitLayout(3, 2, 1100)),
        ("2500", UnitLayout(3, 2, 1100)),
    ],
)
def test_estimate_layout_thresholds(rent, expected):
    assert estimate_layout_from_rent(Decimal(rent)) == expected


def test_single_unit_layout_ignores_rent():
    assert single_unit_layout(Decimal("5000")) == UnitLayout(1, 1, None)
