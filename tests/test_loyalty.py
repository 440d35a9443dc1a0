import pytest

from orderflow.loyalty import calculate_loyalty_points, update_loyalty_points
from orderflow.types import User


@pytest.mark.parametrize(
    "total,tier,expected",
    [
        (103.80, "premium", 10),
        (103.80, "regular", 5),
        (103.80, "PREMIUM", 10),
        (103.80, "gold", 5),
        (103.80, None, 5),
        (9.99, "premium", 0),
        (20.0, "regular", 1),
    ],
)
def test_calculate_loyalty_points(total, tier, expected):
    assert calculate_loyalty_points(total, tier) == expected


def test_update_starts_from_zero_when_balance_missing():
    user = User(id="u1", status="active", tier="regular")

    assert update_loyalty_points(user, 7) == 7
    assert user.loyalty_points == 7


def test_update_adds_to_existing_balance():
    user = User(id="u1", status="active", tier="regular", loyalty_points=40)

    update_loyalty_points(user, 5)
    update_loyalty_points(user, 0)

    assert user.loyalty_points == 45
