from __future__ import annotations

import math
from typing import Optional

from .types import Tier, User

PREMIUM_MULTIPLIER = 10
REGULAR_MULTIPLIER = 20


def calculate_loyalty_points(total: float, user_type: Optional[str]) -> int:
    """One point per 10 spent for premium users, per 20 for everyone else."""
    tier = Tier.from_tag(user_type, ignore_case=True)
    multiplier = PREMIUM_MULTIPLIER if tier is Tier.PREMIUM else REGULAR_MULTIPLIER
    return math.floor(total / multiplier)


def update_loyalty_points(user: User, points: int) -> int:
    user.loyalty_points = (user.loyalty_points or 0) + points
    return user.loyalty_points
