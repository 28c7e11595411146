import os
from typing import Dict

FREE_GENERATION_LIMIT = int(os.getenv("FREE_GENERATION_LIMIT", "10"))

# Lifetime generations per plan; -1 means unlimited
PLAN_LIMITS: Dict[str, Dict[str, int]] = {
    "free": {
        "max_generations": FREE_GENERATION_LIMIT,
    },
    "pro": {
        "max_generations": -1,
    },
}

# Most recent generations kept per account; older ones are evicted on insert
HISTORY_LIMIT = 100


def get_plan_limit(plan_tier: str, limit_type: str) -> int:
    """Get the limit value for a specific plan and limit type."""
    return PLAN_LIMITS.get(plan_tier, PLAN_LIMITS["free"]).get(limit_type, 0)
