# Application Scheduling Package
from .scheduler import (
    compute_next_interval,
    compute_updated_difficulty,
    count_due,
    is_due,
    review_card,
)

__all__ = [
    "compute_next_interval",
    "compute_updated_difficulty",
    "count_due",
    "is_due",
    "review_card",
]
