# Domain Scheduling Package
from .models import Card, PlainCard, ReviewResult, ScheduledCard

__all__ = ["Card", "PlainCard", "ScheduledCard", "ReviewResult"]
