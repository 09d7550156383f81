"""SQLAlchemy ORM models."""

from demandmap.models.event import DemandEventRecord
from demandmap.models.user import User

__all__ = [
    "DemandEventRecord",
    "User",
]
