# marketplace/adapters/outbound/persistence/models/__init__.py

"""
SQLAlchemy models of the credential store.
"""

from marketplace.adapters.outbound.persistence.models.base_model import Base
from marketplace.adapters.outbound.persistence.models.user_model import User

__all__ = [
    "Base",
    "User",
]
