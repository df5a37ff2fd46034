# marketplace/adapters/outbound/persistence/repositories/__init__.py (async version)

"""
Repositories of the credential store.
"""

from marketplace.adapters.outbound.persistence.repositories.user_repository import (
    AsyncUserRepository,
    user_repository,
)

__all__ = [
    "AsyncUserRepository",
    "user_repository",
]
