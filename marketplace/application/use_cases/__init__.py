# marketplace/application/use_cases/__init__.py (async version)

"""
Application use cases.
"""

from marketplace.application.use_cases.auth_use_cases import AsyncAuthService

__all__ = [
    "AsyncAuthService",
]
