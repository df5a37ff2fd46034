# marketplace/domain/__init__.py

"""
Domain layer: entities, value types, exceptions and pure services.
"""

from marketplace.domain.exceptions import (
    DomainException,
    ResourceAlreadyExistsException,
    DuplicateEmailException,
    DuplicateUsernameException,
    InvalidCredentialsException,
    AccountNotActiveException,
    UserNotFoundException,
    DependencyException,
    DatabaseOperationException,
    CacheOperationException,
    PasswordHashingException,
    TokenSigningException,
    KeyVerificationException,
)
