# marketplace/domain/exceptions.py

"""
Domain exceptions for the marketplace.

Every exception carries an ``internal_code`` that the exception middleware
translates into an HTTP status code. The domain layer stays free of any
web framework import.
"""

from typing import Optional


class DomainException(Exception):
    """Base class for every exception raised by the application."""

    default_detail = "Application error"
    internal_code = "DOMAIN_ERROR"

    def __init__(self, detail: Optional[str] = None, internal_code: Optional[str] = None):
        self.detail = detail or self.default_detail
        if internal_code:
            self.internal_code = internal_code
        super().__init__(self.detail)


########################################################################
# Conflict (409)
########################################################################

class ResourceAlreadyExistsException(DomainException):
    """Resource already exists."""

    default_detail = "Resource already exists"
    internal_code = "RESOURCE_ALREADY_EXISTS"


class DuplicateEmailException(ResourceAlreadyExistsException):
    default_detail = "Email already registered"
    internal_code = "DUPLICATE_EMAIL"


class DuplicateUsernameException(ResourceAlreadyExistsException):
    default_detail = "Username already taken"
    internal_code = "DUPLICATE_USERNAME"


########################################################################
# Authentication (401) and authorization (403)
########################################################################

class InvalidCredentialsException(DomainException):
    """
    Credentials or session token rejected.

    The default message is deliberately generic so that an unknown email
    and a wrong password produce identical responses.
    """

    default_detail = "Invalid credentials"
    internal_code = "INVALID_CREDENTIALS"


class AccountNotActiveException(DomainException):
    """Authenticated, but the account is suspended or banned."""

    default_detail = "Account is not active"
    internal_code = "ACCOUNT_NOT_ACTIVE"


########################################################################
# Not found (404)
########################################################################

class UserNotFoundException(DomainException):
    default_detail = "User not found"
    internal_code = "USER_NOT_FOUND"


########################################################################
# Dependency failures (500)
########################################################################

class DependencyException(DomainException):
    """
    A store, cache, signer or external service failed.

    ``detail`` is safe to return to clients; the text of ``original_error``
    only appears in ``str(exc)``, for logs.
    """

    default_detail = "Internal server error"
    internal_code = "DEPENDENCY_ERROR"

    def __init__(self, detail: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(detail)
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error is not None:
            return f"{self.detail}: {self.original_error}"
        return self.detail


class DatabaseOperationException(DependencyException):
    default_detail = "Error executing database operation"
    internal_code = "DATABASE_OPERATION_ERROR"


class CacheOperationException(DependencyException):
    default_detail = "Error executing session cache operation"
    internal_code = "CACHE_OPERATION_ERROR"


class PasswordHashingException(DependencyException):
    default_detail = "Failed to process password"
    internal_code = "PASSWORD_HASHING_ERROR"


class TokenSigningException(DependencyException):
    default_detail = "Failed to generate token"
    internal_code = "TOKEN_SIGNING_ERROR"


class KeyVerificationException(DependencyException):
    default_detail = "Error verifying API key"
    internal_code = "KEY_VERIFICATION_ERROR"
