# storefront/domain/errors.py
"""
Bledy domenowe sklepu.

Each error also subclasses the builtin that the routers already know how to
translate, so ``except PermissionError`` still catches ``Forbidden``.
"""


class StorefrontError(Exception):
    """Base class for expected, caller-recoverable errors."""


class NotFound(StorefrontError, LookupError):
    pass


class Forbidden(StorefrontError, PermissionError):
    pass


class Unauthenticated(StorefrontError, PermissionError):
    pass


class InvalidVariant(StorefrontError, ValueError):
    pass


class InvalidQuantity(StorefrontError, ValueError):
    pass


class OutOfStock(StorefrontError, ValueError):
    pass


class EmptyCart(StorefrontError, ValueError):
    pass


class InvalidStatusTransition(StorefrontError, ValueError):
    pass


class Conflict(StorefrontError, ValueError):
    pass


class LockTimeout(StorefrontError, RuntimeError):
    pass


class InvalidPayment(StorefrontError, ValueError):
    pass
