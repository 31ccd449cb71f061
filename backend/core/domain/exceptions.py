"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────┬───────────────────────────┐
│ Domain Exception    │ HTTP │ code                      │
├─────────────────────┼──────┼───────────────────────────┤
│ DomainError         │ 400  │ validation_error          │
│ PermissionDenied    │ 403  │ forbidden                 │
│ NotFound            │ 404  │ not_found                 │
│ Conflict            │ 409  │ conflict                  │
│ InvalidTransition   │ 422  │ business_rule_violation   │
└─────────────────────┴──────┴───────────────────────────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if item.status == ItemStatus.DISPOSED:
        raise InvalidTransition(
            current=item.status,
            target=ItemStatus.DISPOSED,
            reason="Item is already disposed.",
        )
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Raised directly for input that is well-formed but unusable
    (missing unit context, missing Red Ink numbers, future-dated
    year transition).  Maps to HTTP 400.
    """

    code = "validation_error"

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The caller's unit does not own the resource being accessed.

    Maps to HTTP 403.
    """

    code = "forbidden"

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist anywhere in the store.

    Maps to HTTP 404.
    """

    code = "not_found"

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the store.

    Typical usage: duplicate mother number at creation, deleting a
    shelf that still holds items.  Maps to HTTP 409.
    """

    code = "conflict"

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(DomainError):
    """
    A lifecycle transition that is not allowed from the current status.

    Kept separate from ``Conflict`` so callers can tell a duplicate
    record apart from a rejected status change.  Maps to HTTP 422.

    Example::

        raise InvalidTransition(
            current="DISPOSED",
            target="DISPOSED",
            reason="Item is already disposed.",
        )
    """

    code = "business_rule_violation"

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            message = " ".join(parts) + "."
            if reason:
                message = f"{message} {reason}"
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason
