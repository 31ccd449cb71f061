"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF handler translating those exceptions into responses.
transactions       Helpers for ``select_for_update`` inside ``transaction.atomic``.
access             Unit-scope resolution and queryset selectors.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.transactions import lock_for_update
    from core.domain.access import apply_unit_scope, resolve_unit_scope
"""
