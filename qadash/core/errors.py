"""
Error taxonomy.

Services raise these; the API layer maps each class to one HTTP status and
an ``{"error": message}`` body. Anything outside this hierarchy is treated
as an internal error.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(DashboardError):
    """Missing, invalid or expired credentials. The client must log in again."""

    status_code = 401


class PermissionDenied(DashboardError):
    """Authenticated, but the rule does not allow this action."""

    status_code = 403


class ValidationError(DashboardError):
    """Malformed or missing input."""

    status_code = 400


class ConflictError(DashboardError):
    """Duplicate email or employee id."""

    status_code = 409


class NotFoundError(DashboardError):
    """Unknown record id or account."""

    status_code = 404
