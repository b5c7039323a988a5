"""
Session Management Use Cases

Listing, revocation and housekeeping of issued sessions.
"""

from .revoke_sessions_use_case import RevokeSessionsUseCase
from .list_sessions_use_case import ListSessionsUseCase
from .reconcile_sessions_use_case import ReconcileSessionsUseCase

__all__ = [
    "RevokeSessionsUseCase",
    "ListSessionsUseCase",
    "ReconcileSessionsUseCase",
]
