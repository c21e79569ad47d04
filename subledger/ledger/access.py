"""
Owner gate: check_owner(owner, caller) -> AuthorizationResult.
Pure function, no I/O. Every privileged operation goes through require_owner.
"""
from __future__ import annotations

import logging

from subledger.ledger.errors import NotOwner
from subledger.ledger.models import AuthorizationResult

logger = logging.getLogger(__name__)


def check_owner(owner: str, caller: str) -> AuthorizationResult:
    return AuthorizationResult(allowed=caller == owner, caller=caller, owner=owner)


def require_owner(owner: str, caller: str, operation: str) -> AuthorizationResult:
    """Return the allowed result or raise NotOwner."""
    result = check_owner(owner, caller)
    if not result.allowed:
        logger.warning("owner_check_failed", extra={"identity": caller, "operation": operation})
        raise NotOwner()
    return result
