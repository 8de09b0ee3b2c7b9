"""
Access policy for mutating procedures.

Reads are never gated. Every create/update/delete calls ``ensure_can_mutate``
before touching the store, so swapping the policy object (e.g. for per-user
auth) does not require changes to the procedures themselves.
"""

from typing import Protocol, runtime_checkable

from notecards.core.exceptions import MutationForbiddenError
from notecards.core.logging import get_logger

logger = get_logger(__name__)


@runtime_checkable
class AccessPolicy(Protocol):
    """Capability check consulted before every mutation."""

    denial_reason: str

    def can_mutate(self) -> bool:
        ...


class PublicModePolicy:
    """
    Read-only deployment switch.

    The flag is fixed at construction (read once from settings at startup),
    never re-read per request.
    """

    denial_reason = "This action is not available in public mode"

    def __init__(self, is_public: bool):
        self._is_public = bool(is_public)

    @property
    def is_public(self) -> bool:
        return self._is_public

    def can_mutate(self) -> bool:
        return not self._is_public

    def __repr__(self) -> str:
        return f"PublicModePolicy(is_public={self._is_public})"


def ensure_can_mutate(policy: AccessPolicy, action: str) -> None:
    """
    Guard a mutating procedure.

    Args:
        policy: The active access policy
        action: Procedure name, for the log entry

    Raises:
        MutationForbiddenError: If the policy denies mutation
    """
    if policy.can_mutate():
        return

    logger.warning("mutation_forbidden", action=action, policy=repr(policy))
    raise MutationForbiddenError(policy.denial_reason)
