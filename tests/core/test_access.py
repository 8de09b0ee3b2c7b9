"""
Tests for the access policy.
"""

import pytest

from notecards.core.access import AccessPolicy, PublicModePolicy, ensure_can_mutate
from notecards.core.exceptions import MutationForbiddenError


def test_public_mode_denies_mutation():
    policy = PublicModePolicy(True)

    assert policy.is_public is True
    assert policy.can_mutate() is False


def test_private_mode_allows_mutation():
    policy = PublicModePolicy(False)

    assert policy.is_public is False
    assert policy.can_mutate() is True


def test_policy_satisfies_protocol():
    assert isinstance(PublicModePolicy(True), AccessPolicy)


def test_ensure_can_mutate_raises_forbidden():
    with pytest.raises(MutationForbiddenError) as exc_info:
        ensure_can_mutate(PublicModePolicy(True), "create")

    error = exc_info.value
    assert error.status_code == 403
    assert error.code == "forbidden"
    assert error.message == "This action is not available in public mode"


def test_ensure_can_mutate_passes_when_allowed():
    assert ensure_can_mutate(PublicModePolicy(False), "delete") is None


def test_custom_policy_is_honoured():
    class ReadOnlyForMaintenance:
        denial_reason = "Down for maintenance"

        def can_mutate(self) -> bool:
            return False

    with pytest.raises(MutationForbiddenError, match="Down for maintenance"):
        ensure_can_mutate(ReadOnlyForMaintenance(), "update")
