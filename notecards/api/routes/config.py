"""
Deployment configuration endpoints.

Lets the dashboard hide add/edit/delete controls when the deployment is in
public (read-only) mode, instead of discovering it through 403s.
"""

from fastapi import APIRouter

from notecards.api.deps import AccessPolicyDep
from notecards.schemas.content import PublicModeFeaturesResponse, PublicModeResponse

router = APIRouter(prefix="/config", tags=["Config"])


@router.get(
    "/public-mode",
    response_model=PublicModeResponse,
    summary="Public mode flags",
)
async def public_mode(policy: AccessPolicyDep) -> PublicModeResponse:
    allowed = policy.can_mutate()
    return PublicModeResponse(
        is_public=not allowed,
        features=PublicModeFeaturesResponse(
            add_content=allowed,
            edit_content=allowed,
            delete_content=allowed,
        ),
    )
