"""
Service dependencies for the content routes.

Each request gets a ContentProcedures built from the request's database
session and the process-wide access policy stored on ``app.state``.
Tests override ``get_content_store`` to run the routes against an
in-memory store.
"""

from typing import Annotated

from fastapi import Depends, Request

from notecards.core.access import AccessPolicy
from notecards.db.deps import DBSession
from notecards.services.content_procedures import ContentProcedures, get_content_procedures
from notecards.services.content_store import ContentStore, SQLAlchemyContentStore


def get_access_policy(request: Request) -> AccessPolicy:
    return request.app.state.access_policy


def get_content_store(request: Request, db: DBSession) -> ContentStore:
    return SQLAlchemyContentStore(
        db,
        timeout=request.app.state.settings.DB_COMMAND_TIMEOUT_SECONDS,
    )


def get_procedures(
    store: Annotated[ContentStore, Depends(get_content_store)],
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
) -> ContentProcedures:
    return get_content_procedures(store, policy)


Procedures = Annotated[ContentProcedures, Depends(get_procedures)]
AccessPolicyDep = Annotated[AccessPolicy, Depends(get_access_policy)]
