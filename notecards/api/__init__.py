"""
API routes initialization.

This module aggregates all API routers and provides a single router
to include in the main application.
"""

from fastapi import APIRouter

from notecards.api.routes import config, content

# Create main API router
api_router = APIRouter()

# Content procedures (listAll, getById, getByType, create, update, delete)
api_router.include_router(content.router)

# Deployment flags the dashboard needs before rendering
api_router.include_router(config.router)
