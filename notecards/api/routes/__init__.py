"""
API route modules.

Import all route modules here for easy access.
"""

from notecards.api.routes import config, content

__all__ = ["config", "content"]
