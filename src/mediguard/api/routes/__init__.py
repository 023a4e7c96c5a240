"""API routes"""

from mediguard.api.routes import hospital, provider

__all__ = ["hospital", "provider"]
