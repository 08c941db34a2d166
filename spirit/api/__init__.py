"""
spirit.api: HTTP routers

Exports:
  health_router      : GET / liveness route
  invites_router     : invite minting (admin) and redemption (public)
  chat_router        : Spirit chat passthrough
  reflections_router : reflection logging and admin read-back
"""

from spirit.api.health import router as health_router
from spirit.api.invites import router as invites_router
from spirit.api.chat import router as chat_router
from spirit.api.reflections import router as reflections_router

__all__ = [
    "health_router",
    "invites_router",
    "chat_router",
    "reflections_router",
]
