from .auth import router as auth_router
from .files import router as files_router
from .mail import router as mail_router
from .payments import router as payments_router
from .system import router as system_router

_routers = [system_router, auth_router, files_router, payments_router, mail_router]

__all__ = ["get_routers"]


def get_routers():
    return _routers
