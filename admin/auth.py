import hmac

from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request
from core.config import settings


class AdminAuth(AuthenticationBackend):
    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = str(form.get("username") or "")
        password = str(form.get("password") or "")

        if not settings.ADMIN_PASSWORD:
            return False

        if (hmac.compare_digest(username, settings.ADMIN_USERNAME)
                and hmac.compare_digest(password, settings.ADMIN_PASSWORD)):
            request.session["admin"] = True
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get("admin", False))
