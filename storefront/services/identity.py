# storefront/services/identity.py
from dataclasses import dataclass

from fastapi import Request

from storefront.repos.storage import Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

USER_HEADER = "X-User-Id"


@dataclass(frozen=True)
class CurrentUser:
    id: int
    is_admin: bool = False


class HeaderIdentityProvider:
    """
    Tozsamosc dostarcza brama przed API (logowanie, sesje, hasla sa poza tym serwisem).
    Brama ustawia naglowek X-User-Id, tu tylko sprawdzamy czy taki user istnieje.
    """

    def __init__(self, storage: Storage):
        self.users = storage.users

    def current_user(self, request: Request) -> CurrentUser | None:
        raw = request.headers.get(USER_HEADER)
        if not raw:
            return None

        try:
            user_id = int(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed {USER_HEADER} header")
            return None

        user = self.users.get_user(user_id)
        if not user:
            return None

        return CurrentUser(id=user.id, is_admin=bool(user.is_admin))
