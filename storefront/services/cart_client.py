# storefront/services/cart_client.py
from typing import Any, Dict, List

import requests

from storefront.api.errors import ERROR_CODE_HEADER
from storefront.domain import errors
from storefront.services.guest_cart import CartStore, LocalCart
from storefront.services.identity import USER_HEADER
from storefront.utils.retry import connect_retry, http_retry
from storefront.utils.settings import STOREFRONT_API_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _raise_for_status(resp: requests.Response) -> None:
    if resp.status_code < 400:
        return

    try:
        detail = resp.json().get("detail", resp.text)
    except ValueError:
        detail = resp.text

    # API odsyla nazwe bledu domenowego w naglowku, odtwarzamy ten sam wyjatek
    error = getattr(errors, resp.headers.get(ERROR_CODE_HEADER, ""), None)
    if isinstance(error, type) and issubclass(error, errors.StorefrontError):
        raise error(detail)
    resp.raise_for_status()


class RemoteCart(CartStore):
    """Koszyk zalogowanego usera, kazda operacja idzie do API (/cart)."""

    def __init__(
        self,
        user_id: int,
        base_url: str | None = None,
        timeout: int = 2,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers[USER_HEADER] = str(user_id)

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"RemoteCart {method} {url}")
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        _raise_for_status(resp)
        return resp

    @http_retry()
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        # GET, PUT (ilosc absolutna), DELETE - powtorzenie nie zmienia stanu koszyka
        return self._send(method, path, **kwargs)

    @connect_retry()
    def _post(self, path: str, **kwargs) -> requests.Response:
        # POST dodaje ilosci, powtarzamy tylko gdy zadanie nie dotarlo do serwera
        return self._send("POST", path, **kwargs)

    def add_item(self, product, quantity, size, color) -> Dict[str, Any]:
        body = {"product_id": product["id"], "quantity": quantity, "size": size, "color": color}
        return self._post("/cart/items", json=body).json()

    def update_quantity(self, item_id, quantity) -> Dict[str, Any]:
        return self._request("PUT", f"/cart/items/{item_id}", json={"quantity": quantity}).json()

    def remove_item(self, item_id) -> None:
        self._request("DELETE", f"/cart/items/{item_id}")

    def clear(self) -> None:
        self._request("DELETE", "/cart")

    def list_items(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/cart").json()

    def merge_from(self, guest: LocalCart) -> List[Dict[str, Any]]:
        """Po zalogowaniu: koszyk goscia trafia na serwer, lokalny jest czyszczony."""
        items = self._post("/cart/merge", json=guest.to_merge_payload()).json()
        guest.clear()
        return items
