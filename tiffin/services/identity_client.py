# tiffin/services/identity_client.py
from dataclasses import dataclass

import requests

from tiffin.utils.retry import http_retry
from tiffin.utils.settings import IDENTITY_SERVICE_URL
from tiffin.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    uid: str
    email: str | None = None


class IdentityClient:
    """
    Klient zewnetrznego dostawcy tozsamosci.
    Zamienia bearer token na uzytkownika (uid, email), reszta to czarna skrzynka.
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or IDENTITY_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def verify_token(self, token: str) -> CurrentUser | None:
        url = f"{self.base_url}/tokens/verify"
        logger.info(f"IdentityClient POST {url}")

        resp = requests.post(url, json={"token": token}, timeout=self.timeout)

        #4xx to zly token, nie blad sieci - nie ponawiamy
        if 400 <= resp.status_code < 500:
            logger.info(f"IdentityClient rejected token ({resp.status_code})")
            return None

        resp.raise_for_status()
        data = resp.json()
        return CurrentUser(uid=data["uid"], email=data.get("email"))
