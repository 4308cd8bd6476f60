from __future__ import annotations

import json
from typing import Optional

import requests

from ..core.domain.exceptions import DeliveryError
from ..core.domain.models import DeliveryOutcome, ReportBundle


DEFAULT_HOST = "reshift.softwaresecured.com"
DEFAULT_PORT = 443
DEFAULT_ENDPOINT_PATH = "/api/v1/reports"


class TransportClient:
    """Delivers a bundle to the remote collector over HTTPS.

    One POST per call, authenticated with a bearer token. The token only ever
    goes into the Authorization header; it is not logged or kept.
    """

    def __init__(
        self,
        *,
        default_host: str = DEFAULT_HOST,
        default_port: int = DEFAULT_PORT,
        endpoint_path: str = DEFAULT_ENDPOINT_PATH,
        timeout: Optional[float] = None,
    ) -> None:
        self._default_host = default_host
        self._default_port = default_port
        self._endpoint_path = endpoint_path if endpoint_path.startswith("/") else f"/{endpoint_path}"
        self._timeout = timeout

    def url_for(self, host: Optional[str] = None, port: Optional[int] = None) -> str:
        return f"https://{host or self._default_host}:{port or self._default_port}{self._endpoint_path}"

    def deliver(
        self,
        bundle: ReportBundle,
        *,
        token: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> DeliveryOutcome:
        url = self.url_for(host, port)
        try:
            payload = json.dumps(bundle, ensure_ascii=False).encode("utf-8")
        except UnicodeEncodeError as e:
            raise DeliveryError(url, f"bundle is not valid UTF-8: {e.reason}") from e
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        try:
            resp = requests.post(url, data=payload, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise DeliveryError(url, type(e).__name__) from e

        if not resp.ok:
            raise DeliveryError(url, resp.reason or "rejected", status_code=resp.status_code)
        return DeliveryOutcome(url=url, status_code=resp.status_code, body=resp.text)
