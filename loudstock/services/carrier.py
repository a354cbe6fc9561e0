"""
Client Yalidine (transporteur).

Le moteur n'a besoin que d'une chose : la `product_list` d'un colis.
Le client gère l'authentification par en-têtes, le throttling minimal
entre deux appels et le suivi des quotas renvoyés par l'API.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from urllib.parse import quote

import requests

from loudstock.services.errors import CarrierError, CarrierQuotaExceeded

logger = logging.getLogger(__name__)

QUOTA_WINDOWS = ("second", "minute", "hour", "day")
DAY_QUOTA_FLOOR = 10


@dataclass
class Parcel:
    tracking: str
    product_list: str
    raw: dict = field(default_factory=dict)


class YalidineClient:
    def __init__(
        self,
        api_id: str | None,
        api_token: str | None,
        base_url: str = "https://api.yalidine.app/v1",
        timeout: float = 30.0,
        min_interval: float = 0.2,
        session: requests.Session | None = None,
    ):
        self.api_id = api_id
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.min_interval = min_interval

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "X-API-ID": api_id or "",
                "X-API-TOKEN": api_token or "",
                "Content-Type": "application/json",
            }
        )

        self.quota_left: dict[str, int | None] = {w: None for w in QUOTA_WINDOWS}
        self._last_request = 0.0
        self._lock = threading.Lock()

        if not self.is_configured():
            logger.warning("Yalidine API credentials not configured, parcel lookups disabled")

    @classmethod
    def from_settings(cls, settings) -> "YalidineClient":
        return cls(
            api_id=settings.YALIDINE_API_ID,
            api_token=settings.YALIDINE_API_TOKEN,
            base_url=settings.YALIDINE_BASE_URL,
            timeout=settings.YALIDINE_TIMEOUT,
            min_interval=settings.YALIDINE_MIN_INTERVAL,
        )

    def is_configured(self) -> bool:
        return bool(self.api_id and self.api_token)

    # ---------- quotas / throttling ----------
    def _update_quota(self, headers) -> None:
        for window in QUOTA_WINDOWS:
            value = headers.get(f"{window}-quota-left")
            if value is None:
                continue
            try:
                self.quota_left[window] = int(value)
            except (TypeError, ValueError):
                continue

        day = self.quota_left["day"]
        if day is not None and day < 100:
            logger.warning("Yalidine day quota low: %d left", day)

    def _check_quota(self) -> None:
        for window in ("second", "minute"):
            if self.quota_left[window] == 0:
                raise CarrierQuotaExceeded(f"Quota limit reached: {window} quota exhausted")
        day = self.quota_left["day"]
        if day is not None and day < DAY_QUOTA_FLOOR:
            raise CarrierQuotaExceeded(f"Quota limit reached: day quota too low ({day} remaining)")

    def _throttle(self) -> None:
        with self._lock:
            wait = self.min_interval - (time.monotonic() - self._last_request)
            if wait > 0:
                time.sleep(wait)
            self._last_request = time.monotonic()

    def _get(self, path: str) -> requests.Response:
        if not self.is_configured():
            raise CarrierError("Yalidine API credentials not configured")

        self._check_quota()
        self._throttle()

        try:
            resp = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Yalidine request failed: %s", exc)
            raise CarrierError(f"Failed to reach Yalidine: {exc}") from exc

        self._update_quota(resp.headers)
        return resp

    # ---------- colis ----------
    def get_parcel(self, tracking: str) -> Parcel:
        tracking = (tracking or "").strip()
        if not tracking:
            raise CarrierError("Tracking is required")

        # le tracking peut contenir ":" etc.
        resp = self._get(f"/parcels/{quote(tracking, safe='')}")

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        message = str(payload.get("message", "")) if isinstance(payload, dict) else ""
        if resp.status_code == 429 or "quota" in message.lower():
            raise CarrierQuotaExceeded("Quota API dépassé")

        if resp.status_code == 404:
            raise CarrierError(f"Parcel {tracking} not found")
        if not resp.ok:
            raise CarrierError(f"Failed to fetch parcel details (HTTP {resp.status_code})")

        parcel = self._unwrap(payload)
        if parcel is None:
            raise CarrierError(f"Parcel {tracking} not found")

        logger.info("Fetched parcel %s", tracking)
        return Parcel(
            tracking=str(parcel.get("tracking") or parcel.get("tracking_number") or tracking),
            product_list=str(parcel.get("product_list") or parcel.get("productList") or ""),
            raw=parcel,
        )

    @staticmethod
    def _unwrap(payload) -> dict | None:
        # GET /parcels/{tracking} renvoie {"data": [...]} ; on accepte aussi l'objet nu
        if isinstance(payload, dict) and "data" in payload:
            data = payload["data"]
            if isinstance(data, list):
                return data[0] if data else None
            return data if isinstance(data, dict) else None
        if isinstance(payload, list):
            return payload[0] if payload else None
        if isinstance(payload, dict) and payload:
            return payload
        return None
