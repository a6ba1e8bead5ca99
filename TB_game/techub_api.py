"""
Client for the TecHub content API (fighters + ruleset).

Every call goes through `_request`, which retries 5xx / network failures
with a linear backoff and gives up immediately on 4xx.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class TechubAPIError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class TechubAPI:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 max_retries: Optional[int] = None, retry_delay: Optional[float] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.base_url = (base_url or settings.TECHUB_API_BASE_URL).rstrip("/")
        self.timeout = settings.TECHUB_API_TIMEOUT if timeout is None else timeout
        self.max_retries = max(1, settings.TECHUB_API_MAX_RETRIES if max_retries is None else max_retries)
        self.retry_delay = settings.TECHUB_API_RETRY_DELAY if retry_delay is None else retry_delay
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self._sleep = sleep

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        last_error = None

        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
                resp.raise_for_status()
                return resp.json()
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status is not None and status < 500:
                    raise TechubAPIError(f"{method} {path} failed: {status}", status=status) from e
                last_error = TechubAPIError(f"{method} {path} failed: {status}", status=status)
            except (requests.RequestException, ValueError) as e:
                last_error = TechubAPIError(f"{method} {path} failed: {e}")

            logger.warning("API attempt %d/%d failed: %s", attempt, self.max_retries, last_error)
            if attempt < self.max_retries:
                self._sleep(self.retry_delay * attempt)

        raise last_error

    # ---------- endpoints ----------

    def get_game_data(self) -> dict:
        return self._request("GET", "/game-data/all")

    def get_fighter(self, login: str) -> dict:
        return self._request("GET", f"/profiles/{login}/card")

    def get_battle_ready_profiles(self) -> List[dict]:
        data = self._request("GET", "/profiles/battle-ready")
        return data.get("profiles") or []

    def record_battle(self, challenger_id: int, opponent_id: int, winner_id: int) -> dict:
        if not settings.TECHUB_RECORD_BATTLES:
            logger.debug("battle recording disabled, skipping")
            return {"success": True, "message": "Recording disabled: battle not sent"}

        return self._request("POST", "/battles", json={
            "challenger_id": challenger_id,
            "opponent_id": opponent_id,
            "winner_id": winner_id,
        })
