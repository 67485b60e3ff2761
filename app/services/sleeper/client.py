import logging
from typing import Any, Dict, List, Optional

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)


class SleeperAPIError(RuntimeError):
    """Upstream unavailable: network error, timeout, non-2xx or malformed payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _raise_with_sleeper_body(resp: requests.Response) -> None:
    # Keep the upstream body so logs show *why* Sleeper refused
    try:
        msg = resp.text[:2000]
    except Exception:
        msg = "<no-body>"
    raise SleeperAPIError(f"Sleeper error {resp.status_code} on {resp.url} :: {msg}", status_code=resp.status_code)


def sleeper_get(
    path: str,                 # e.g. "/players/nfl/trending/add"
    params: Optional[dict] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    Core Sleeper GET. Sleeper is public and unauthenticated; every failure mode
    (connect error, timeout, non-2xx, non-JSON body) surfaces as SleeperAPIError.
    """
    base = (base_url or settings.SLEEPER_API_BASE).rstrip("/")   # https://api.sleeper.app/v1
    rel = path.lstrip("/")                                        # e.g., players/nfl
    url = f"{base}/{rel}"
    getter = session.get if session is not None else requests.get

    try:
        resp = getter(url, params=dict(params or {}), timeout=timeout or settings.SLEEPER_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise SleeperAPIError(f"Sleeper request failed for {url}: {e}") from e

    if not resp.ok:
        _raise_with_sleeper_body(resp)

    try:
        return resp.json()
    except ValueError:
        _raise_with_sleeper_body(resp)


class SleeperClient:
    """The three read-only endpoints the player directory consumes."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.SLEEPER_API_BASE
        self.timeout = timeout or settings.SLEEPER_TIMEOUT_SECONDS
        self.session = session

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        return sleeper_get(path, params, base_url=self.base_url, timeout=self.timeout, session=self.session)

    def get_players(self, sport: str = "nfl") -> Dict[str, Dict[str, Any]]:
        # ~5MB dictionary keyed by player_id
        logger.info("Loading all %s players from Sleeper", sport)
        data = self._get(f"/players/{sport}")
        if not isinstance(data, dict):
            raise SleeperAPIError(f"Malformed players payload: expected object, got {type(data).__name__}")
        return data

    def get_trending(
        self,
        kind: str = "add",
        *,
        sport: str = "nfl",
        lookback_hours: int = 24,
        limit: int = 25,
    ) -> List[Dict[str, Any]]:
        if kind not in ("add", "drop"):
            raise ValueError(f"Unknown trending kind={kind!r}")
        data = self._get(
            f"/players/{sport}/trending/{kind}",
            {"lookback_hours": lookback_hours, "limit": limit},
        )
        if not isinstance(data, list):
            raise SleeperAPIError(f"Malformed trending payload: expected list, got {type(data).__name__}")
        out: List[Dict[str, Any]] = []
        for item in data:
            if not isinstance(item, dict) or not item.get("player_id"):
                continue
            try:
                count = int(item.get("count") or 0)
            except (TypeError, ValueError):
                count = 0
            out.append({"player_id": str(item["player_id"]), "count": count})
        return out

    def get_week_stats(self, season: str, week: int, *, sport: str = "nfl") -> Dict[str, Dict[str, float]]:
        data = self._get(f"/stats/{sport}/regular/{season}/{int(week)}")
        if not isinstance(data, dict):
            raise SleeperAPIError(f"Malformed stats payload: expected object, got {type(data).__name__}")
        return data
