"""Survey Data API client.

A thin wrapper around the service's HTTP routes for scripts and
dashboards that consume survey records:

* :meth:`SurveyDataAPI.list_records` – fetch every record.
* :meth:`SurveyDataAPI.filter_records` – fetch records matching per‑field filters.
* :meth:`SurveyDataAPI.reseed` – reset the store to the default dataset.

Every method returns a ``(data, error)`` tuple instead of raising, so
callers can render failures without a try/except around each call.
The client uses the ``requests`` library internally.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

FILTER_FIELDS = ("age", "gender", "location", "device")


class SurveyDataAPI:
    """Client for interacting with the survey data API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:5000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``. ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``. On failure,
            ``data`` is ``None`` and ``error`` is a dictionary with keys
            ``status_code`` and ``message`` describing the issue.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Record operations
    # ------------------------------------------------------------------
    def list_records(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve every record.

        Returns:
            A tuple ``(records, error)``; ``records`` is empty on error.
        """
        data, error = self._request("GET", "/api/data")
        if error:
            return [], error
        return (data or {}).get("data", []), None

    def filter_records(
        self, **filters: Sequence[str]
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve records matching the given per‑field values.

        Keyword arguments name a field (``age``, ``gender``, ``location``
        or ``device``) and give the values it may take, e.g.
        ``filter_records(location=["Europe"], device=["Desktop"])``.
        """
        unknown = set(filters) - set(FILTER_FIELDS)
        if unknown:
            raise ValueError(f"Unknown filter fields: {', '.join(sorted(unknown))}")
        body = {"filters": {name: list(values) for name, values in filters.items()}}
        data, error = self._request("POST", "/api/data", json_body=body)
        if error:
            return [], error
        return (data or {}).get("data", []), None

    def reseed(self) -> Tuple[bool, Optional[Dict[str, Any]]]:
        """Reset the store to the default dataset."""
        data, error = self._request("POST", "/api/seed")
        if error:
            return False, error
        return bool((data or {}).get("success")), None
