"""Exercise tracker API client.

A thin wrapper around the REST API served by ``exercise_tracker_api``.
The client uses the ``requests`` library and exposes one method per
endpoint:

* :meth:`create_user` – register a username (idempotent).
* :meth:`list_users` – list all registered users.
* :meth:`add_exercise` – log an exercise for a user.
* :meth:`get_log` – fetch a user's log, optionally filtered by date
  range and capped by a limit.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``.  On failure ``data`` is ``None`` (or an empty list) and
``error`` is a dictionary with keys ``status_code`` and ``message``.
The API reports validation and lookup failures as ordinary responses
with an ``{"error": ...}`` body; the client surfaces those as errors
too.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]
DateLike = Union[str, date, datetime]


def _date_param(value: Optional[DateLike]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


class ExerciseTrackerClient:
    """Client for interacting with the exercise tracker API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:3000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Timeout in seconds for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET`` or ``POST``).
            path: Path relative to :attr:`base_url` (e.g. ``/api/users``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json() if response.content else None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("error", "")
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}
        except ValueError as exc:
            logger.error("API returned invalid JSON: %s", exc)
            return None, {"status_code": response.status_code, "message": "Invalid JSON response"}

        if isinstance(data, dict) and "error" in data:
            logger.warning("API rejected %s %s: %s", method, path, data["error"])
            return None, {"status_code": response.status_code, "message": data["error"]}
        return data, None

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------
    def create_user(self, username: str) -> Result:
        """Register ``username`` and return ``({"username", "id"}, error)``.

        Registering an existing name returns the existing user.
        """
        return self._request("POST", "/api/users", json_body={"username": username})

    def list_users(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return ``(users, error)``; ``users`` is empty on failure."""
        data, error = self._request("GET", "/api/users")
        if error:
            return [], error
        return (data if isinstance(data, list) else []), None

    # ------------------------------------------------------------------
    # Exercise operations
    # ------------------------------------------------------------------
    def add_exercise(
        self,
        user_id: str,
        description: str,
        duration: Union[int, float, str],
        exercise_date: Optional[DateLike] = None,
    ) -> Result:
        """Log an exercise for ``user_id``.

        Args:
            user_id: Identifier returned by :meth:`create_user`.
            description: What was done.
            duration: Minutes spent.
            exercise_date: Optional date; the server uses today when omitted.
        Returns:
            A tuple ``(exercise, error)``.
        """
        payload: Dict[str, Any] = {"description": description, "duration": duration}
        if exercise_date is not None:
            payload["date"] = _date_param(exercise_date)
        return self._request("POST", f"/api/users/{user_id}/exercises", json_body=payload)

    def get_log(
        self,
        user_id: str,
        *,
        date_from: Optional[DateLike] = None,
        date_to: Optional[DateLike] = None,
        limit: Optional[int] = None,
    ) -> Result:
        """Fetch the exercise log of ``user_id``.

        Args:
            user_id: Identifier of the user.
            date_from: Earliest date to include.
            date_to: Latest date to include.
            limit: Maximum number of entries.
        Returns:
            A tuple ``(log, error)`` where ``log`` has the keys ``id``,
            ``username``, ``count`` and ``log``.
        """
        params = {
            "from": _date_param(date_from),
            "to": _date_param(date_to),
            "limit": limit,
        }
        return self._request("GET", f"/api/users/{user_id}/logs", params=params)
