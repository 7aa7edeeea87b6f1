from __future__ import annotations

import logging
from typing import Optional

import httpx

from antiplag.exceptions import UnavailableError
from antiplag.exceptions.exceptions import ERRORS_BY_CODE, ERRORS_BY_STATUS, InternalError

log = logging.getLogger(__name__)


def _raise_for_error(resp: httpx.Response) -> None:
    """Map an error response of the analysis service back onto the error kinds."""
    if resp.is_success:
        return
    code = None
    details = resp.text
    try:
        body = resp.json()
        code = body.get("code")
        details = body.get("error_details", details)
    except ValueError:
        pass
    error_cls = ERRORS_BY_CODE.get(code) or ERRORS_BY_STATUS.get(resp.status_code, InternalError)
    raise error_cls(f"analysis service error {resp.status_code}: {details}")


class AnalysisClient:
    """HTTP client for the analysis service, used by upload watchers."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def analyse_task(self, task_id: str, object_key: str) -> bool:
        try:
            resp = self._client.post(
                f"/analysis/tasks/{task_id}/analyse",
                json={"object_key": object_key},
            )
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise UnavailableError(f"analysis service unavailable: {e}")
        except httpx.HTTPError as e:
            raise UnavailableError(f"analysis request failed: {e}")
        _raise_for_error(resp)
        return bool(resp.json()["status"])

    def close(self) -> None:
        self._client.close()
