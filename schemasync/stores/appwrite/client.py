"""HTTP client for the Appwrite REST API."""

import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from urllib3.util.retry import Retry

from schemasync.core.exceptions import RemoteOperationError
from schemasync.models.config import StoreConfig

logger = logging.getLogger(__name__)

# Only idempotent methods are retried
RETRY_METHODS = ["GET", "DELETE"]
RETRY_STATUSES = [500, 502, 503, 504]


class AppwriteClient:
    """Thin wrapper around a ``requests.Session`` bound to one project."""

    def __init__(self, config: StoreConfig, session: Optional[requests.Session] = None):
        self._base_url = (config.endpoint or "").rstrip("/")
        self._timeout = config.timeout

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Appwrite-Project": config.project_id or "",
            }
        )
        if config.api_key is not None:
            self._session.headers["X-Appwrite-Key"] = config.api_key.get_secret_value()

        if config.max_retries > 0:
            retry_strategy = Retry(
                total=config.max_retries,
                backoff_factor=config.retry_delay,
                status_forcelist=RETRY_STATUSES,
                allowed_methods=RETRY_METHODS,
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: dict) -> Any:
        return self.request("POST", path, body=body)

    def patch(self, path: str, body: dict) -> Any:
        return self.request("PATCH", path, body=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            RemoteOperationError: On transport failures and non-2xx responses.
                ``code`` carries the error type reported by the server.
        """
        url = f"{self._base_url}{path}"
        logger.debug(f"{method} {path}")
        try:
            response = self._session.request(
                method, url, json=body, params=params, timeout=self._timeout
            )
        except RequestException as e:
            raise RemoteOperationError(
                f"Request failed: {e}", context={"method": method, "path": path}
            ) from e

        if response.status_code >= 400:
            raise self._error_from_response(method, path, response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteOperationError(
                f"Invalid JSON in response: {e}",
                status_code=response.status_code,
                context={"method": method, "path": path},
            ) from e

    def _error_from_response(
        self, method: str, path: str, response: requests.Response
    ) -> RemoteOperationError:
        message = f"HTTP {response.status_code}"
        code = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or message
            code = payload.get("type") or None
        return RemoteOperationError(
            message,
            code=code,
            status_code=response.status_code,
            context={"method": method, "path": path},
        )
