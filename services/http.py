# services/http.py
"""Thin base for the hosted AI services.

One request per call. A missing key raises ConfigurationError before any
traffic; everything that goes wrong on the wire comes back as a failed
ApiResult instead of an exception.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from config import http_timeout
from errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ApiResult:
    success: bool
    data: Any = None
    status_code: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data=None, status_code: int = 200) -> "ApiResult":
        return cls(True, data=data, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None, body: Optional[str] = None) -> "ApiResult":
        return cls(False, status_code=status_code, body=body, error=error)


class ApiClient:
    service_name = "API"
    base_url = ""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key
        self.http = session or requests.Session()
        self.timeout = timeout or http_timeout()

    def _headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def require_key(self) -> None:
        if not self.api_key:
            raise ConfigurationError(f"{self.service_name} API key not configured")

    def _request(self, method: str, path: str, *, json_body=None, binary: bool = False,
                 expect_object: bool = False,
                 headers: Optional[Dict[str, str]] = None) -> ApiResult:
        self.require_key()
        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(method, url, json=json_body, timeout=self.timeout,
                                     headers={**self._headers(), **(headers or {})})
        except requests.RequestException as e:
            logger.error("%s request to %s failed: %s", self.service_name, path, e)
            return ApiResult.failure(f"{self.service_name} request failed: {e}")

        if not resp.ok:
            body = resp.text
            logger.error("%s API error: %s - %s", self.service_name, resp.status_code, body)
            return ApiResult.failure(f"{self.service_name} API error: {resp.status_code} - {body}",
                                     status_code=resp.status_code, body=body)
        if binary:
            return ApiResult.ok(resp.content, resp.status_code)
        if not resp.content:
            return ApiResult.ok({}, resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            logger.error("%s returned a non-JSON body for %s", self.service_name, path)
            return ApiResult.failure(f"{self.service_name} returned an invalid response",
                                     status_code=resp.status_code, body=resp.text)
        if expect_object and not isinstance(data, dict):
            logger.error("%s returned %s instead of an object for %s",
                         self.service_name, type(data).__name__, path)
            return ApiResult.failure(f"{self.service_name} returned an unexpected response",
                                     status_code=resp.status_code, body=resp.text)
        return ApiResult.ok(data, resp.status_code)


@dataclass
class FunctionResponse:
    """Status and JSON body returned by the serverless functions."""
    status_code: int
    body: Dict
