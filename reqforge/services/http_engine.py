import time
from datetime import timedelta
from http import HTTPStatus
from typing import Dict, List, Optional, Tuple

import requests

from ..models.request import FormUrlEncodedBody, RawBody, RequestDefinition
from ..models.response import HttpResponse
from ..utils.logger import Logger
from .validation import RequestValidationError, validate_request

CONNECT_TIMEOUT_SECONDS = 10
REQUEST_TIMEOUT_SECONDS = 30


class HttpError(Exception):
    """Base class for failures that prevented a response from being produced."""


class TransportError(HttpError):
    """Network, TLS, DNS or timeout failure."""


class UrlParseError(HttpError):
    pass


class RequestValidationFailed(HttpError):
    def __init__(self, validation_error: RequestValidationError):
        super().__init__(f"Validation error: {validation_error}")
        self.validation_error = validation_error


class HttpEngine:
    """
    Sends resolved requests over HTTP and normalizes the response.

    4xx/5xx responses are regular results; only failures to obtain a response
    raise ``HttpError``. Nothing is retried.
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.logger = Logger.get_logger(__name__)

    def execute(self, request: RequestDefinition) -> HttpResponse:
        """
        Validate and send ``request``.

        Args:
            request: A request whose placeholders were already resolved.

        Returns:
            HttpResponse: The normalized response, whatever its status code.

        Raises:
            RequestValidationFailed: if the request does not pass validation.
            UrlParseError: if the transport rejects the URL.
            TransportError: if the request could not be completed.
        """
        try:
            validate_request(request)
        except RequestValidationError as e:
            self.logger.error(f"Request '{request.name}' failed validation: {e}")
            raise RequestValidationFailed(e) from e

        headers = self._build_headers(request)
        data = self._build_data(request)
        params = [(p.key, p.value) for p in request.query_params if p.enabled]

        self.logger.info(f"{request.method} {request.url}")
        start = time.perf_counter()
        try:
            response = self.session.request(
                method=request.method.value,
                url=request.url,
                params=params,
                headers=headers,
                data=data,
                timeout=(CONNECT_TIMEOUT_SECONDS, REQUEST_TIMEOUT_SECONDS),
            )
            body = response.content
        except (requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema, requests.exceptions.InvalidURL) as e:
            self.logger.error(f"Invalid URL '{request.url}': {e}")
            raise UrlParseError(f"URL parse error: {e}") from e
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request to {request.url} failed: {e}")
            raise TransportError(f"Request error: {e}") from e
        except (UnicodeError, ValueError) as e:
            # http.client refuses header values it cannot encode as latin-1
            self.logger.error(f"Request to {request.url} could not be encoded: {e}")
            raise TransportError(f"Request error: {e}") from e
        elapsed = timedelta(seconds=time.perf_counter() - start)

        result = HttpResponse(
            status=response.status_code,
            status_text=self._reason_phrase(response.status_code),
            headers=dict(response.headers.items()),
            body=body,
            body_text=self._decode(body),
            size_bytes=len(body),
            elapsed=elapsed,
        )
        self.logger.info(f"{request.method} {request.url} -> {result.status} ({result.elapsed_millis} ms)")
        return result

    @staticmethod
    def _build_headers(request: RequestDefinition) -> Dict[str, str]:
        headers = {h.key: h.value for h in request.headers if h.enabled}
        if isinstance(request.body, RawBody) and not any(key.lower() == "content-type" for key in headers):
            headers["Content-Type"] = request.body.content_type.mime_type
        return headers

    @staticmethod
    def _build_data(request: RequestDefinition) -> bytes | List[Tuple[str, str]] | None:
        match request.body:
            case RawBody(content=content):
                return content.encode("utf-8")
            case FormUrlEncodedBody(fields=fields):
                # requests sets application/x-www-form-urlencoded for tuple lists
                return [(f.key, f.value) for f in fields if f.enabled]
            case _:
                return None

    @staticmethod
    def _reason_phrase(status: int) -> str:
        try:
            return HTTPStatus(status).phrase
        except ValueError:
            return ""

    @staticmethod
    def _decode(body: bytes) -> Optional[str]:
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return None
