"""Client for the Compass GraphQL and REST APIs."""

import json
import logging
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import requests

__all__ = [
    "CompassServiceError",
    "APISpecificationsInput",
    "InputDTO",
    "HTTPResponse",
    "GraphQLClient",
    "CompassHTTPClient",
    "CompassService",
]

_log = logging.getLogger(__name__)

_METRICS_V1_ENDPOINT = "/gateway/api/compass/v1/metrics"
_API_SPECS_V1_ENDPOINT = "/gateway/api/compass/v1/component/:componentId/api_specs"
_GRAPHQL_PATH = "/gateway/api/graphql"
_DEFAULT_TIMEOUT = 60.0


class CompassServiceError(RuntimeError):
    """Raised when a Compass request fails or reports failure."""


@dataclass
class APISpecificationsInput:
    """An API specification document to attach to a component."""

    component_id: str
    api_specs: str
    file_name: str


@dataclass
class InputDTO:
    """Base of GraphQL inputs; subclasses provide ``query`` and ``variables()``."""

    pre_validation_func: Callable[[], None] | None = None

    def pre_validation(self) -> None:
        """Run the pre-validation hook, if any; the hook raises to reject."""
        if self.pre_validation_func is not None:
            self.pre_validation_func()


class _Input(Protocol):
    query: str

    def variables(self) -> Mapping[str, Any]: ...

    def pre_validation(self) -> None: ...


class _Output(Protocol):
    def load(self, data: Mapping[str, Any]) -> None: ...

    def is_successful(self) -> bool: ...

    def errors(self) -> list[str]: ...


@dataclass(frozen=True)
class HTTPResponse:
    """Status code and decoded body of an HTTP response."""

    status_code: int
    body: str


class _Config(Protocol):
    def compass_host(self) -> str: ...

    def compass_token(self) -> str: ...

    def compass_cloud_id(self) -> str: ...


class GraphQLClient:
    """Sends GraphQL queries to the Compass gateway."""

    def __init__(
        self,
        config: _Config,
        session: requests.Session | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._endpoint = f"https://{config.compass_host()}{_GRAPHQL_PATH}"
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def run(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Execute ``query`` and return the ``data`` part of the response."""
        payload = {"query": query, "variables": dict(variables or {})}
        _log.debug(">> variables: %s", payload["variables"])
        _log.debug(">> query: %s", query)
        merged = {"Accept": "application/json; charset=utf-8", **(headers or {})}
        response = self._session.post(
            self._endpoint, json=payload, headers=merged, timeout=self._timeout
        )
        try:
            body = response.json()
        except ValueError as exc:
            if response.status_code != 200:
                raise CompassServiceError(
                    f"graphql: server returned a non-200 status code: {response.status_code}"
                ) from exc
            raise CompassServiceError(f"decoding response: {exc}") from exc
        errors = body.get("errors") or []
        if errors:
            first = errors[0]
            message = first.get("message", "") if isinstance(first, Mapping) else str(first)
            raise CompassServiceError(f"graphql: {message}")
        return body.get("data") or {}


class CompassHTTPClient:
    """HTTP client that resolves relative paths against the Compass host and authenticates."""

    def __init__(
        self,
        config: _Config,
        session: requests.Session | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._host = config.compass_host()
        self._token = config.compass_token()
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def send(
        self,
        method: str,
        path: str,
        data: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Send a request and return its status and body."""
        url = path if path.startswith("http") else f"https://{self._host}{path}"
        merged = dict(headers or {})
        merged["Authorization"] = f"Basic {self._token}"
        response = self._session.request(
            method, url, data=data, headers=merged, timeout=self._timeout
        )
        return HTTPResponse(response.status_code, response.text)


class _GraphQLRunner(Protocol):
    def run(
        self,
        query: str,
        variables: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
    ) -> Any: ...


class _HTTPSender(Protocol):
    def send(
        self,
        method: str,
        path: str,
        data: bytes | str | None,
        headers: Mapping[str, str] | None,
    ) -> HTTPResponse: ...


def _escape_quotes(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _multipart_body(spec_input: APISpecificationsInput) -> tuple[bytes, str]:
    boundary = secrets.token_hex(30)
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="file"; '
        f'filename="{_escape_quotes(spec_input.file_name)}"\r\n'
        "Content-Type: application/octet-stream\r\n\r\n"
    )
    tail = f"\r\n--{boundary}--\r\n"
    body = head.encode() + spec_input.api_specs.encode() + tail.encode()
    return body, f"multipart/form-data; boundary={boundary}"


class CompassService:
    """High-level operations against Compass."""

    def __init__(
        self, config: _Config, gql_client: _GraphQLRunner, http_client: _HTTPSender
    ) -> None:
        self._gql_client = gql_client
        self._http_client = http_client
        self._token = config.compass_token()
        self._cloud_id = config.compass_cloud_id()

    def run(self, query: str, variables: Mapping[str, Any] | None = None) -> Any:
        """Execute a GraphQL query and return its data."""
        headers = {"Authorization": f"Basic {self._token}"}
        try:
            return self._gql_client.run(query, dict(variables or {}), headers)
        except Exception as exc:
            _log.error("Failed to execute query: %s", exc)
            raise

    def run_with_dtos(self, input_dto: _Input, output_dto: _Output) -> None:
        """Run the input's query, load the result into ``output_dto`` and check it."""
        query = input_dto.query
        operation = query.split("(", 1)[0].strip()
        try:
            data = self.run(query, input_dto.variables())
        except Exception as exc:
            _log.error("failed to run %s: %s", operation, exc)
            raise
        output_dto.load(data)
        input_dto.pre_validation()
        if not output_dto.is_successful():
            errors = " ".join(str(err) for err in output_dto.errors())
            raise CompassServiceError(f"failed to execute {operation}: [{errors}]")

    def send_metric(self, body: Mapping[str, str]) -> str:
        """Post a metric value and return the response body."""
        payload = json.dumps(dict(body))
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        return self._do("POST", _METRICS_V1_ENDPOINT, payload, headers)

    def send_api_specifications(self, spec_input: APISpecificationsInput) -> str:
        """Upload an API specification for a component and return the response body."""
        endpoint = _API_SPECS_V1_ENDPOINT.replace(":componentId", spec_input.component_id, 1)
        body, content_type = _multipart_body(spec_input)
        headers = {"Content-Type": content_type, "Accept": "application/json"}
        return self._do("PUT", endpoint, body, headers)

    def cloud_id(self) -> str:
        """The Compass cloud identifier."""
        return self._cloud_id

    def _do(
        self, method: str, path: str, data: bytes | str, headers: Mapping[str, str]
    ) -> str:
        try:
            response = self._http_client.send(method, path, data, headers)
        except (requests.RequestException, OSError) as exc:
            raise CompassServiceError(f"failed to send request: {exc}") from exc
        if response.status_code != 200:
            raise CompassServiceError(f"response body: {response.body}")
        return response.body