"""Request construction and response handling shared by both API clients.

Each public operation is described by a :class:`Call`: the HTTP method,
URL, query parameters, headers, optional body and a decoder that turns the
response text into domain objects. The blocking and asyncio clients only
differ in how they send a call.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import TypeAdapter, ValidationError

from kaginawa.errors import InvalidArgumentError, KaginawaServerError
from kaginawa.report.models import Report
from kaginawa.ssh.models import SshServer
from kaginawa.validation import require_non_negative, require_text

logger = logging.getLogger(__name__)

NODE_RESOURCE = "/nodes"
SERVER_RESOURCE = "/servers"

# Server-side field selections
PROJECTION_ID = "id"  # id, custom_id, server_time, success
PROJECTION_MEASUREMENT = "measurement"  # adds seq, rtt_ms, upload_bps, download_bps

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

DEFAULT_TIMEOUT = 30.0

_REPORT_LIST = TypeAdapter(list[Report])


@dataclass(frozen=True)
class Call:
    """One prepared request and the decoder for its response body."""

    method: str
    url: str
    decode: Callable[[str], Any]
    params: dict[str, str | int] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    content: str | None = None


def _decoder(decode: Callable[[str], Any], resource: str) -> Callable[[str], Any]:
    """Wrap ``decode`` so shape and syntax errors become KaginawaServerError."""

    def _decode(body: str) -> Any:
        try:
            return decode(body)
        except ValidationError as e:
            logger.warning("Undecodable %s response (%d error(s))", resource, e.error_count())
            raise KaginawaServerError(
                f"failed to decode {resource} response: {body}", body=body
            ) from e

    return _decode


def _decode_reports(resource: str) -> Callable[[str], list[Report]]:
    return _decoder(_REPORT_LIST.validate_json, resource)


def _decode_text(body: str) -> str:
    return body


def _segment(value: str) -> str:
    """Quote a path segment, keeping MAC address colons readable."""
    return quote(value, safe=":@")


class BaseKaginawaClient:
    """Holds endpoint and credential; builds calls for every operation."""

    def __init__(self, endpoint: str, api_key: str) -> None:
        endpoint = require_text("endpoint", endpoint)
        if not endpoint.startswith(("http://", "https://")):
            raise InvalidArgumentError(f"not an http or https endpoint: {endpoint}")
        self._endpoint = endpoint
        self._api_key = require_text("api_key", api_key)
        self._base_url = endpoint.rstrip("/")

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def api_key(self) -> str:
        return self._api_key

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self._endpoint!r})"

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"token {self._api_key}"}

    def _get(
        self, path: str, decode: Callable[[str], Any], params: dict[str, str | int] | None = None
    ) -> Call:
        headers = {"Accept": JSON_CONTENT_TYPE, **self._auth_headers()}
        return Call(
            method="GET",
            url=self._base_url + path,
            decode=decode,
            params=params or {},
            headers=headers,
        )

    # Operation builders

    def _list_alive_nodes_call(self, threshold_minutes: int) -> Call:
        threshold_minutes = require_non_negative("threshold_minutes", threshold_minutes)
        params: dict[str, str | int] = {"projection": PROJECTION_ID}
        if threshold_minutes > 0:
            params["minutes"] = threshold_minutes
        return self._get(NODE_RESOURCE, _decode_reports("nodes"), params)

    def _list_nodes_by_custom_id_call(self, custom_id: str) -> Call:
        custom_id = require_text("custom_id", custom_id)
        return self._get(NODE_RESOURCE, _decode_reports("nodes"), {"custom-id": custom_id})

    def _find_node_by_id_call(self, node_id: str) -> Call:
        node_id = require_text("id", node_id)
        path = f"{NODE_RESOURCE}/{_segment(node_id.lower())}"
        return self._get(path, _decoder(Report.model_validate_json, "nodes"))

    def _command_call(
        self,
        node_id: str,
        command: str,
        user: str,
        key: str | None,
        password: str | None,
        timeout_seconds: int,
    ) -> Call:
        node_id = require_text("id", node_id)
        form: dict[str, str | int] = {
            "command": require_text("command", command),
            "user": require_text("user", user),
        }
        if key:
            form["key"] = key
        if password:
            form["password"] = password
        if require_non_negative("timeout_seconds", timeout_seconds) > 0:
            form["timeout"] = timeout_seconds
        headers = {"Content-Type": FORM_CONTENT_TYPE, **self._auth_headers()}
        return Call(
            method="POST",
            url=f"{self._base_url}{NODE_RESOURCE}/{_segment(node_id.lower())}/command",
            decode=_decode_text,
            headers=headers,
            content=urlencode(form),
        )

    def _list_histories_call(self, node_id: str, begin: int, end: int) -> Call:
        # Unlike find_node_by_id, the id is sent as given (server behaviour
        # for mixed-case ids is undocumented).
        node_id = require_text("id", node_id)
        params: dict[str, str | int] = {"projection": PROJECTION_MEASUREMENT}
        if require_non_negative("begin", begin) > 0:
            params["begin"] = begin
        if require_non_negative("end", end) > 0:
            params["end"] = end
        path = f"{NODE_RESOURCE}/{_segment(node_id)}/histories"
        return self._get(path, _decode_reports("histories"), params)

    def _find_ssh_server_call(self, hostname: str) -> Call:
        hostname = require_text("hostname", hostname)
        path = f"{SERVER_RESOURCE}/{_segment(hostname)}"
        return self._get(path, _decoder(SshServer.model_validate_json, "servers"))

    # Response handling

    def _build_request(self, http: httpx.Client | httpx.AsyncClient, call: Call) -> httpx.Request:
        logger.debug("%s %s", call.method, call.url)
        return http.build_request(
            call.method,
            call.url,
            params=call.params or None,
            headers=call.headers,
            content=call.content,
        )

    def _transport_error(self, exc: httpx.RequestError) -> KaginawaServerError:
        logger.warning("Request to %s failed: %s", self._endpoint, exc)
        return KaginawaServerError(f"failed to connect kaginawa server: {self._endpoint}")

    def _handle_response(self, call: Call, response: httpx.Response) -> Any:
        body = response.text
        logger.debug("%s %s -> HTTP %d", call.method, response.url, response.status_code)
        if response.status_code != 200:
            logger.warning(
                "%s %s returned HTTP %d", call.method, response.url, response.status_code
            )
            raise KaginawaServerError(
                f"HTTP {response.status_code} {body}",
                status=response.status_code,
                body=body,
            )
        return call.decode(body)
