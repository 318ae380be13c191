"""Blocking API client for the Kaginawa Server."""

from types import TracebackType
from typing import Any

import httpx

from kaginawa.client.base import DEFAULT_TIMEOUT, BaseKaginawaClient, Call
from kaginawa.config import Settings
from kaginawa.report.models import Report
from kaginawa.ssh.models import SshServer


class KaginawaClient(BaseKaginawaClient):
    """API client for the Kaginawa Server.

    Every method sends exactly one request and blocks until the response
    arrives. Failures surface as :class:`~kaginawa.errors.KaginawaServerError`;
    nothing is retried.

    Args:
        endpoint: Server URL, ``http://...`` or ``https://...``.
        api_key: API key with the ADMIN role.
        timeout: Request timeout in seconds.
        proxy: Optional proxy URL passed to httpx.
        http_client: Preconfigured ``httpx.Client`` (mainly for tests).
            The caller keeps ownership of an injected client.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        proxy: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(endpoint, api_key)
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout, proxy=proxy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "KaginawaClient":
        return cls(
            settings.endpoint,  # type: ignore[arg-type]
            settings.api_key,  # type: ignore[arg-type]
            timeout=settings.timeout,
            proxy=settings.proxy,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "KaginawaClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _execute(self, call: Call) -> Any:
        request = self._build_request(self._http, call)
        try:
            response = self._http.send(request)
        except httpx.RequestError as e:
            raise self._transport_error(e) from e
        return self._handle_response(call, response)

    def list_alive_nodes(self, threshold_minutes: int = 0) -> list[Report]:
        """Retrieve recently reported nodes.

        Only ``id``, ``custom_id``, ``server_time`` and ``success`` are
        populated; other fields keep their defaults.

        Args:
            threshold_minutes: Freshness threshold since the last report,
                0 for unlimited.
        """
        return self._execute(self._list_alive_nodes_call(threshold_minutes))

    def list_nodes_by_custom_id(self, custom_id: str) -> list[Report]:
        """Retrieve the newest full reports of nodes sharing ``custom_id``."""
        return self._execute(self._list_nodes_by_custom_id_call(custom_id))

    def find_node_by_id(self, node_id: str) -> Report:
        """Retrieve a single node, commonly addressed by MAC address.

        A missing node raises ``KaginawaServerError`` with ``status == 404``.
        """
        return self._execute(self._find_node_by_id_call(node_id))

    def command(
        self,
        node_id: str,
        command: str,
        user: str,
        key: str | None = None,
        password: str | None = None,
        timeout_seconds: int = 0,
    ) -> str:
        """Execute ``command`` on a node and return its raw output.

        Args:
            node_id: Target ID, commonly MAC address.
            command: Command line to run.
            user: Login user.
            key: Optional private key content of the login user.
            password: Optional password of the login user.
            timeout_seconds: Command timeout, 0 for the server default.
        """
        return self._execute(
            self._command_call(node_id, command, user, key, password, timeout_seconds)
        )

    def list_histories(self, node_id: str, begin: int = 0, end: int = 0) -> list[Report]:
        """Retrieve past reports of a node.

        ``begin`` and ``end`` are epoch seconds, 0 for unlimited.
        """
        return self._execute(self._list_histories_call(node_id, begin, end))

    def find_ssh_server_by_hostname(self, hostname: str) -> SshServer:
        return self._execute(self._find_ssh_server_call(hostname))
