"""Asyncio API client for the Kaginawa Server."""

from types import TracebackType
from typing import Any

import httpx

from kaginawa.client.base import DEFAULT_TIMEOUT, BaseKaginawaClient, Call
from kaginawa.config import Settings
from kaginawa.report.models import Report
from kaginawa.ssh.models import SshServer


class AsyncKaginawaClient(BaseKaginawaClient):
    """Coroutine flavour of :class:`~kaginawa.client.sync.KaginawaClient`.

    Same operations, arguments and errors. Task cancellation propagates as
    ``asyncio.CancelledError``.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        proxy: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(endpoint, api_key)
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout, proxy=proxy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncKaginawaClient":
        return cls(
            settings.endpoint,  # type: ignore[arg-type]
            settings.api_key,  # type: ignore[arg-type]
            timeout=settings.timeout,
            proxy=settings.proxy,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "AsyncKaginawaClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _execute(self, call: Call) -> Any:
        request = self._build_request(self._http, call)
        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            raise self._transport_error(e) from e
        return self._handle_response(call, response)

    async def list_alive_nodes(self, threshold_minutes: int = 0) -> list[Report]:
        return await self._execute(self._list_alive_nodes_call(threshold_minutes))

    async def list_nodes_by_custom_id(self, custom_id: str) -> list[Report]:
        return await self._execute(self._list_nodes_by_custom_id_call(custom_id))

    async def find_node_by_id(self, node_id: str) -> Report:
        return await self._execute(self._find_node_by_id_call(node_id))

    async def command(
        self,
        node_id: str,
        command: str,
        user: str,
        key: str | None = None,
        password: str | None = None,
        timeout_seconds: int = 0,
    ) -> str:
        return await self._execute(
            self._command_call(node_id, command, user, key, password, timeout_seconds)
        )

    async def list_histories(self, node_id: str, begin: int = 0, end: int = 0) -> list[Report]:
        return await self._execute(self._list_histories_call(node_id, begin, end))

    async def find_ssh_server_by_hostname(self, hostname: str) -> SshServer:
        return await self._execute(self._find_ssh_server_call(hostname))
