"""Status report model and its wire schema.

Every field declares its wire name explicitly via ``alias``; the server
speaks snake_case JSON but a few names differ from the Python ones
(``seq``, ``gen_ms``, ``ip4_local``, ``rtt_ms``, ``ip_global`` ...).
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from kaginawa.report.builder import ReportBuilder


def _drop_nulls(data: Any) -> Any:
    """Treat JSON null like an absent field so defaults apply."""
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if v is not None}
    return data


class UsbDevice(BaseModel):
    """A USB device attached to a node."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(default="", alias="name")
    vendor_id: str = Field(default="", alias="vendor_id")
    product_id: str = Field(default="", alias="product_id")
    location: str = Field(default="", alias="location")

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        return _drop_nulls(data)


class Report(BaseModel):
    """A point-in-time snapshot reported by a node.

    Server-side enrichment (``server_time``, ``global_ip``, ``global_host``)
    is included. Instances are immutable; build them with
    :meth:`Report.builder` or decode them with :meth:`Report.from_json`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Identity
    id: str = Field(alias="id", min_length=1)
    custom_id: str = Field(default="", alias="custom_id")

    # Causation
    # <0 ssh connected, 0 boot, >0 interval min
    trigger: int = Field(default=0, alias="trigger", strict=True)
    sequence: int = Field(default=0, alias="seq", ge=0, strict=True)
    success: bool = Field(default=True, alias="success")

    # Timing (epoch seconds unless noted)
    device_time: int = Field(default=0, alias="device_time", ge=0, strict=True)
    boot_time: int = Field(default=0, alias="boot_time", ge=0, strict=True)
    gen_millis: int = Field(default=0, alias="gen_ms", ge=0, strict=True)
    server_time: int = Field(default=0, alias="server_time", ge=0, strict=True)

    # SSH tunnel
    ssh_server_host: str = Field(default="", alias="ssh_server_host")
    ssh_remote_port: int = Field(default=0, alias="ssh_remote_port", ge=0, le=65535, strict=True)
    ssh_connect_time: int = Field(default=0, alias="ssh_connect_time", ge=0, strict=True)

    # Network
    adapter: str = Field(default="", alias="adapter")
    local_ipv4: str = Field(default="", alias="ip4_local")
    local_ipv6: str = Field(default="", alias="ip6_local")
    hostname: str = Field(default="", alias="hostname")
    global_ip: str = Field(default="", alias="ip_global")
    global_host: str = Field(default="", alias="host_global")
    rtt_millis: int = Field(default=0, alias="rtt_ms", ge=0, strict=True)
    upload_kbps: int = Field(default=0, alias="upload_bps", ge=0, strict=True)
    download_kbps: int = Field(default=0, alias="download_bps", ge=0, strict=True)

    # Storage
    disk_total_bytes: int = Field(default=0, alias="disk_total_bytes", ge=0, strict=True)
    disk_used_bytes: int = Field(default=0, alias="disk_used_bytes", ge=0, strict=True)
    disk_label: str = Field(default="", alias="disk_label")
    disk_filesystem: str = Field(default="", alias="disk_filesystem")
    disk_mount_point: str = Field(default="", alias="disk_mount_point")
    disk_device: str = Field(default="", alias="disk_device")

    # Peripherals
    usb_devices: tuple[UsbDevice, ...] = Field(default=(), alias="usb_devices")
    bd_local_devices: tuple[str, ...] = Field(default=(), alias="bd_local_devices")

    # Diagnostics
    runtime: str = Field(default="", alias="runtime")
    agent_version: str = Field(default="", alias="agent_version")
    kernel_version: str = Field(default="", alias="kernel_version")
    errors: tuple[str, ...] = Field(default=(), alias="errors")

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        data = _drop_nulls(data)
        # Projected responses send "success" without "errors"; the server's
        # flag is kept only while the error list is empty.
        if isinstance(data, dict) and (data.get("errors") or "success" not in data):
            data["success"] = not data.get("errors")
        return data

    @classmethod
    def builder(cls) -> "ReportBuilder":
        from kaginawa.report.builder import ReportBuilder

        return ReportBuilder()

    @classmethod
    def from_json(cls, text: str | bytes) -> "Report":
        return cls.model_validate_json(text)

    def to_wire(self) -> dict[str, Any]:
        """Return the report keyed by wire field names."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @property
    def disk_utilization_percentage(self) -> float:
        """Used disk space as a percentage of the total, 0 for an unknown total."""
        if self.disk_total_bytes == 0:
            return 0.0
        return self.disk_used_bytes / self.disk_total_bytes * 100

    @property
    def device_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.device_time, tz=UTC)

    @property
    def boot_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.boot_time, tz=UTC)

    @property
    def ssh_connect_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.ssh_connect_time, tz=UTC)

    @property
    def server_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.server_time, tz=UTC)
