"""Step-by-step construction of :class:`Report` instances."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from kaginawa.errors import RequiredFieldError
from kaginawa.report.models import Report, UsbDevice
from kaginawa.validation import (
    require_epoch_seconds,
    require_int,
    require_items,
    require_non_negative,
    require_port,
    require_positive,
    require_text,
)


class ReportBuilder:
    """Collects validated values for a :class:`Report`.

    Each setter checks its own argument and returns the builder, so calls
    can be chained. :meth:`build` enforces that ``id`` has been set. The
    success flag has no setter: it is true exactly when no errors were
    recorded.

    Example::

        report = (
            ReportBuilder()
            .id("b8:27:eb:73:90:9f")
            .custom_id("test-rpi")
            .sequence(42)
            .build()
        )
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def _set(self, field: str, value: Any) -> "ReportBuilder":
        self._values[field] = value
        return self

    # Identity

    def id(self, node_id: str) -> "ReportBuilder":
        return self._set("id", require_text("id", node_id))

    def custom_id(self, custom_id: str) -> "ReportBuilder":
        return self._set("custom_id", require_text("custom_id", custom_id))

    # Causation

    def trigger(self, trigger: int) -> "ReportBuilder":
        """Negative: ssh connected, 0: process start, positive: interval minutes."""
        return self._set("trigger", require_int("trigger", trigger))

    def sequence(self, sequence: int) -> "ReportBuilder":
        return self._set("sequence", require_positive("sequence", sequence))

    # Timing

    def device_time(self, time: int | datetime) -> "ReportBuilder":
        return self._set("device_time", require_epoch_seconds("device_time", time))

    def boot_time(self, time: int | datetime) -> "ReportBuilder":
        return self._set("boot_time", require_epoch_seconds("boot_time", time))

    def gen_millis(self, millis: int) -> "ReportBuilder":
        return self._set("gen_millis", require_non_negative("gen_millis", millis))

    def server_time(self, time: int | datetime) -> "ReportBuilder":
        return self._set("server_time", require_epoch_seconds("server_time", time))

    # SSH tunnel

    def ssh_server_host(self, host: str) -> "ReportBuilder":
        return self._set("ssh_server_host", require_text("ssh_server_host", host))

    def ssh_remote_port(self, port: int) -> "ReportBuilder":
        return self._set("ssh_remote_port", require_port("ssh_remote_port", port))

    def ssh_connect_time(self, time: int | datetime) -> "ReportBuilder":
        return self._set("ssh_connect_time", require_epoch_seconds("ssh_connect_time", time))

    # Network

    def adapter(self, adapter: str) -> "ReportBuilder":
        return self._set("adapter", require_text("adapter", adapter))

    def local_ipv4(self, ip: str) -> "ReportBuilder":
        return self._set("local_ipv4", require_text("local_ipv4", ip))

    def local_ipv6(self, ip: str) -> "ReportBuilder":
        return self._set("local_ipv6", require_text("local_ipv6", ip))

    def hostname(self, hostname: str) -> "ReportBuilder":
        return self._set("hostname", require_text("hostname", hostname))

    def global_ip(self, ip: str) -> "ReportBuilder":
        return self._set("global_ip", require_text("global_ip", ip))

    def global_host(self, host: str) -> "ReportBuilder":
        return self._set("global_host", require_text("global_host", host))

    def rtt_millis(self, millis: int) -> "ReportBuilder":
        return self._set("rtt_millis", require_non_negative("rtt_millis", millis))

    def upload_kbps(self, kbps: int) -> "ReportBuilder":
        return self._set("upload_kbps", require_non_negative("upload_kbps", kbps))

    def download_kbps(self, kbps: int) -> "ReportBuilder":
        return self._set("download_kbps", require_non_negative("download_kbps", kbps))

    # Storage

    def disk_total_bytes(self, size: int) -> "ReportBuilder":
        return self._set("disk_total_bytes", require_non_negative("disk_total_bytes", size))

    def disk_used_bytes(self, size: int) -> "ReportBuilder":
        return self._set("disk_used_bytes", require_non_negative("disk_used_bytes", size))

    def disk_label(self, label: str) -> "ReportBuilder":
        return self._set("disk_label", require_text("disk_label", label))

    def disk_filesystem(self, filesystem: str) -> "ReportBuilder":
        return self._set("disk_filesystem", require_text("disk_filesystem", filesystem))

    def disk_mount_point(self, mount_point: str) -> "ReportBuilder":
        return self._set("disk_mount_point", require_text("disk_mount_point", mount_point))

    def disk_device(self, device: str) -> "ReportBuilder":
        return self._set("disk_device", require_text("disk_device", device))

    # Peripherals

    def usb_devices(self, devices: Iterable[UsbDevice]) -> "ReportBuilder":
        items = require_items("usb_devices", devices)
        for item in items:
            if not isinstance(item, UsbDevice):
                raise TypeError(f"usb_devices must contain UsbDevice, got {type(item).__name__}")
        return self._set("usb_devices", items)

    def bd_local_devices(self, addresses: Iterable[str]) -> "ReportBuilder":
        items = require_items("bd_local_devices", addresses)
        return self._set(
            "bd_local_devices", tuple(require_text("bd_local_devices", a) for a in items)
        )

    # Diagnostics

    def runtime(self, runtime: str) -> "ReportBuilder":
        return self._set("runtime", require_text("runtime", runtime))

    def agent_version(self, version: str) -> "ReportBuilder":
        return self._set("agent_version", require_text("agent_version", version))

    def kernel_version(self, version: str) -> "ReportBuilder":
        return self._set("kernel_version", require_text("kernel_version", version))

    def errors(self, errors: Iterable[str]) -> "ReportBuilder":
        items = require_items("errors", errors)
        return self._set("errors", tuple(require_text("errors", e) for e in items))

    def build(self) -> Report:
        """Return a new immutable report.

        Raises:
            RequiredFieldError: ``id`` was never set.
        """
        if not self._values.get("id"):
            raise RequiredFieldError("id")
        values = dict(self._values)
        values["success"] = not values.get("errors")
        return Report(**values)
