"""SSH server descriptor returned by ``GET /servers/{hostname}``."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kaginawa.errors import RequiredFieldError
from kaginawa.validation import require_port, require_text


class SshServer(BaseModel):
    """How to reach a node's SSH endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    host: str = Field(alias="host", min_length=1)
    port: int = Field(default=0, alias="port", ge=0, le=65535, strict=True)
    user: str = Field(default="", alias="user")
    key: str = Field(default="", alias="key", repr=False)
    password: str = Field(default="", alias="password", repr=False)

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def builder(cls) -> "SshServerBuilder":
        return SshServerBuilder()

    @classmethod
    def from_json(cls, text: str | bytes) -> "SshServer":
        return cls.model_validate_json(text)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class SshServerBuilder:
    """Collects validated values for an :class:`SshServer`."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def host(self, host: str) -> "SshServerBuilder":
        self._values["host"] = require_text("host", host)
        return self

    def port(self, port: int) -> "SshServerBuilder":
        self._values["port"] = require_port("port", port)
        return self

    def user(self, user: str) -> "SshServerBuilder":
        self._values["user"] = require_text("user", user)
        return self

    def key(self, key: str) -> "SshServerBuilder":
        self._values["key"] = require_text("key", key)
        return self

    def password(self, password: str) -> "SshServerBuilder":
        self._values["password"] = require_text("password", password)
        return self

    def build(self) -> SshServer:
        if not self._values.get("host"):
            raise RequiredFieldError("host")
        return SshServer(**self._values)
