"""Exception types raised by the Kaginawa SDK.

Two families:

* ``InvalidArgumentError`` and its subclasses flag a bad argument handed
  to a builder or a client method. They are raised before any network
  call and indicate a bug at the call site.
* ``KaginawaServerError`` covers everything that goes wrong while talking
  to the server: transport failures, non-200 responses and undecodable
  bodies. Only server responses carry a ``status``.
"""


class InvalidArgumentError(ValueError):
    """Base class for argument validation failures."""


class MissingValueError(InvalidArgumentError):
    """A required value was ``None``."""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing required value: {name}")
        self.name = name


class EmptyValueError(InvalidArgumentError):
    """A string value was empty."""

    def __init__(self, name: str) -> None:
        super().__init__(f"value must not be empty: {name}")
        self.name = name


class OutOfRangeError(InvalidArgumentError):
    """A numeric value fell outside its permitted range."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"value out of range: {name}={value!r}")
        self.name = name
        self.value = value


class RequiredFieldError(InvalidArgumentError):
    """``build()`` was called before the identifying field was set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"required field missing: {name} is not set yet")
        self.name = name


class KaginawaServerError(Exception):
    """A request to the Kaginawa server failed.

    Attributes:
        message: Human readable description.
        status: HTTP status code for non-200 responses, ``None`` for
            transport and decode failures.
        body: Raw response body when one was received.
    """

    def __init__(self, message: str, status: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body

    @property
    def is_server_error(self) -> bool:
        """True when the server answered with a non-200 status."""
        return self.status is not None

    def __repr__(self) -> str:
        return f"KaginawaServerError(message={self.message!r}, status={self.status!r})"
