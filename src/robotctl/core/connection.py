"""
Connection handle.

Wraps one adaptor instance and tracks whether the robot connected it.
"""

from typing import TYPE_CHECKING, Any, Optional, Union

from robotctl.adaptors.base import get_adaptor
from robotctl.core.models import ConnectionSpec

if TYPE_CHECKING:
    from robotctl.core.robot import Robot


class Connection:
    """A named communication channel owned by one robot."""

    def __init__(
        self,
        name: str,
        adaptor: Any,
        robot: Optional["Robot"] = None,
        host: Optional[str] = None,
        port: Optional[Union[int, str]] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize connection handle.

        Args:
            name: Unique name within the robot
            adaptor: Object exposing connect() and disconnect()
            robot: Owning robot
            host: Host used when the adaptor does not report one
            port: Port used when the adaptor does not report one
            details: Remaining declaration fields
        """
        self.name = name
        self.adaptor = adaptor
        self.robot = robot
        self.details = details or {}
        self.connected = False
        self._host = host
        self._port = port

    @classmethod
    def from_spec(cls, spec: ConnectionSpec, robot: Optional["Robot"] = None) -> "Connection":
        """
        Create a connection handle from its declaration.

        The adaptor may be given as a kind name (see get_adaptor), an
        adaptor class, or a ready adaptor instance.
        """
        adaptor = spec.adaptor
        if isinstance(adaptor, str):
            adaptor = get_adaptor(adaptor, spec.host, spec.port, **spec.details)
        elif isinstance(adaptor, type):
            adaptor = adaptor(spec.host, spec.port, **spec.details)

        return cls(
            name=spec.name,
            adaptor=adaptor,
            robot=robot,
            host=spec.host,
            port=spec.port,
            details=spec.details,
        )

    @property
    def host(self) -> Optional[str]:
        return getattr(self.adaptor, "host", None) or self._host

    @property
    def port(self) -> Optional[Union[int, str]]:
        return getattr(self.adaptor, "port", None) or self._port

    def connect(self) -> Any:
        """Invoke the adaptor's connect, returning its awaitable if any."""
        return self.adaptor.connect()

    def disconnect(self) -> Any:
        """Invoke the adaptor's disconnect, returning its awaitable if any."""
        self.connected = False
        return self.adaptor.disconnect()

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "adaptor": type(self.adaptor).__name__,
            "host": self.host,
            "port": self.port,
            "details": dict(self.details),
        }

    def __repr__(self) -> str:
        return f"<Connection name={self.name!r} connected={self.connected}>"
