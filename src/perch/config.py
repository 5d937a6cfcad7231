"""Server configuration.

ServerConfig is a frozen dataclass: immutable after creation and
validated once in ``__post_init__``.
"""

from dataclasses import dataclass

from perch.errors import ConfigurationError

_LOG_LEVELS = frozenset({"critical", "error", "warning", "info", "debug", "trace"})


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    Override what you need::

        config = ServerConfig(port=8080, grace_period=2.0)
    """

    # Listener
    host: str = "127.0.0.1"
    port: int = 8000

    # Lifecycle
    grace_period: float = 0.0  # Seconds in-flight exchanges get on stop()
    startup_timeout: float = 5.0  # Seconds start() waits for the listener to bind

    # Transport logging (uvicorn's own loggers)
    log_level: str = "info"
    access_log: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            msg = f"port must be an int, got {type(self.port).__name__}"
            raise ConfigurationError(msg)
        if not 1 <= self.port <= 65535:
            msg = f"port {self.port} is outside 1-65535"
            raise ConfigurationError(msg)
        if self.grace_period < 0:
            msg = "grace_period must not be negative"
            raise ConfigurationError(msg)
        if self.startup_timeout <= 0:
            msg = "startup_timeout must be positive"
            raise ConfigurationError(msg)
        if self.log_level not in _LOG_LEVELS:
            msg = f"unknown log_level {self.log_level!r}"
            raise ConfigurationError(msg)
