"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. ``AppConfig.from_file()`` loads the JSON
server config format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wren.errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, debug=True)
    """

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    log_level: str = "info"

    # TLS (optional)
    https_port: int | None = None
    ssl_certfile: str | None = None
    ssl_keyfile: str | None = None

    # Timeouts, in seconds
    read_timeout: float = DEFAULT_TIMEOUT
    write_timeout: float = DEFAULT_TIMEOUT
    shutdown_timeout: float = DEFAULT_TIMEOUT  # budget for lifespan shutdown hooks

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> AppConfig:
        """Load configuration from a JSON file.

        Recognised keys: ``host``, ``port``, ``https_port``, ``cert_file``,
        ``key_file``, ``read_timeout``, ``write_timeout``,
        ``shutdown_timeout``. Empty or zero values fall
        back to the defaults. Keyword *overrides* win over the file.

        Raises ``ConfigurationError`` if the file is missing, is not valid
        JSON, or holds an invalid port.
        """
        file_path = Path(path)
        if not file_path.is_file():
            msg = f"Config file {str(file_path)!r} does not exist or is not a file"
            raise ConfigurationError(msg)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            msg = f"Config file {str(file_path)!r} is not valid JSON: {exc}"
            raise ConfigurationError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Config file {str(file_path)!r} must contain a JSON object"
            raise ConfigurationError(msg)

        values: dict[str, Any] = {
            "host": data.get("host") or DEFAULT_HOST,
            "port": _parse_port(data.get("port"), DEFAULT_PORT),
            "https_port": _parse_port(data.get("https_port"), None),
            "ssl_certfile": data.get("cert_file") or None,
            "ssl_keyfile": data.get("key_file") or None,
            "read_timeout": _parse_timeout(data.get("read_timeout")),
            "write_timeout": _parse_timeout(data.get("write_timeout")),
            "shutdown_timeout": _parse_timeout(data.get("shutdown_timeout")),
        }
        values.update(overrides)
        return cls(**values)


def _parse_port[D](value: object, default: D) -> int | D:
    if value is None or value == "":
        return default
    try:
        port = int(str(value))
    except ValueError:
        port = -1
    if not 0 < port <= 65535:
        msg = f"Invalid port {value!r} (should be between 1 and 65535)"
        raise ConfigurationError(msg)
    return port


def _parse_timeout(value: object) -> float:
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(str(value))
    except ValueError:
        msg = f"Invalid timeout {value!r} (expected a number of seconds)"
        raise ConfigurationError(msg) from None
    return timeout if timeout > 0 else DEFAULT_TIMEOUT
