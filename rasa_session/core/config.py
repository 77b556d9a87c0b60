"""Configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path("~/.rasa-session").expanduser()
DEFAULT_SOCKET_PATH = "/socket.io"
ENV_FILE_NAME = ".env"
CLIENT_FILE = "client.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ClientConfig:
    server_url: str
    socket_path: str = DEFAULT_SOCKET_PATH
    send_on_connect: Optional[str] = None
    reconnection: bool = True

    def __post_init__(self) -> None:
        if not self.server_url:
            raise ConfigError("server_url is required")
        if not self.socket_path:
            self.socket_path = DEFAULT_SOCKET_PATH


def resolve_config_dir(config_dir: Path | str | None) -> Path | None:
    """Resolve the directory holding .env + client.yaml.

    An explicitly requested directory must exist; the default one is optional.
    """
    if config_dir is None:
        return DEFAULT_CONFIG_DIR if DEFAULT_CONFIG_DIR.is_dir() else None

    target = Path(config_dir).expanduser().resolve()
    if not target.exists():
        raise ConfigError(f"Config directory {target} does not exist")
    if not target.is_dir():
        raise ConfigError(f"Config directory {target} is not a directory")
    return target


def load_config(config_dir: Path | str | None = None, **overrides: Any) -> ClientConfig:
    """Load client configuration.

    Precedence, lowest first: client.yaml, environment (including .env),
    keyword overrides that are not None.
    """
    root = resolve_config_dir(config_dir)
    values: Dict[str, Any] = {}
    if root is not None:
        _load_env_file(root / ENV_FILE_NAME)
        values.update(_load_client_file(root / CLIENT_FILE))
    values.update(_load_from_env())
    values.update({k: v for k, v in overrides.items() if v is not None})

    server_url = values.get("server_url")
    if not server_url:
        raise ConfigError("RASA_SERVER_URL is not set and client.yaml has no server_url")

    return ClientConfig(
        server_url=str(server_url),
        socket_path=str(values.get("socket_path") or DEFAULT_SOCKET_PATH),
        send_on_connect=values.get("send_on_connect") or None,
        reconnection=_parse_bool(values.get("reconnection", True), "reconnection"),
    )


def _load_env_file(path: Path) -> None:
    if not path.exists():
        LOGGER.debug("No .env file found at %s; relying on shell environment.", path)
        return
    load_dotenv(dotenv_path=path, override=False)


def _load_client_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid client.yaml structure at {path}")

    known = {"server_url", "socket_path", "send_on_connect", "reconnection"}
    unknown = set(data) - known
    if unknown:
        LOGGER.warning("Ignoring unknown keys in %s: %s", path, ", ".join(sorted(unknown)))
    return {key: data[key] for key in known if key in data}


def _load_from_env() -> Dict[str, Any]:
    mapping = {
        "RASA_SERVER_URL": "server_url",
        "RASA_SOCKET_PATH": "socket_path",
        "RASA_SEND_ON_CONNECT": "send_on_connect",
        "RASA_RECONNECTION": "reconnection",
    }
    values: Dict[str, Any] = {}
    for env_name, key in mapping.items():
        value = os.getenv(env_name)
        if value:
            values[key] = value
    return values


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")
