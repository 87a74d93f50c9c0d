"""Configuration management for tremote.

Loads daemon connection settings from ~/.config/tremote/config.cfg, falling
back to a .env file in the working directory. TREMOTE_* environment
variables override both.
"""

import configparser
from dataclasses import dataclass
import math
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from tremote.daemon.connection import DEFAULT_HOST, DEFAULT_PORT
from tremote.daemon.protocol import RPC_PATH

CONFIG_PATH = Path.home() / ".config" / "tremote" / "config.cfg"
ENV_PATH = Path(".env")

DEFAULT_TIMEOUT = 30.0

# config key -> environment variable
ENV_OVERRIDES = {
    "host": "TREMOTE_HOST",
    "port": "TREMOTE_PORT",
    "rpc_path": "TREMOTE_RPC_PATH",
    "timeout": "TREMOTE_TIMEOUT_S",
}


@dataclass
class ClientConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    rpc_path: str = RPC_PATH
    timeout: Optional[float] = DEFAULT_TIMEOUT


def load_raw_config(path: Path = CONFIG_PATH, env_path: Path = ENV_PATH) -> Dict[str, str]:
    """
    Load configuration values from the standard config path.
    Values are returned with lowercase keys for convenience.
    """
    data: Dict[str, str] = {}

    if path.exists():
        cfg = configparser.ConfigParser()
        cfg.read(path)
        data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})
    elif env_path.exists():
        # .env keys look like TREMOTE_HOST
        for key, value in dotenv_values(env_path).items():
            key = key.lower()
            if key.startswith("tremote_") and value is not None:
                data[key[len("tremote_"):]] = value

    return data


def _apply_env_overrides(raw: Dict[str, str]) -> Dict[str, str]:
    merged = dict(raw)
    for key, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None and value.strip() != "":
            merged[key] = value
    return merged


def get_client_config(raw: Optional[Dict[str, str]] = None) -> ClientConfig:
    """
    Build a ClientConfig from raw configuration values.
    Raises ValueError if port or timeout cannot be parsed.
    """
    raw = _apply_env_overrides(load_raw_config() if raw is None else raw)

    host = raw.get("host", "").strip() or DEFAULT_HOST
    rpc_path = raw.get("rpc_path", "").strip() or RPC_PATH

    port_value = str(raw.get("port", "") or DEFAULT_PORT).strip()
    try:
        port = int(port_value)
    except ValueError:
        raise ValueError(f"Invalid port in configuration: {port_value!r}")
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")

    timeout_value = str(raw.get("timeout", "") or DEFAULT_TIMEOUT).strip()
    try:
        timeout: Optional[float] = float(timeout_value)
    except ValueError:
        raise ValueError(f"Invalid timeout in configuration: {timeout_value!r}")
    if not math.isfinite(timeout):
        raise ValueError(f"Timeout must be a finite number: {timeout_value!r}")
    if timeout < 0:
        raise ValueError(f"Timeout must not be negative: {timeout}")
    # 0 disables the deadline
    if timeout == 0:
        timeout = None

    return ClientConfig(host=host, port=port, rpc_path=rpc_path, timeout=timeout)


def save_config(config: ClientConfig, path: Path = CONFIG_PATH) -> Path:
    """Write config to path, creating the directory if needed."""
    cfg = configparser.ConfigParser()
    cfg["DEFAULT"] = {
        "host": config.host,
        "port": str(config.port),
        "rpc_path": config.rpc_path,
        "timeout": str(config.timeout or 0),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        cfg.write(f)
    return path
