"""The daemon's local configuration, kept in memory and stored as YAML."""

from __future__ import annotations

import copy
import os
import threading
from dataclasses import dataclass, field
from typing import Any

import yaml


@dataclass(frozen=True)
class ServerConfig:
    """Settings of one additional listener."""

    address: str = ""


@dataclass
class DaemonSettings:
    """The settings held in the daemon's configuration file."""

    name: str = ""
    address: str = ""
    servers: dict[str, ServerConfig] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the settings as plain data for serialisation."""
        return {
            "name": self.name,
            "address": self.address,
            "servers": {
                name: {"address": server.address}
                for name, server in self.servers.items()
            },
        }

    def merge(self, data: dict[str, Any]) -> None:
        """Overwrite the settings with the keys present in ``data``."""
        if "name" in data:
            self.name = "" if data["name"] is None else str(data["name"])
        if "address" in data:
            self.address = "" if data["address"] is None else str(data["address"])
        if "servers" in data:
            servers = data["servers"] or {}
            if not isinstance(servers, dict):
                raise ValueError("servers must be a mapping")
            parsed = {}
            for name, entry in servers.items():
                entry = entry or {}
                if not isinstance(entry, dict):
                    raise ValueError(f"server {name!r} must be a mapping")
                address = entry.get("address")
                parsed[str(name)] = ServerConfig(
                    address="" if address is None else str(address)
                )
            self.servers = parsed


class DaemonConfig:
    """Thread-safe access to the daemon's settings and their file.

    Changes are kept in memory until :meth:`write` is called.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        self._lock = threading.Lock()
        self._settings = DaemonSettings()

    def load(self) -> None:
        """Read the settings from the configuration file."""
        with self._lock:
            try:
                with open(self.path, encoding="utf-8") as handle:
                    text = handle.read()
            except OSError as err:
                raise OSError(f"Failed to load daemon config: {err}") from err

            try:
                data = yaml.safe_load(text)
                if data is None:
                    return
                if not isinstance(data, dict):
                    raise ValueError("top level must be a mapping")
                self._settings.merge(data)
            except (yaml.YAMLError, ValueError) as err:
                raise ValueError(
                    f"Failed to parse daemon config from yaml: {err}"
                ) from err

    def dump(self) -> DaemonSettings:
        """Return the settings object itself."""
        return self._settings

    def write(self) -> None:
        """Store the settings in the configuration file."""
        with self._lock:
            text = yaml.safe_dump(self._settings.to_dict(), sort_keys=False)
            try:
                fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(text)
            except OSError as err:
                raise OSError(
                    f"Failed to write daemon configuration yaml: {err}"
                ) from err

    @property
    def name(self) -> str:
        """The daemon's name."""
        with self._lock:
            return self._settings.name

    @name.setter
    def name(self, value: str) -> None:
        with self._lock:
            self._settings.name = value

    @property
    def address(self) -> str:
        """The daemon's listen address."""
        with self._lock:
            return self._settings.address

    @address.setter
    def address(self, value: str) -> None:
        with self._lock:
            self._settings.address = value

    @property
    def servers(self) -> dict[str, ServerConfig]:
        """A copy of the additional listener settings."""
        with self._lock:
            return copy.copy(self._settings.servers)

    @servers.setter
    def servers(self, value: dict[str, ServerConfig]) -> None:
        with self._lock:
            self._settings.servers = value