"""Configuration model: servers, routers, matchers and transfers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from logtailer.logformat import Format

logger = logging.getLogger(__name__)
_package_logger = logging.getLogger("logtailer")

DEFAULT_ID = "default"
FORMAT_DATE_TIME = "%Y-%m-%d %H:%M:%S"

TYPE_WEBHOOK = "webhook"
TYPE_DING = "ding"
TYPE_LARK = "lark"
TYPE_FILE = "file"
TYPE_CONSOLE = "console"
TYPE_NULL = "null"

SERVER_TYPES = ("command", "commands", "command_gen", "file")

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LOG_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}


class ConfigError(ValueError):
    """Base class of configuration errors."""

    message = "invalid config"

    def __init__(self, detail: object = None) -> None:
        self.detail = detail
        text = self.message if detail is None else f"{self.message}: {detail}"
        super().__init__(text)


class ServerIdNilError(ConfigError):
    message = "server id is nil"


class RouterIdNilError(ConfigError):
    message = "router id is nil"


class TransferIdNilError(ConfigError):
    message = "transfer id is nil"


class RouterNotExistError(ConfigError):
    message = "router not exists"


class TransferNotExistError(ConfigError):
    message = "transfer not exists"


class TransUrlNilError(ConfigError):
    message = "transfer url is nil"


class TransTypeNilError(ConfigError):
    message = "transfer type is nil"


class TransTypeInvalidError(ConfigError):
    message = "invalid transfer type"


class TransDirNilError(ConfigError):
    message = "transfer dir is nil"


@dataclass
class MatcherConfig:
    """Substrings a record must contain and must not contain."""

    contains: list[str] = field(default_factory=list)
    not_contains: list[str] = field(default_factory=list)


@dataclass
class RouterConfig:
    """A router: matchers deciding what goes to which transfers."""

    name: str = ""
    matchers: list[MatcherConfig] = field(default_factory=list)
    transfers: list[str] = field(default_factory=list)
    buffer_size: int = 0
    blocking_mode: bool = False


@dataclass
class TransferConfig:
    """A destination for routed records."""

    name: str = ""
    type: str = ""
    url: str = ""
    dir: str = ""
    prefix: str = ""
    max_idle_conns: int = 0
    idle_conn_timeout: str = ""
    rate_limit: float = 0.0
    rate_burst: int = 0
    batch_size: int = 0
    batch_timeout: str = ""


@dataclass
class FileConfig:
    """Tailing of a file or of the files in a directory."""

    path: str = ""
    method: str = ""
    prefix: str = ""
    suffix: str = ""
    recursive: bool = False
    dir_file_count_limit: int = 0


@dataclass
class ServerConfig:
    """A log source: a command, several commands, a command generator or files."""

    name: str = ""
    format: Format | None = None
    routers: list[str] = field(default_factory=list)
    command: str = ""
    commands: str = ""
    command_gen: str = ""
    file: FileConfig | None = None


RouterConfigsFunc = Callable[[], list[RouterConfig]]


@dataclass
class Config:
    """The whole configuration."""

    port: int = 0
    log_level: str = ""
    default_format: Format | None = None
    statistic_period_minutes: int = 0
    transfers: dict[str, TransferConfig] = field(default_factory=dict)
    routers: dict[str, RouterConfig] = field(default_factory=dict)
    servers: dict[str, ServerConfig] = field(default_factory=dict)
    file: str = field(default="", repr=False)

    def get_routers(self, names: list[str]) -> list[RouterConfig]:
        """Return the router configs with the given names, skipping unknown ones."""
        routers = self.routers or {}
        return [routers[name] for name in names if name in routers]

    def save_to_file(self) -> None:
        """Write the config as YAML to the file it was loaded from, if any."""
        if not self.file:
            logger.debug("not save config changes for config file is null")
            return

        try:
            text = yaml.safe_dump(self.to_dict(), allow_unicode=True, sort_keys=False)
        except yaml.YAMLError as exc:
            logger.warning("config error: %s", exc)
            return

        try:
            Path(self.file).write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("save config to file error: %s", exc)

    def to_dict(self) -> dict[str, Any]:
        """Return the config as plain data suitable for YAML or JSON."""
        data: dict[str, Any] = {}
        if self.port:
            data["port"] = self.port
        if self.log_level:
            data["log_level"] = self.log_level
        if self.default_format is not None:
            data["default_format"] = _format_to_dict(self.default_format)
        data["statistic_period_minutes"] = self.statistic_period_minutes
        data["transfers"] = {k: _transfer_to_dict(v) for k, v in (self.transfers or {}).items()}
        data["routers"] = {k: _router_to_dict(v) for k, v in (self.routers or {}).items()}
        data["servers"] = {k: _server_to_dict(v) for k, v in (self.servers or {}).items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None, file: str = "") -> Config:
        """Build a config from plain data; names are taken from the map keys.

        Keys are matched ignoring case, underscores and dashes, so both
        ``log_level`` and ``loglevel`` are accepted.
        """
        values = _normalize(data, "config")
        default_format = values.get("defaultformat")
        return cls(
            port=_int(values.get("port"), "port"),
            log_level=_str(values.get("loglevel"), "log_level"),
            default_format=None if default_format is None else _format_from(default_format),
            statistic_period_minutes=_int(
                values.get("statisticperiodminutes"), "statistic_period_minutes"
            ),
            transfers={
                name: _transfer_from(name, value)
                for name, value in _section(values.get("transfers"), "transfers").items()
            },
            routers={
                name: _router_from(name, value)
                for name, value in _section(values.get("routers"), "routers").items()
            },
            servers={
                name: _server_from(name, value)
                for name, value in _section(values.get("servers"), "servers").items()
            },
            file=file,
        )


def config_log_level(level: str) -> int | None:
    """Set the package log level by name; return the level set, or None if unknown."""
    value = _LOG_LEVELS.get(level.upper())
    if value is not None:
        _package_logger.setLevel(value)
    return value


def build_router_configs_func(config: Config, server_config: ServerConfig) -> RouterConfigsFunc:
    """Return a function that looks up the server's router configs on each call."""

    def router_configs() -> list[RouterConfig]:
        configs = []
        routers = config.routers or {}
        for name in server_config.routers:
            router = routers.get(name)
            if router is None:
                logger.error("router not exists: %s", name)
            else:
                configs.append(router)
        return configs

    return router_configs


def _normalize(data: Any, what: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")
    return {str(k).replace("_", "").replace("-", "").lower(): v for k, v in data.items()}


def _section(data: Any, what: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")
    return {str(k): v for k, v in data.items()}


def _int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _float(value: Any, key: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    return float(value)


def _bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be a boolean, got {value!r}")
    return value


def _str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    return str(value)


def _strs(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key} must be a list, got {value!r}")
    return [_str(item, key) for item in value]


def _format_from(data: Any) -> Format:
    values = _normalize(data, "format")
    return Format(prefix=_str(values.get("prefix"), "prefix"))


def _format_to_dict(fmt: Format) -> dict[str, Any]:
    return {"prefix": fmt.prefix}


def _matcher_from(data: Any) -> MatcherConfig:
    values = _normalize(data, "matcher")
    return MatcherConfig(
        contains=_strs(values.get("contains"), "contains"),
        not_contains=_strs(values.get("notcontains"), "not_contains"),
    )


def _matcher_to_dict(matcher: MatcherConfig) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if matcher.contains:
        data["contains"] = list(matcher.contains)
    if matcher.not_contains:
        data["not_contains"] = list(matcher.not_contains)
    return data


def _router_from(name: str, data: Any) -> RouterConfig:
    values = _normalize(data, f"router {name}")
    matchers = values.get("matchers")
    if matchers is not None and not isinstance(matchers, (list, tuple)):
        raise ConfigError(f"matchers must be a list, got {matchers!r}")
    return RouterConfig(
        name=name,
        matchers=[_matcher_from(m) for m in matchers or ()],
        transfers=_strs(values.get("transfers"), "transfers"),
        buffer_size=_int(values.get("buffersize"), "buffer_size"),
        blocking_mode=_bool(values.get("blockingmode"), "blocking_mode"),
    )


def _router_to_dict(router: RouterConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "matchers": [_matcher_to_dict(m) for m in router.matchers],
        "transfers": list(router.transfers),
    }
    if router.buffer_size:
        data["buffer_size"] = router.buffer_size
    if router.blocking_mode:
        data["blocking_mode"] = True
    return data


def _transfer_from(name: str, data: Any) -> TransferConfig:
    values = _normalize(data, f"transfer {name}")
    return TransferConfig(
        name=name,
        type=_str(values.get("type"), "type"),
        url=_str(values.get("url"), "url"),
        dir=_str(values.get("dir"), "dir"),
        prefix=_str(values.get("prefix"), "prefix"),
        max_idle_conns=_int(values.get("maxidleconns"), "max_idle_conns"),
        idle_conn_timeout=_str(values.get("idleconntimeout"), "idle_conn_timeout"),
        rate_limit=_float(values.get("ratelimit"), "rate_limit"),
        rate_burst=_int(values.get("rateburst"), "rate_burst"),
        batch_size=_int(values.get("batchsize"), "batch_size"),
        batch_timeout=_str(values.get("batchtimeout"), "batch_timeout"),
    )


def _transfer_to_dict(transfer: TransferConfig) -> dict[str, Any]:
    data: dict[str, Any] = {"type": transfer.type}
    optional = {
        "url": transfer.url,
        "dir": transfer.dir,
        "prefix": transfer.prefix,
        "max_idle_conns": transfer.max_idle_conns,
        "idle_conn_timeout": transfer.idle_conn_timeout,
        "rate_limit": transfer.rate_limit,
        "rate_burst": transfer.rate_burst,
        "batch_size": transfer.batch_size,
        "batch_timeout": transfer.batch_timeout,
    }
    data.update({k: v for k, v in optional.items() if v})
    return data


def _file_from(data: Any) -> FileConfig:
    values = _normalize(data, "file")
    return FileConfig(
        path=_str(values.get("path"), "path"),
        method=_str(values.get("method"), "method"),
        prefix=_str(values.get("prefix"), "prefix"),
        suffix=_str(values.get("suffix"), "suffix"),
        recursive=_bool(values.get("recursive"), "recursive"),
        dir_file_count_limit=_int(values.get("dirfilecountlimit"), "dir_file_count_limit"),
    )


def _file_to_dict(file_config: FileConfig) -> dict[str, Any]:
    return {
        "path": file_config.path,
        "method": file_config.method,
        "prefix": file_config.prefix,
        "suffix": file_config.suffix,
        "recursive": file_config.recursive,
        "dir_file_count_limit": file_config.dir_file_count_limit,
    }


def _server_from(name: str, data: Any) -> ServerConfig:
    values = _normalize(data, f"server {name}")
    fmt = values.get("format")
    file_config = values.get("file")
    return ServerConfig(
        name=name,
        format=None if fmt is None else _format_from(fmt),
        routers=_strs(values.get("routers"), "routers"),
        command=_str(values.get("command"), "command"),
        commands=_str(values.get("commands"), "commands"),
        command_gen=_str(values.get("commandgen"), "command_gen"),
        file=None if file_config is None else _file_from(file_config),
    )


def _server_to_dict(server: ServerConfig) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if server.format is not None:
        data["format"] = _format_to_dict(server.format)
    data["routers"] = list(server.routers)
    if server.command:
        data["command"] = server.command
    if server.commands:
        data["commands"] = server.commands
    if server.command_gen:
        data["command_gen"] = server.command_gen
    if server.file is not None:
        data["file"] = _file_to_dict(server.file)
    return data