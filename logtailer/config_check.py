"""Validation of a configuration, filling in a few defaults."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from logtailer.config import (
    TYPE_CONSOLE,
    TYPE_DING,
    TYPE_FILE,
    TYPE_LARK,
    TYPE_NULL,
    TYPE_WEBHOOK,
    Config,
    MatcherConfig,
    RouterConfig,
    RouterIdNilError,
    RouterNotExistError,
    ServerConfig,
    ServerIdNilError,
    TransDirNilError,
    TransferConfig,
    TransferIdNilError,
    TransferNotExistError,
    TransTypeInvalidError,
    TransTypeNilError,
    TransUrlNilError,
)

logger = logging.getLogger(__name__)

_URL_TYPES = (TYPE_WEBHOOK, TYPE_DING, TYPE_LARK)
_PLAIN_TYPES = (TYPE_CONSOLE, TYPE_NULL)


def initial_check_config(config: Config) -> None:
    """Check the whole config, raising a ConfigError on the first problem."""
    if config.routers is None:
        config.routers = {}
    if config.transfers is None:
        config.transfers = {}

    if not config.port:
        logger.info("port is zero")

    for transfer in config.transfers.values():
        check_transfer_config(transfer)

    for router in config.routers.values():
        check_router_config(config, router)

    for server in (config.servers or {}).values():
        check_server_config(config, server)


def check_server_config(config: Config, server: ServerConfig) -> None:
    """Check a server config and that the routers it names exist."""
    if not server.name:
        raise ServerIdNilError()

    if not (server.command or server.commands or server.command_gen or server.file is not None):
        logger.warning("no tailing command/file config for server %s", server.name)

    routers = config.routers or {}
    for name in server.routers:
        if name not in routers:
            raise RouterNotExistError(name)


def check_router_config(config: Config, router: RouterConfig) -> None:
    """Check a router config and that the transfers it names exist."""
    if not router.name:
        raise RouterIdNilError()

    check_matchers(router.matchers)

    transfers = config.transfers or {}
    for name in router.transfers:
        if name not in transfers:
            raise TransferNotExistError(name)


def check_matchers(matchers: Iterable[MatcherConfig] | None) -> None:
    """Check matcher configs; an empty matcher is allowed and only logged."""
    for matcher in matchers or ():
        if not matcher.contains and not matcher.not_contains:
            logger.debug("match contains is nil")


def check_transfer_config(transfer: TransferConfig) -> None:
    """Check a transfer config's name, type and the fields its type needs."""
    if not transfer.name:
        raise TransferIdNilError()

    if not transfer.type:
        raise TransTypeNilError()

    if transfer.type in _URL_TYPES:
        if not transfer.url:
            raise TransUrlNilError()
    elif transfer.type == TYPE_FILE:
        if not transfer.dir:
            raise TransDirNilError()
    elif transfer.type not in _PLAIN_TYPES:
        raise TransTypeInvalidError(transfer.type)