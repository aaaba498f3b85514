import logging

import pytest

from logtailer.config import (
    Config,
    ConfigError,
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
from logtailer.config_check import (
    check_matchers,
    check_router_config,
    check_server_config,
    check_transfer_config,
    initial_check_config,
)


def test_initial_check_config_valid():
    config = Config(
        transfers={"console": TransferConfig(name="console", type="console")},
        routers={"r1": RouterConfig(name="r1", transfers=["console"])},
        servers={"s1": ServerConfig(name="s1", command="echo test", routers=["r1"])},
    )

    initial_check_config(config)

    assert list(config.routers) == ["r1"]
    assert list(config.transfers) == ["console"]
    assert config.servers["s1"].routers == ["r1"]


def test_initial_check_config_nil_maps():
    config = Config(routers=None, transfers=None)
    initial_check_config(config)
    assert config.routers == {}
    assert config.transfers == {}


def test_initial_check_config_invalid_transfer():
    config = Config(transfers={"bad": TransferConfig(name="bad", type="unknown")})
    with pytest.raises(TransTypeInvalidError) as excinfo:
        initial_check_config(config)
    assert str(excinfo.value) == "invalid transfer type: unknown"


def test_initial_check_config_invalid_router():
    config = Config(routers={"r1": RouterConfig(name="r1", transfers=["nonexistent"])})
    with pytest.raises(TransferNotExistError) as excinfo:
        initial_check_config(config)
    assert str(excinfo.value) == "transfer not exists: nonexistent"


def test_initial_check_config_invalid_server():
    config = Config(servers={"s1": ServerConfig(name="s1", routers=["nonexistent"])})
    with pytest.raises(RouterNotExistError) as excinfo:
        initial_check_config(config)
    assert str(excinfo.value) == "router not exists: nonexistent"


def test_initial_check_config_logs_zero_port(caplog):
    caplog.set_level(logging.INFO, logger="logtailer")
    initial_check_config(Config())
    assert "port is zero" in caplog.text


@pytest.fixture
def server_check_config():
    return Config(routers={"r1": RouterConfig(name="r1")})


def test_check_server_config_empty_name(server_check_config):
    with pytest.raises(ServerIdNilError) as excinfo:
        check_server_config(server_check_config, ServerConfig())
    assert str(excinfo.value) == "server id is nil"


def test_check_server_config_valid_with_command(server_check_config, caplog):
    caplog.set_level(logging.DEBUG, logger="logtailer")
    check_server_config(
        server_check_config, ServerConfig(name="s1", command="echo", routers=["r1"])
    )
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []


def test_check_server_config_no_tailing_config_only_warns(server_check_config, caplog):
    caplog.set_level(logging.DEBUG, logger="logtailer")
    check_server_config(server_check_config, ServerConfig(name="s1"))
    assert "no tailing command/file config for server s1" in caplog.text


def test_check_server_config_router_not_exists(server_check_config):
    with pytest.raises(RouterNotExistError):
        check_server_config(
            server_check_config, ServerConfig(name="s1", command="echo", routers=["missing"])
        )


@pytest.fixture
def router_check_config():
    return Config(transfers={"t1": TransferConfig(name="t1", type="console")})


def test_check_router_config_empty_name(router_check_config):
    with pytest.raises(RouterIdNilError):
        check_router_config(router_check_config, RouterConfig())


def test_check_router_config_valid(router_check_config, caplog):
    caplog.set_level(logging.DEBUG, logger="logtailer")
    check_router_config(router_check_config, RouterConfig(name="r1", transfers=["t1"]))
    assert caplog.records == []


def test_check_router_config_transfer_not_exists(router_check_config):
    with pytest.raises(TransferNotExistError) as excinfo:
        check_router_config(router_check_config, RouterConfig(name="r1", transfers=["missing"]))
    assert excinfo.value.detail == "missing"


def test_check_matchers_none_logs_nothing(caplog):
    caplog.set_level(logging.DEBUG, logger="logtailer")
    check_matchers(None)
    check_matchers([MatcherConfig(contains=["ERROR"])])
    assert "match contains is nil" not in caplog.text


def test_check_matchers_empty_only_logs_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="logtailer")
    check_matchers([MatcherConfig()])
    assert "match contains is nil" in caplog.text
    assert all(r.levelno == logging.DEBUG for r in caplog.records)


@pytest.mark.parametrize(
    ("transfer", "error"),
    [
        (TransferConfig(), TransferIdNilError),
        (TransferConfig(name="t"), TransTypeNilError),
        (TransferConfig(name="t", type="bad"), TransTypeInvalidError),
        (TransferConfig(name="t", type="file"), TransDirNilError),
        (TransferConfig(name="t", type="webhook"), TransUrlNilError),
        (TransferConfig(name="t", type="ding"), TransUrlNilError),
        (TransferConfig(name="t", type="lark"), TransUrlNilError),
    ],
)
def test_check_transfer_config_errors(transfer, error):
    with pytest.raises(error):
        initial_check_config(Config(transfers={transfer.name: transfer}))
    with pytest.raises(ConfigError):
        check_transfer_config(transfer)


@pytest.mark.parametrize(
    "transfer",
    [
        TransferConfig(name="t", type="console"),
        TransferConfig(name="t", type="null"),
        TransferConfig(name="t", type="file", dir="/tmp"),
        TransferConfig(name="t", type="webhook", url="http://x"),
        TransferConfig(name="t", type="ding", url="http://x"),
        TransferConfig(name="t", type="lark", url="http://x"),
    ],
)
def test_check_transfer_config_valid(transfer):
    config = Config(transfers={transfer.name: transfer}, routers=None)
    initial_check_config(config)
    assert config.routers == {}
    assert config.transfers == {"t": transfer}