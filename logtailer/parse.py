"""Building a configuration from the command line, a config file or defaults."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from logtailer.config import (
    DEFAULT_ID,
    TYPE_DING,
    TYPE_WEBHOOK,
    Config,
    ConfigError,
    MatcherConfig,
    RouterConfig,
    ServerConfig,
    TransferConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".logtail.json"

_DESCRIPTION = "logtail - a log tailing utility with filtering and forwarding"

_EPILOG = """\
Examples:
  # Tail a command output to console
  logtail -cmd "tail -f /var/log/syslog"

  # Tail with a filter for lines containing "ERROR"
  logtail -cmd "tail -f /var/log/app.log" -match-contains "ERROR"

  # Tail and forward matched lines to a webhook
  logtail -cmd "tail -f /var/log/app.log" -match-contains "ERROR" -webhook-url "http://localhost:8080/hook"

  # Tail and send alerts to DingTalk
  logtail -cmd "tail -f /var/log/app.log" -match-contains "FATAL" -ding-url "https://ding.example.com/robot/send?access_token=token"

  # Start with a config file for advanced setup (multiple servers, routers, transfers)
  logtail -file /path/to/config.yaml

  # Start with web API on a specific port
  logtail -cmd "tail -f /var/log/app.log" -port 54321

  # Use default config file (~/.logtail.json) with web API port
  logtail -port 54321

Config file:
  If no -file or -cmd is specified, logtail looks for ~/.logtail.json as the default config.
  The config file supports JSON and YAML formats with servers, routers, matchers, and transfers.
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logtail",
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-file", "--file", dest="file", default="",
        help="path to the config file (JSON or YAML format)",
    )
    parser.add_argument(
        "-port", "--port", dest="port", type=int, default=0,
        help="HTTP port for the web API and websocket log streaming",
    )
    parser.add_argument(
        "-cmd", "--cmd", dest="cmd", default="",
        help="shell command to tail output from",
    )
    parser.add_argument(
        "-match-contains", "--match-contains", dest="match_contains", default="",
        help="filter log lines containing this string",
    )
    parser.add_argument(
        "-ding-url", "--ding-url", dest="ding_url", default="",
        help="DingTalk webhook URL for sending matched log lines",
    )
    parser.add_argument(
        "-webhook-url", "--webhook-url", dest="webhook_url", default="",
        help="webhook URL for sending matched log lines via HTTP POST",
    )
    return parser


def parse_config(argv: Sequence[str] | None = None) -> Config:
    """Build the configuration from command-line arguments."""
    args = _build_parser().parse_args(argv)

    if args.file:
        return parse_file_config(args.file)

    config_file = str(Path.home() / DEFAULT_CONFIG_NAME)

    if args.cmd:
        config = build_command_line_config(
            args.port, args.cmd, args.match_contains, args.ding_url, args.webhook_url
        )
        config.file = config_file
        return config

    logger.info("default config file: %s", config_file)
    config = build_default_config(config_file)

    if args.port > 0:
        config.port = args.port

    return config


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return yaml.safe_load(text)


def parse_file_config(path: str | Path) -> Config:
    """Read a JSON or YAML config file; names are taken from the map keys."""
    text = Path(path).read_text(encoding="utf-8")
    return Config.from_dict(_load(text), file=str(path))


def build_default_config(path: str | Path) -> Config:
    """Load the config file if it exists and parses, else return an empty config bound to it."""
    if Path(path).exists():
        try:
            return parse_file_config(path)
        except (OSError, yaml.YAMLError, ConfigError) as exc:
            logger.warning("load default config error: %s", exc)

    config = build_empty_config()
    config.file = str(path)
    return config


def build_command_line_config(
    port: int,
    command: str,
    match_contains: str,
    ding_url: str,
    webhook_url: str,
) -> Config:
    """Build a config tailing one command, with an optional filter and destination."""
    config = build_empty_config()

    if port > 0:
        config.port = port

    config.servers[DEFAULT_ID] = ServerConfig(
        name=DEFAULT_ID,
        routers=[DEFAULT_ID],
        command=command,
    )

    if not (ding_url or webhook_url or match_contains):
        return config

    router = RouterConfig(transfers=[DEFAULT_ID])
    config.routers[DEFAULT_ID] = router

    if match_contains:
        router.matchers = [MatcherConfig(contains=[match_contains])]

    if ding_url:
        config.transfers[DEFAULT_ID] = TransferConfig(name=DEFAULT_ID, type=TYPE_DING, url=ding_url)
    elif webhook_url:
        config.transfers[DEFAULT_ID] = TransferConfig(
            name=DEFAULT_ID, type=TYPE_WEBHOOK, url=webhook_url
        )

    return config


def build_empty_config() -> Config:
    """Return a config with no servers, routers or transfers and log level INFO."""
    return Config(log_level="INFO")