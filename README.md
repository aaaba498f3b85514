# logtailer

Building blocks for a log tailer: cut a stream of log data into
records, test records against content matchers, route the records that
pass to transfers, and load, build and validate the configuration that
ties servers, routers and transfers together. Three small helper
commands come with it.

## Installation

```
pip install logtailer
```

For running the tests:

```
pip install "logtailer[test]"
pytest
```

## Modules

| module                  | what it holds                                              |
|-------------------------|------------------------------------------------------------|
| `logtailer.wildcard`    | `wildcard_match`, `is_alphabet_char`, `is_number_char`     |
| `logtailer.matcher`     | `Matcher`, `ContainsMatcher`                               |
| `logtailer.logformat`   | `Format` and record splitting functions                    |
| `logtailer.config`      | config dataclasses, `ConfigError` and its subclasses       |
| `logtailer.config_check`| validation of a `Config`                                   |
| `logtailer.parse`       | building a `Config` from arguments, a file or defaults     |
| `logtailer.route`       | `Router`, `Runner`, `Transfer` and matcher builders        |
| `logtailer.dingmock`    | a mock DingTalk robot HTTP endpoint                        |
| `logtailer.logrecorder` | run a command, marking each chunk of its output            |
| `logtailer.pstop`       | interrupt processes by pid                                 |

## Wildcard prefixes

A format prefix is matched byte by byte against the start of the data:

| char | matches            |
|------|--------------------|
| `?`  | any single byte    |
| `~`  | an ASCII letter    |
| `!`  | an ASCII digit     |
| else | that exact byte    |

There is no `*`. Data shorter than the pattern never matches; an empty
pattern always does.

```python
from logtailer.wildcard import wildcard_match

wildcard_match("!!!!-!!-!!", b"2021-01-01 12:00:00 INFO ok")   # True
wildcard_match("!!!!-!!-!!", b"2021001001")                    # False
```

## Splitting records

A record starts with a line matching the format's prefix; the lines
after it that do not match are its following lines. Without a format,
only lines starting with a space or a tab are following lines.

```python
from logtailer.logformat import Format, split_first_log, split_following_log

fmt = Format(prefix="!!!!-!!-!!")
data = b"2022-06-02 ERROR boom\n  at line 1\n  at line 2\n2022-06-02 INFO ok\n"

first, remain = split_first_log(fmt, data)
# first  == b"2022-06-02 ERROR boom\n  at line 1\n  at line 2\n"
# remain == b"2022-06-02 INFO ok\n"

following, rest = split_following_log(fmt, b"  stack\n2022-06-02 next\n")
# following == b"  stack\n", rest == b"2022-06-02 next\n"
```

`index_to_line_start(fmt, data)` returns the data from the first record
start on, or `None` if there is none; `is_following_line(fmt, data)`
tells whether data begins a continuation line. `str(fmt)` gives
`format{prefix:!!!!-!!-!!}`.

## Matching

```python
from logtailer.matcher import ContainsMatcher

ContainsMatcher("ERROR", True).match(b"2020-12-25 ERROR exception")   # True
ContainsMatcher("ERROR", False).match(b"2020-12-25 ERROR exception")  # False
```

An empty pattern raises `ValueError`; empty data never matches, in
either mode. `match` also accepts `str`, encoded as UTF-8.

## Configuration

Configuration files are JSON or YAML (JSON is tried first). Names of
transfers, routers and servers are taken from their keys. Keys are read
ignoring case, underscores and dashes, so `log_level` and `loglevel`
are the same.

```yaml
port: 54321
log_level: INFO
default_format:
  prefix: "!!!!-!!-!!"
transfers:
  console:
    type: console
routers:
  errors:
    matchers:
      - contains: ["ERROR"]
        not_contains: ["IGNORE"]
    transfers: ["console"]
    buffer_size: 16
    blocking_mode: false
servers:
  app:
    command: "tail -f /var/log/app.log"
    routers: ["errors"]
```

A server may also give `commands` (one per line), `command_gen` or a
`file` section (`path`, `method`, `prefix`, `suffix`, `recursive`,
`dir_file_count_limit`).

Transfer types accepted by validation are `console`, `null`, `file`
(needs `dir`), and `webhook`, `ding`, `lark` (each needs `url`).

Loading and validating a file:

```python
from logtailer.parse import parse_file_config
from logtailer.config_check import initial_check_config
from logtailer.config import ConfigError

config = parse_file_config("config.yaml")
try:
    initial_check_config(config)
except ConfigError as err:
    print("bad config:", err)
```

Validation raises the first problem found as a subclass of
`ConfigError` (itself a `ValueError`): `ServerIdNilError`,
`RouterIdNilError`, `TransferIdNilError`, `RouterNotExistError`,
`TransferNotExistError`, `TransUrlNilError`, `TransTypeNilError`,
`TransTypeInvalidError`, `TransDirNilError`. A server with no command
or file, and a matcher with no patterns, are only logged.

Other helpers:

- `Config.from_dict(data, file)` and `Config.to_dict()` convert to and
  from plain data.
- `Config.save_to_file()` writes the config as YAML to the file it is
  bound to, if any.
- `Config.get_routers(names)` returns the named router configs, skipping
  unknown names.
- `build_router_configs_func(config, server_config)` returns a function
  that looks up a server's router configs on each call.
- `config_log_level(name)` sets the level of the `logtailer` logger from
  `ERROR`, `WARN`, `INFO`, `DEBUG` or `TRACE` (any case) and returns it,
  or `None` for an unknown name.

`logtailer.parse.parse_config(argv)` reads the options `-file`,
`-port`, `-cmd`, `-match-contains`, `-ding-url` and `-webhook-url`
(each also with two dashes). With `-file` the file is loaded; with
`-cmd` a one-server config is built by `build_command_line_config`;
with neither, `~/.logtail.json` is loaded if it exists and parses,
otherwise an empty config bound to that path is returned, and a
positive `-port` is applied.

## Routers

A router buffers incoming records in a bounded queue (16 by default;
a size of zero or less means the default). In non-blocking mode a full
queue drops the record and counts it; in blocking mode the sender waits
until there is room or the router stops. `start_loop()` routes queued
records until the router is stopped, a `None` item arrives, or a
transfer raises.

Transfers are subclasses of `logtailer.route.Transfer` implementing
`trans(source, *chunks)`.

```python
from logtailer.config import RouterConfig, MatcherConfig
from logtailer.route import Transfer, Runner, build_router


class Printer(Transfer):
    def trans(self, source, *chunks):
        for chunk in chunks:
            print(source, chunk)


router_config = RouterConfig(
    name="errors",
    matchers=[MatcherConfig(contains=["ERROR"])],
    transfers=["printer"],
)
router = build_router(Runner(), router_config, lambda names: [Printer()], "errors-1", "app")

router.route(b"2024-01-01 ERROR failed\n")    # printed
router.route(b"2024-01-01 INFO fine\n")       # filtered out
router.receive(b"2024-01-01 ERROR queued\n")  # queued for start_loop()
print(router.dropped_messages())
router.stop()
```

A `Runner` is a stop signal: `new_child()` gives a runner stopped along
with its parent, `stop_with(callback)` runs the callback only on the
call that does the stopping, and `wait(timeout)` blocks until stopped.

## Command-line tools

A mock DingTalk endpoint listening on port 55321. It prints the
`text.content` of every JSON message posted to it and answers `ok`;
malformed messages are reported on standard error:

```
logtailer-dingmock
```

Run a shell command with `/bin/sh` in its own process group and print a
separator line before every chunk of its standard output, which shows
how the output arrives:

```
logtailer-logrecorder -c "tail -f /var/log/app.log"
```

Send an interrupt signal to one or more processes:

```
logtailer-pstop 12345 12346
```

Process ids of 1 or lower, and arguments that are not numbers, are
rejected with `ValueError`; processing stops at the first failure.

## What this package does not do

There is no `logtail` command that runs a configuration. The package
does not itself start the commands or follow the files named by server
configs, has no built-in transfers (console, file, webhook, DingTalk or
Lark senders are only validated as config, not implemented), and has no
web API or log streaming server. Those pieces are left to the code that
uses these building blocks.