"""Command-line entry point for the New Relic CLI."""

from __future__ import annotations

import argparse
import json
import logging
import os
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from nrcli.agent import ObfuscationResult, obfuscate_string_with_key
from nrcli.config import Config, ConfigError, load_config
from nrcli.decode import DecodeError, decode_entity, decode_url
from nrcli.diagnose import DiagnoseError, run_diagnostics, update_binary
from nrcli.logsetup import DEFAULT_LOG_LEVEL, LOGGER_NAME, init_logger

__all__ = ["APP_NAME", "VERSION", "OUTPUT_FORMATS", "build_parser", "main"]

APP_NAME = "newrelic-dev"
VERSION = "dev"
OUTPUT_FORMATS = ("JSON", "Text")
DEFAULT_FORMAT = "JSON"

log = logging.getLogger(f"{LOGGER_NAME}.cli")

Handler = Callable[[argparse.Namespace, Config], int]


def _print_result(data: dict[str, Any], args: argparse.Namespace) -> None:
    fmt = str(args.format).strip()
    chosen = next((f for f in OUTPUT_FORMATS if f.lower() == fmt.lower()), None)
    if chosen is None:
        log.error("unsupported output format %s; using %s", fmt, DEFAULT_FORMAT)
        chosen = DEFAULT_FORMAT
    if chosen == "Text":
        for key, value in data.items():
            print(f"{key}  {value}")
        return
    indent = None if args.plain else 2
    separators = (",", ":") if args.plain else None
    print(json.dumps(data, indent=indent, separators=separators, ensure_ascii=False))


def _show_help(parser: argparse.ArgumentParser) -> Handler:
    def handler(args: argparse.Namespace, cfg: Config) -> int:
        parser.print_help()
        return 0

    return handler


def _cmd_version(args: argparse.Namespace, cfg: Config) -> int:
    print(f"newrelic version {VERSION}")
    return 0


def _cmd_config_set(args: argparse.Namespace, cfg: Config) -> int:
    try:
        cfg.set(args.key, args.value)
    except ConfigError as exc:
        log.error("%s", exc)
        return 1
    return 0


def _cmd_config_get(args: argparse.Namespace, cfg: Config) -> int:
    cfg.get(args.key)
    return 0


def _cmd_config_list(args: argparse.Namespace, cfg: Config) -> int:
    cfg.list()
    return 0


def _cmd_config_delete(args: argparse.Namespace, cfg: Config) -> int:
    try:
        cfg.delete(args.key)
    except ConfigError as exc:
        log.error("%s", exc)
        return 1
    return 0


def _cmd_obfuscate(args: argparse.Namespace, cfg: Config) -> int:
    result = ObfuscationResult(obfuscate_string_with_key(args.value, args.key))
    _print_result(result.to_dict(), args)
    return 0


def _cmd_decode_entity(args: argparse.Namespace, cfg: Config) -> int:
    try:
        print(decode_entity("".join(args.entity), args.key))
    except DecodeError as exc:
        log.error("%s", exc)
        return 1
    return 0


def _cmd_decode_url(args: argparse.Namespace, cfg: Config) -> int:
    try:
        print(decode_url("".join(args.url), args.param, args.search))
    except DecodeError as exc:
        message = str(exc)
        if message.startswith(f"{args.search} not found in "):
            print(message, end="")
            return 0
        log.error("%s", message)
        return 1
    return 0


def _run_nrdiag(*nrdiag_args: str) -> int:
    try:
        run_diagnostics(*nrdiag_args)
    except (subprocess.CalledProcessError, DiagnoseError, OSError) as exc:
        log.error("%s", exc)
        return 1
    return 0


def _cmd_diagnose_run(args: argparse.Namespace, cfg: Config) -> int:
    if args.list_suites:
        return _run_nrdiag("-help", "suites")
    if args.suites:
        return _run_nrdiag("-suites", args.suites)
    return _run_nrdiag()


def _cmd_diagnose_lint(args: argparse.Namespace, cfg: Config) -> int:
    return _run_nrdiag("-t", "Java/Config/ValidateSettings", "-c", args.config_file)


def _cmd_diagnose_update(args: argparse.Namespace, cfg: Config) -> int:
    try:
        update_binary()
    except (subprocess.CalledProcessError, DiagnoseError, OSError) as exc:
        log.error("%s", exc)
        return 1
    return 0


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument(
        "--format",
        help=f"output text format [{', '.join(OUTPUT_FORMATS)}]",
    )
    common.add_argument("--plain", action="store_true", help="output compact text")
    return common


def _add_config_commands(commands: Any, common: argparse.ArgumentParser) -> None:
    config = commands.add_parser(
        "config",
        parents=[common],
        help="Manage the configuration of the New Relic CLI",
    )
    config.set_defaults(handler=_show_help(config))
    sub = config.add_subparsers(title="commands", metavar="COMMAND")

    listing = sub.add_parser(
        "list", aliases=["ls"], parents=[common],
        help="List the current configuration values",
    )
    listing.set_defaults(handler=_cmd_config_list)

    setter = sub.add_parser("set", parents=[common], help="Set a configuration value")
    setter.add_argument("-k", "--key", required=True, help="the key to set")
    setter.add_argument("-v", "--value", required=True, help="the value to set")
    setter.set_defaults(handler=_cmd_config_set)

    getter = sub.add_parser("get", parents=[common], help="Get a configuration value")
    getter.add_argument("-k", "--key", required=True, help="the key to get")
    getter.set_defaults(handler=_cmd_config_get)

    deleter = sub.add_parser(
        "delete", aliases=["rm"], parents=[common],
        help="Delete a configuration value",
    )
    deleter.add_argument("-k", "--key", required=True, help="the key to delete")
    deleter.set_defaults(handler=_cmd_config_delete)


def _add_agent_commands(commands: Any, common: argparse.ArgumentParser) -> None:
    agent = commands.add_parser(
        "agent", parents=[common], help="Utilities for New Relic Agents"
    )
    agent.set_defaults(handler=_show_help(agent))
    agent_sub = agent.add_subparsers(title="commands", metavar="COMMAND")

    config = agent_sub.add_parser(
        "config", parents=[common],
        help="Configuration utilities/helpers for New Relic agents",
    )
    config.set_defaults(handler=_show_help(config))
    config_sub = config.add_subparsers(title="commands", metavar="COMMAND")

    obfuscate = config_sub.add_parser(
        "obfuscate", parents=[common],
        help="Obfuscate a configuration value using a key",
    )
    obfuscate.add_argument(
        "-k", "--key", required=True,
        help="the key to use when obfuscating the clear-text value",
    )
    obfuscate.add_argument(
        "-v", "--value", required=True,
        help="the value, in clear text, to be obfuscated",
    )
    obfuscate.set_defaults(handler=_cmd_obfuscate)


def _add_decode_commands(commands: Any, common: argparse.ArgumentParser) -> None:
    decode = commands.add_parser(
        "decode", parents=[common], help="Decodes NR1 URL Strings"
    )
    decode.set_defaults(handler=_show_help(decode))
    sub = decode.add_subparsers(title="commands", metavar="COMMAND")

    entity = sub.add_parser("entity", parents=[common], help="Decodes NR1 Entitys")
    entity.add_argument(
        "-k", "--key", required=True,
        help="the key you require back from an entity",
    )
    entity.add_argument("entity", nargs="*", help="the encoded entity GUID")
    entity.set_defaults(handler=_cmd_decode_entity)

    url = sub.add_parser("url", parents=[common], help="Decodes NR1 URL Strings")
    url.add_argument(
        "-p", "--param", required=True,
        help="the query parameter you want to decode",
    )
    url.add_argument(
        "-s", "--search", required=True, help="the search key you want returned"
    )
    url.add_argument("url", nargs="*", help="the NR1 URL")
    url.set_defaults(handler=_cmd_decode_url)


def _add_diagnose_commands(commands: Any, common: argparse.ArgumentParser) -> None:
    diagnose = commands.add_parser(
        "diagnose", parents=[common],
        help="Troubleshoot your New Relic installation",
    )
    diagnose.set_defaults(handler=_show_help(diagnose))
    sub = diagnose.add_subparsers(title="commands", metavar="COMMAND")

    run = sub.add_parser(
        "run", parents=[common],
        help="Troubleshoot your New Relic-instrumented application",
    )
    run.add_argument(
        "--attachment-key", default="",
        help="Attachment key for automatic upload to a support ticket "
        "(get key from an existing ticket).",
    )
    run.add_argument(
        "--verbose", action="store_true",
        help="Display verbose logging during task execution.",
    )
    run.add_argument(
        "--suites", default="",
        help="The task suite or comma-separated list of suites to run.",
    )
    run.add_argument(
        "--list-suites", action="store_true",
        help="List the task suites available for the --suites argument.",
    )
    run.set_defaults(handler=_cmd_diagnose_run)

    lint = sub.add_parser(
        "lint", parents=[common], help="Validate your agent config file"
    )
    lint.add_argument(
        "--config-file", default="",
        help="Path to the config file to be validated.",
    )
    lint.set_defaults(handler=_cmd_diagnose_lint)

    update = sub.add_parser(
        "update", parents=[common],
        help="Update the New Relic Diagnostics binary if necessary",
    )
    update.set_defaults(handler=_cmd_diagnose_update)


def build_parser(prerelease: bool = False) -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="The New Relic CLI enables users to perform tasks "
        "against the New Relic APIs",
        parents=[common],
    )
    parser.set_defaults(
        format=DEFAULT_FORMAT,
        plain=False,
        prerelease=prerelease,
        handler=_show_help(parser),
    )
    commands = parser.add_subparsers(title="commands", metavar="COMMAND")

    _add_agent_commands(commands, common)
    _add_config_commands(commands, common)
    _add_decode_commands(commands, common)
    _add_diagnose_commands(commands, common)

    version = commands.add_parser(
        "version", parents=[common], help="Show the version of the New Relic CLI"
    )
    version.set_defaults(handler=_cmd_version)
    return parser


def _exit_code(exc: SystemExit) -> int:
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit status."""
    os.environ["NEW_RELIC_CLI_VERSION"] = VERSION
    init_logger(DEFAULT_LOG_LEVEL)

    try:
        cfg = load_config(None)
    except ConfigError as exc:
        log.error("%s", exc)
        return 1

    prerelease = cfg.pre_release_features.as_bool()
    if prerelease:
        log.debug("Pre-release mode active")

    parser = build_parser(prerelease)
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return _exit_code(exc)

    return args.handler(args, cfg)


if __name__ == "__main__":
    raise SystemExit(main())