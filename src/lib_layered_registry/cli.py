"""CLI adapter for ``lib_layered_registry`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how a registry resolves keys (defaults, a config file,
environment variables and overrides) from a shell, and write the resolved
settings back to disk, without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_env_prefix` / :func:`cli_env_name` – environment naming helpers.
* :func:`cli_get` / :func:`cli_keys` / :func:`cli_dump` / :func:`cli_write` –
  build a registry from options and query or persist it.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: it only talks to :class:`lib_layered_registry.core.Registry`
and the environment naming helpers. ``lib_cli_exit_tools`` owns the exit code
strategy so every command behaves the same across shells and CI.
"""

from __future__ import annotations

import asyncio
import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import derive_env_name
from .core import Registry, default_env_prefix
from .domain.paths import split_key

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DIST_NAME: Final[str] = "lib_layered_registry"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Layered configuration registry",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DIST_NAME,
    message="lib_layered_registry version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DIST_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DIST_NAME} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DIST_NAME)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["env-prefix", "billing-service"])
    >>> result.output.strip()
    'BILLING_SERVICE'
    """

    click.echo(default_env_prefix(slug))


@cli.command("env-name", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@click.option("--prefix", default="", help="Environment prefix applied by automatic lookup")
@click.option("--delimiter", default=".", show_default=True, help="Key delimiter")
def cli_env_name(key: str, prefix: str, delimiter: str) -> None:
    """Print the variable name automatic lookup consults for *key*."""

    click.echo(derive_env_name(split_key(key, delimiter), prefix.upper()))


def _registry_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by commands that build a registry."""

    options = [
        click.option(
            "--config",
            "config_file",
            type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
            default=None,
            help="Configuration file to read (skips the search)",
        ),
        click.option("--name", "config_name", default=None, help="Config file base name to search for"),
        click.option("--type", "config_type", default=None, help="Config file type (json5, json, toml, yaml, yml)"),
        click.option(
            "--path",
            "config_paths",
            multiple=True,
            type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
            help="Directory searched for the config file (repeatable, in order)",
        ),
        click.option("--default", "defaults", multiple=True, metavar="KEY=VALUE", help="Default value (repeatable)"),
        click.option("--set", "overrides", multiple=True, metavar="KEY=VALUE", help="Override value (repeatable)"),
        click.option("--env-prefix", default=None, help="Prefix for automatic environment lookup"),
        click.option("--automatic-env/--no-automatic-env", default=False, help="Consult PREFIX_KEY variables"),
        click.option("--bind", "bindings", multiple=True, metavar="KEY=VAR", help="Bind a key to a variable"),
        click.option("--alias", "aliases", multiple=True, metavar="ALIAS=KEY", help="Register an alias"),
        click.option("--delimiter", default=".", show_default=True, help="Key delimiter"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_registry(
    *,
    config_file: Optional[Path],
    config_name: Optional[str],
    config_type: Optional[str],
    config_paths: Sequence[Path],
    defaults: Sequence[str],
    overrides: Sequence[str],
    env_prefix: Optional[str],
    automatic_env: bool,
    bindings: Sequence[str],
    aliases: Sequence[str],
    delimiter: str,
) -> Registry:
    """Create a registry from CLI options; reads a config file only when one was requested."""

    registry = Registry(key_delimiter=delimiter)
    for key, value in (_split_pair(entry, "--default") for entry in defaults):
        registry.set_default(key, _parse_value(value))
    if config_name:
        registry.set_config_name(config_name)
    if config_type:
        registry.set_config_type(config_type)
    for directory in config_paths:
        registry.add_config_path(directory)
    if config_file is not None:
        registry.set_config_file(config_file)
    if config_file is not None or config_paths:
        registry.read_in_config()
    if env_prefix:
        registry.set_env_prefix(env_prefix)
    if automatic_env:
        registry.automatic_env()
    for key, variable in (_split_pair(entry, "--bind") for entry in bindings):
        registry.bind_env(key, variable)
    for alias, key in (_split_pair(entry, "--alias") for entry in aliases):
        registry.register_alias(alias, key)
    for key, value in (_split_pair(entry, "--set") for entry in overrides):
        registry.set(key, _parse_value(value))
    return registry


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@_registry_options
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_get(key: str, indent: Optional[int], **options: Any) -> None:
    """Print the resolved value of *key* as JSON; exits non-zero when it is not set."""

    registry = _build_registry(**options)
    if not registry.is_set(key):
        raise click.ClickException(f"key not set: {key}")
    click.echo(json.dumps(registry.get(key), indent=indent, ensure_ascii=False))


@cli.command("keys", context_settings=CLICK_CONTEXT_SETTINGS)
@_registry_options
def cli_keys(**options: Any) -> None:
    """Print every known key, one per line, sorted."""

    for key in _build_registry(**options).all_keys():
        click.echo(key)


@cli.command("dump", context_settings=CLICK_CONTEXT_SETTINGS)
@_registry_options
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_dump(indent: Optional[int], **options: Any) -> None:
    """Print all resolved settings as JSON."""

    settings = _build_registry(**options).all_settings()
    click.echo(json.dumps(settings, indent=indent, ensure_ascii=False))


@cli.command("write", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("destination", type=click.Path(path_type=Path, dir_okay=False))
@_registry_options
@click.option("--safe/--no-safe", default=False, help="Refuse to overwrite an existing destination")
def cli_write(destination: Path, safe: bool, **options: Any) -> None:
    """Write all resolved settings to *destination* (format chosen by suffix)."""

    registry = _build_registry(**options)
    if safe:
        asyncio.run(registry.safe_write_config_as(destination))
    else:
        asyncio.run(registry.write_config_as(destination))
    click.echo(str(destination))


def _split_pair(entry: str, option: str) -> tuple[str, str]:
    """Split ``KEY=VALUE`` at the first ``=``."""

    key, sep, value = entry.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {entry!r}", param_hint=option)
    return key, value


def _parse_value(raw: str) -> Any:
    """Interpret *raw* as JSON when possible so numbers, booleans and lists keep their type.

    Examples
    --------
    >>> _parse_value("8080"), _parse_value("true"), _parse_value("localhost")
    (8080, True, 'localhost')
    """

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DIST_NAME,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
