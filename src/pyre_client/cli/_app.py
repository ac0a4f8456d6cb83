"""CliApp: Typer アプリケーション定義。

グローバルオプションは CommandArguments に集約し、サブコマンドから参照する。
エラーは stderr に "Error: ..." の 1 行で出力し、ExitCode で終了する。
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from pyre_client.check import (
    CheckError,
    create_check_arguments,
    run_check,
    write_argument_file,
)
from pyre_client.cli._formatter import print_type_errors
from pyre_client.config import create_configuration
from pyre_client.errors import ConfigurationError
from pyre_client.models.command_arguments import CommandArguments, OutputFormat
from pyre_client.models.configuration import ResolvedConfiguration
from pyre_client.models.exit_code import ExitCode

_LOG_FORMAT = "%(levelname)s: %(message)s"

app = typer.Typer(
    name="pyre",
    help="Client for running the pyre type checker.",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョン番号を出力して終了する。"""
    if value:
        print(importlib.metadata.version("pyre-client"))
        raise typer.Exit()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。"""
    app()


@app.callback()
def global_options(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
    local_configuration: Annotated[
        str | None,
        typer.Option(
            "--local-configuration",
            "-l",
            help="Directory holding the .pyre_configuration.local to use.",
        ),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging.")] = False,
    sequential: Annotated[
        bool, typer.Option("--sequential", help="Run the checker without parallelism.")
    ] = False,
    strict: Annotated[
        bool, typer.Option("--strict", help="Check all files in strict mode.")
    ] = False,
    show_error_traces: Annotated[
        bool, typer.Option("--show-error-traces", help="Show error traces.")
    ] = False,
    output: Annotated[
        OutputFormat, typer.Option("--output", help="Output format: text or json.")
    ] = OutputFormat.TEXT,
    logger: Annotated[
        str | None, typer.Option("--logger", help="Logger executable.")
    ] = None,
    targets: Annotated[
        list[str] | None, typer.Option("--target", help="Buck target to check.")
    ] = None,
    source_directories: Annotated[
        list[str] | None,
        typer.Option("--source-directory", help="Source directory to check."),
    ] = None,
    do_not_ignore_errors_in: Annotated[
        list[str] | None,
        typer.Option(
            "--do-not-ignore-errors-in",
            help="Always report errors in this directory.",
        ),
    ] = None,
    buck_mode: Annotated[
        str | None, typer.Option("--buck-mode", help="Buck build mode.")
    ] = None,
    search_path: Annotated[
        list[str] | None,
        typer.Option("--search-path", help="Additional directory to search modules in."),
    ] = None,
    binary: Annotated[
        str | None, typer.Option("--binary", help="Location of the checker binary.")
    ] = None,
    exclude: Annotated[
        list[str] | None, typer.Option("--exclude", help="Exclude files matching regex.")
    ] = None,
    typeshed: Annotated[
        str | None, typer.Option("--typeshed", help="Location of the typeshed stubs.")
    ] = None,
    dot_pyre_directory: Annotated[
        str | None,
        typer.Option("--dot-pyre-directory", help="Directory for logs and state."),
    ] = None,
    isolation_prefix: Annotated[
        str | None,
        typer.Option("--isolation-prefix", help="Buck isolation prefix."),
    ] = None,
    python_version: Annotated[
        str | None,
        typer.Option("--python-version", help="Target Python version (X.Y.Z)."),
    ] = None,
    shared_memory_heap_size: Annotated[
        int | None,
        typer.Option("--shared-memory-heap-size", help="Shared heap size.", min=1),
    ] = None,
    shared_memory_dependency_table_power: Annotated[
        int | None,
        typer.Option(
            "--shared-memory-dependency-table-power",
            help="Log2 of the dependency table size.",
            min=1,
        ),
    ] = None,
    shared_memory_hash_table_power: Annotated[
        int | None,
        typer.Option(
            "--shared-memory-hash-table-power",
            help="Log2 of the hash table size.",
            min=1,
        ),
    ] = None,
    number_of_workers: Annotated[
        int | None,
        typer.Option("--number-of-workers", help="Number of parallel workers.", min=1),
    ] = None,
    enable_hover: Annotated[
        bool | None, typer.Option("--enable-hover/--disable-hover")
    ] = None,
    enable_go_to_definition: Annotated[
        bool | None,
        typer.Option("--enable-go-to-definition/--disable-go-to-definition"),
    ] = None,
    enable_find_symbols: Annotated[
        bool | None, typer.Option("--enable-find-symbols/--disable-find-symbols")
    ] = None,
    enable_find_all_references: Annotated[
        bool | None,
        typer.Option("--enable-find-all-references/--disable-find-all-references"),
    ] = None,
    use_buck2: Annotated[
        bool | None, typer.Option("--use-buck2/--use-buck1", help="Build with buck2.")
    ] = None,
) -> None:
    """Client for running the pyre type checker."""
    _configure_logging(debug)
    try:
        ctx.obj = CommandArguments(
            local_configuration=local_configuration,
            debug=debug,
            sequential=sequential,
            strict=strict,
            show_error_traces=show_error_traces,
            output=output,
            logger=logger,
            targets=tuple(targets or ()),
            source_directories=tuple(source_directories or ()),
            do_not_ignore_errors_in=tuple(do_not_ignore_errors_in or ()),
            buck_mode=buck_mode,
            search_path=tuple(search_path or ()),
            binary=binary,
            exclude=tuple(exclude or ()),
            typeshed=typeshed,
            dot_pyre_directory=dot_pyre_directory,
            isolation_prefix=isolation_prefix,
            python_version=python_version,
            shared_memory_heap_size=shared_memory_heap_size,
            shared_memory_dependency_table_power=shared_memory_dependency_table_power,
            shared_memory_hash_table_power=shared_memory_hash_table_power,
            number_of_workers=number_of_workers,
            enable_hover=enable_hover,
            enable_go_to_definition=enable_go_to_definition,
            enable_find_symbols=enable_find_symbols,
            enable_find_all_references=enable_find_all_references,
            use_buck2=use_buck2,
        )
    except ValidationError as e:
        print(f"Error: Invalid command line arguments: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR) from None


def _resolve_configuration(arguments: CommandArguments) -> ResolvedConfiguration:
    """設定を解決し、警告を stderr に出力する。失敗時は CONFIGURATION_ERROR で終了する。"""
    try:
        resolved = create_configuration(arguments, Path.cwd())
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR) from None

    for warning in resolved.warnings:
        print(f"Warning: {warning.message}", file=sys.stderr)
    return resolved


@app.command()
def check(ctx: typer.Context) -> None:
    """Run a one-shot type check and print the errors found."""
    arguments: CommandArguments = ctx.obj
    configuration = _resolve_configuration(arguments).configuration

    binary = configuration.get_binary()
    if binary is None:
        print(
            "Error: Cannot locate the checker binary. "
            "Set `binary` in .pyre_configuration, pass --binary, "
            "or set the PYRE_BINARY environment variable.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR)

    try:
        check_arguments = create_check_arguments(
            configuration,
            debug=arguments.debug,
            sequential=arguments.sequential,
            show_error_traces=arguments.show_error_traces,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.CONFIGURATION_ERROR) from None

    try:
        argument_file = write_argument_file(
            check_arguments, Path(configuration.log_directory)
        )
    except OSError as e:
        print(
            f"Error: Cannot write checker arguments: {e}\n"
            "Check permissions of the .pyre directory or pass --dot-pyre-directory.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.FAILURE) from None

    try:
        result = run_check(binary, str(argument_file))
    except CheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.FAILURE) from None

    print_type_errors(result.errors, arguments.output)
    raise typer.Exit(
        code=ExitCode.FOUND_ERRORS if result.has_errors else ExitCode.SUCCESS
    )


@app.command()
def info(ctx: typer.Context) -> None:
    """Print the resolved configuration as JSON."""
    arguments: CommandArguments = ctx.obj
    configuration = _resolve_configuration(arguments).configuration
    print(configuration.model_dump_json(indent=2))
