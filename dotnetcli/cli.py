"""Command line interface for the dotnet driver."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any, Dict, Iterable
import sys

from core.command_runner import (
    CommandRunner,
    ExecutionError,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)
from core.console import Console

from .client import DotNetClient
from .factory import CliInfo, CliNotFoundError, LoadedCLI, dotnet_factory, resolve_command
from .models import KNOWN_DOTNET_TEMPLATES
from .settings import ClientSettings, load_settings

_BOOLEAN_VALUES = {"true": True, "false": False}


def _parse_option_values(values: Iterable[str]) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    for raw in values:
        text = raw.strip()
        if not text:
            continue
        key, separator, value = text.partition("=")
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid option '{raw}': expected KEY=VALUE or KEY")
        if not separator:
            options[key] = True
            continue
        options[key] = _BOOLEAN_VALUES.get(value.strip().lower(), value)
    return options


def _add_option_arguments(parser: ArgumentParser, *, extra: bool = True) -> None:
    parser.add_argument(
        "-o",
        "--option",
        dest="options",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Option passed to the toolchain (repeatable; true/false become switches)",
    )
    if extra:
        parser.add_argument("--extra", help="Additional raw arguments appended to the command")


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(description="Run dotnet toolchain operations")
    parser.add_argument("--config", type=Path, help="Settings file (default: dotnet-driver.* in the working directory)")
    parser.add_argument("--cwd", type=Path, help="Working directory for toolchain commands")
    parser.add_argument("--log-level", choices=sorted(Console.LEVELS), help="Console output level")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing them")
    parser.add_argument("--sdk-version", help="SDK version to assume during a dry run")

    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser = subparsers.add_parser("new", help="Create a project from a template")
    new_parser.add_argument(
        "template", help=f"Template short name (known: {', '.join(KNOWN_DOTNET_TEMPLATES)})"
    )
    _add_option_arguments(new_parser, extra=False)

    templates_parser = subparsers.add_parser("templates", help="List installed templates")
    templates_parser.add_argument("search", nargs="?")
    templates_parser.add_argument("--language")

    build_parser = subparsers.add_parser("build", help="Build a project")
    build_parser.add_argument("project")
    _add_option_arguments(build_parser)

    run_parser = subparsers.add_parser("run", help="Run a project")
    run_parser.add_argument("project")
    run_parser.add_argument("--watch", action="store_true", help="Rebuild and restart on changes")
    _add_option_arguments(run_parser)

    test_parser = subparsers.add_parser("test", help="Test a project")
    test_parser.add_argument("project")
    test_parser.add_argument("--watch", action="store_true", help="Re-run tests on changes")
    _add_option_arguments(test_parser)

    add_package_parser = subparsers.add_parser("add-package", help="Add a NuGet package reference")
    add_package_parser.add_argument("project")
    add_package_parser.add_argument("package")
    _add_option_arguments(add_package_parser, extra=False)

    add_reference_parser = subparsers.add_parser("add-reference", help="Add a project reference")
    add_reference_parser.add_argument("host")
    add_reference_parser.add_argument("target")

    publish_parser = subparsers.add_parser("publish", help="Publish a project")
    publish_parser.add_argument("project")
    publish_parser.add_argument("--profile", help="Publish profile name")
    _add_option_arguments(publish_parser)

    install_tool_parser = subparsers.add_parser("install-tool", help="Install a local tool")
    install_tool_parser.add_argument("tool")
    install_tool_parser.add_argument("--version", dest="tool_version")
    install_tool_parser.add_argument("--source")

    restore_parser = subparsers.add_parser("restore", help="Restore project packages")
    restore_parser.add_argument("project")

    subparsers.add_parser("restore-tools", help="Restore local tools")

    format_parser = subparsers.add_parser("format", help="Format a project")
    format_parser.add_argument("project")
    format_parser.add_argument("--force-tool", action="store_true", help="Use the dotnet-format tool")
    _add_option_arguments(format_parser, extra=False)

    run_tool_parser = subparsers.add_parser("run-tool", help="Run a local tool")
    run_tool_parser.add_argument("tool")
    run_tool_parser.add_argument("positionals", nargs="*")
    _add_option_arguments(run_tool_parser)

    sln_parser = subparsers.add_parser("sln-add", help="Add a project to a solution")
    sln_parser.add_argument("solution")
    sln_parser.add_argument("project")

    subparsers.add_parser("version", help="Print the SDK version")

    return parser.parse_args(list(argv))


def _load_cli(args: Namespace, settings: ClientSettings) -> LoadedCLI:
    if settings.dry_run and args.sdk_version:
        return LoadedCLI(command=settings.command, info=CliInfo(version=args.sdk_version))
    if args.sdk_version:
        return LoadedCLI(command=resolve_command(settings.command), info=CliInfo(version=args.sdk_version))
    return dotnet_factory(settings.command)


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()

    settings = load_settings(workspace, path=args.config)
    if args.log_level:
        settings.log_level = args.log_level
    if args.dry_run:
        settings.dry_run = True
    if args.cwd:
        settings.cwd = args.cwd
    console = settings.console()

    runner: CommandRunner
    if settings.dry_run:
        runner = RecordingCommandRunner(console)
    else:
        runner = SubprocessCommandRunner(console)

    try:
        cli = _load_cli(args, settings)
    except CliNotFoundError as exc:
        console.error(str(exc))
        return 127

    client = DotNetClient(cli, settings.cwd, runner=runner)
    try:
        exit_code = _dispatch(args, client, console)
    except ExecutionError as exc:
        console.error(str(exc))
        return _exit_status(exc.returncode)
    return exit_code


def _dispatch(args: Namespace, client: DotNetClient, console: Console) -> int:
    options = _parse_option_values(getattr(args, "options", []))
    extra = getattr(args, "extra", None)

    if args.command == "new":
        client.new(args.template, options)
    elif args.command == "templates":
        for template in client.list_installed_templates(args.search, args.language):
            print(f"{template.name}\t{','.join(template.short_names)}\t{','.join(template.languages)}\t{'/'.join(template.tags)}")
    elif args.command == "build":
        client.build(args.project, options, extra)
    elif args.command == "run":
        process = client.run(args.project, args.watch, options, extra)
        return _wait(process, console)
    elif args.command == "test":
        process = client.test(args.project, args.watch, options, extra)
        if process is not None:
            return _wait(process, console)
    elif args.command == "add-package":
        client.add_package_reference(args.project, args.package, options)
    elif args.command == "add-reference":
        client.add_project_reference(args.host, args.target)
    elif args.command == "publish":
        client.publish(args.project, options, args.profile, extra)
    elif args.command == "install-tool":
        client.install_tool(args.tool, args.tool_version, args.source)
    elif args.command == "restore":
        client.restore_packages(args.project)
    elif args.command == "restore-tools":
        client.restore_tools()
    elif args.command == "format":
        client.format(args.project, options, args.force_tool)
    elif args.command == "run-tool":
        client.run_tool(args.tool, args.positionals, options, extra)
    elif args.command == "sln-add":
        client.add_project_to_solution(args.solution, args.project)
    elif args.command == "version":
        client.print_sdk_version()
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return 0


def _wait(process: Any, console: Console) -> int:
    try:
        return process.wait()
    except KeyboardInterrupt:
        console.info("Interrupted; stopping the toolchain process")
        process.terminate()
        return process.wait()


def _exit_status(returncode: int) -> int:
    """Map a toolchain return code to a shell exit status; signals become 128 + signal number."""

    if returncode < 0:
        return 128 + abs(returncode)
    return returncode or 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
