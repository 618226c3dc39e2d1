"""Client translating build/test/publish requests into dotnet CLI invocations."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Sequence
import os
import subprocess

from core.command_runner import CommandRunner, SubprocessCommandRunner

from .factory import LoadedCLI
from .models import (
    ADD_PACKAGE_KEY_MAP,
    BUILD_KEY_MAP,
    FORMAT_KEY_MAP,
    NEW_KEY_MAP,
    PUBLISH_KEY_MAP,
    RUN_KEY_MAP,
    TEST_KEY_MAP,
    DotnetTemplate,
)
from .parameters import get_spawn_parameter_array, map_options, tokenize_extra_parameters
from .templates import parse_dotnet_new_list_output
from .versions import plan_format_subcommands, template_list_arguments

Options = Mapping[str, Any]

FORMAT_TOOL_PREFIX = ("tool", "run", "dotnet-format", "--")


class DotNetClient:
    """Runs dotnet CLI operations for a loaded toolchain.

    Blocking operations raise :class:`core.command_runner.ExecutionError` when
    the toolchain exits with a non-zero status. ``run`` and watched ``test``
    return the spawned process; the caller owns it.
    """

    def __init__(
        self,
        cli: LoadedCLI,
        cwd: Path | str | None = None,
        *,
        runner: CommandRunner | None = None,
    ) -> None:
        self.cli = cli
        self.cwd = cwd
        self.runner = runner if runner is not None else SubprocessCommandRunner()

    def new(self, template: str, options: Options | None = None) -> None:
        params = ["new", template, *map_options(options, NEW_KEY_MAP)]
        self.log_and_execute(params)

    def list_installed_templates(
        self, search: str | None = None, language: str | None = None
    ) -> List[DotnetTemplate]:
        params = template_list_arguments(self.get_sdk_version(), search=search, language=language)
        output = self.spawn_and_get_output(params)
        return parse_dotnet_new_list_output(output)

    def build(
        self, project: str, options: Options | None = None, extra_parameters: str | None = None
    ) -> None:
        params = ["build", project, *map_options(options, BUILD_KEY_MAP)]
        params.extend(tokenize_extra_parameters(extra_parameters))
        self.log_and_execute(params)

    def run(
        self,
        project: str,
        watch: bool = False,
        options: Options | None = None,
        extra_parameters: str | None = None,
    ) -> subprocess.Popen:
        params = ["watch", "--project", project, "run"] if watch else ["run", "--project", project]
        params.extend(map_options(options, RUN_KEY_MAP))
        params.extend(tokenize_extra_parameters(extra_parameters))
        return self.log_and_spawn(params)

    def test(
        self,
        project: str,
        watch: bool = False,
        options: Options | None = None,
        extra_parameters: str | None = None,
    ) -> subprocess.Popen | None:
        params = ["watch", "--project", project, "test"] if watch else ["test", project]
        params.extend(map_options(options, TEST_KEY_MAP))
        params.extend(tokenize_extra_parameters(extra_parameters))
        if watch:
            return self.log_and_spawn(params)
        self.log_and_execute(params)
        return None

    def add_package_reference(self, project: str, package: str, options: Options | None = None) -> None:
        params = ["add", project, "package", package, *map_options(options, ADD_PACKAGE_KEY_MAP)]
        self.log_and_execute(params)

    def add_project_reference(self, host_project: str, target_project: str) -> None:
        self.log_and_execute(["add", host_project, "reference", target_project])

    def publish(
        self,
        project: str,
        options: Options | None = None,
        publish_profile: str | None = None,
        extra_parameters: str | None = None,
    ) -> None:
        params = ["publish", f'"{project}"', *map_options(options, PUBLISH_KEY_MAP)]
        if publish_profile:
            params.append(f"-p:PublishProfile={publish_profile}")
        params.extend(tokenize_extra_parameters(extra_parameters))
        self.log_and_execute(params)

    def install_tool(self, tool: str, version: str | None = None, source: str | None = None) -> None:
        params = ["tool", "install", tool]
        if version:
            params.extend(["--version", version])
        if source:
            params.extend(["--add-source", source])
        self.log_and_execute(params)

    def restore_packages(self, project: str) -> None:
        self.log_and_execute(["restore", project])

    def restore_tools(self) -> None:
        self.log_and_execute(["tool", "restore"])

    def format(self, project: str, options: Options | None = None, force_tool_usage: bool = False) -> None:
        """Run ``dotnet format``, split into subcommands on SDK 6+ when legacy fix flags are given."""

        prefix = list(FORMAT_TOOL_PREFIX) if force_tool_usage else ["format"]
        for invocation in plan_format_subcommands(self.get_sdk_version(), options):
            params = list(prefix)
            if invocation.subcommand is not None:
                params.append(invocation.subcommand.value)
            params.append(project)
            params.extend(map_options(invocation.options, FORMAT_KEY_MAP))
            self.log_and_execute(params)

    def run_tool(
        self,
        tool: str,
        positional_parameters: Sequence[str] | None = None,
        options: Options | None = None,
        extra_parameters: str | None = None,
    ) -> None:
        params = ["tool", "run", tool]
        if positional_parameters:
            params.extend(positional_parameters)
        if options:
            params.extend(get_spawn_parameter_array(options))
        params.extend(tokenize_extra_parameters(extra_parameters))
        self.log_and_execute(params)

    def add_project_to_solution(self, solution_file: str, project: str) -> None:
        self.log_and_execute(["sln", solution_file, "add", project])

    def get_sdk_version(self) -> str:
        return str(self.cli.info.version)

    def print_sdk_version(self) -> None:
        self.log_and_execute(["--version"])

    def _working_directory(self) -> str:
        return str(self.cwd) if self.cwd else os.getcwd()

    def log_and_execute(self, params: Sequence[str]) -> None:
        self.runner.execute([self.cli.command, *params], cwd=self._working_directory())

    def spawn_and_get_output(self, params: Sequence[str]) -> str:
        return self.runner.capture([self.cli.command, *params], cwd=self._working_directory())

    def log_and_spawn(self, params: Sequence[str]) -> subprocess.Popen:
        return self.runner.spawn([self.cli.command, *params], cwd=self._working_directory())


__all__ = ["DotNetClient", "FORMAT_TOOL_PREFIX"]
