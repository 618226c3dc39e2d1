from __future__ import annotations

from io import StringIO
from pathlib import Path
import os
import tempfile
import unittest
from unittest.mock import patch

from core.command_runner import CommandResult, ExecutionError
from dotnetcli import cli
from dotnetcli.client import DotNetClient


class CliDryRunTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self._cwd = os.getcwd()
        os.chdir(self.root)
        self._env = patch.dict(os.environ, {}, clear=False)
        self._env.start()
        os.environ.pop("DOTNET_DRIVER_COMMAND", None)
        os.environ.pop("DOTNET_DRIVER_LOG_LEVEL", None)

    def tearDown(self) -> None:
        self._env.stop()
        os.chdir(self._cwd)
        self.temp_dir.cleanup()

    def _run(self, *argv: str) -> tuple[int, str]:
        with patch("sys.stdout", new=StringIO()) as fake_out:
            exit_code = cli.main(["--dry-run", "--sdk-version", "6.0.100", "--cwd", "/work", *argv])
        return exit_code, fake_out.getvalue()

    def test_build_with_options_and_extra(self) -> None:
        exit_code, output = self._run(
            "build", "app.csproj", "-o", "configuration=Release", "-o", "no_restore=true", '--extra=-p:A="x y"'
        )
        self.assertEqual(exit_code, 0)
        self.assertIn(
            '[DRY] (cwd=/work) dotnet "build" "app.csproj" "--configuration" "Release" "--no-restore" "-p:A="x y""',
            output,
        )

    def test_dry_run_reports_each_command_once(self) -> None:
        _, output = self._run("restore", "app.csproj")
        self.assertEqual(output.count('dotnet "restore" "app.csproj"'), 1)

    def test_false_option_is_omitted(self) -> None:
        _, output = self._run("build", "app.csproj", "-o", "nologo=false")
        self.assertIn('dotnet "build" "app.csproj"\n', output)

    def test_format_split(self) -> None:
        _, output = self._run("format", "app.csproj", "-o", "fix_whitespace=false", "-o", "fix_style")
        self.assertIn('dotnet "format" "style" "app.csproj"', output)
        self.assertNotIn('"whitespace"', output)
        self.assertNotIn('"analyzers"', output)

    def test_run_is_spawned(self) -> None:
        exit_code, output = self._run("run", "app.csproj", "--watch")
        self.assertEqual(exit_code, 0)
        self.assertIn('[DRY] (spawn) (cwd=/work) dotnet "watch" "--project" "app.csproj" "run"', output)

    def test_templates_listing_arguments(self) -> None:
        _, output = self._run("templates", "web")
        self.assertIn('dotnet "new" "--list" "web"', output)

    def test_install_tool(self) -> None:
        _, output = self._run("install-tool", "dotnet-ef", "--version", "8.0.0")
        self.assertIn('dotnet "tool" "install" "dotnet-ef" "--version" "8.0.0"', output)

    def test_invalid_option(self) -> None:
        with self.assertRaises(ValueError):
            self._run("build", "app.csproj", "-o", "=oops")


class CliExecutionTests(unittest.TestCase):
    def test_missing_toolchain_exits_127(self) -> None:
        with patch("dotnetcli.cli.dotnet_factory", side_effect=cli.CliNotFoundError("missing")):
            with patch("sys.stderr", new=StringIO()) as fake_err:
                exit_code = cli.main(["--log-level", "error", "version"])
        self.assertEqual(exit_code, 127)
        self.assertIn("[ERROR] missing", fake_err.getvalue())

    def test_signal_termination_maps_to_shell_status(self) -> None:
        failure = ExecutionError(CommandResult(command=["dotnet", "--version"], returncode=-9, stdout="", stderr=""))
        with patch("dotnetcli.cli.resolve_command", return_value="/usr/bin/dotnet"):
            with patch.object(DotNetClient, "print_sdk_version", side_effect=failure):
                exit_code = cli.main(["--log-level", "none", "--sdk-version", "8.0.100", "version"])
        self.assertEqual(exit_code, 137)

    def test_exit_status(self) -> None:
        self.assertEqual(cli._exit_status(2), 2)
        self.assertEqual(cli._exit_status(-15), 143)
        self.assertEqual(cli._exit_status(0), 1)


if __name__ == "__main__":
    unittest.main()
