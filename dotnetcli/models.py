"""Option key maps and data types for the dotnet command-line toolchain."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping


def _key_map(**entries: str) -> Mapping[str, str]:
    return MappingProxyType(dict(entries))


NEW_KEY_MAP = _key_map(
    dry_run="dry-run",
    update_apply="update-apply",
    update_check="update-check",
    nuget_source="nuget-source",
)

BUILD_KEY_MAP = _key_map(
    no_restore="no-restore",
    no_incremental="no-incremental",
    no_dependencies="no-dependencies",
    version_suffix="version-suffix",
)

RUN_KEY_MAP = _key_map(
    no_restore="no-restore",
    no_build="no-build",
    no_dependencies="no-dependencies",
    launch_profile="launch-profile",
    no_launch_profile="no-launch-profile",
)

TEST_KEY_MAP = _key_map(
    test_adapter_path="test-adapter-path",
    blame_crash="blame-crash",
    blame_crash_dump_type="blame-crash-dump-type",
    blame_crash_collect_always="blame-crash-collect-always",
    blame_hang="blame-hang",
    blame_hang_dump_type="blame-hang-dump-type",
    blame_hang_timeout="blame-hang-timeout",
    list_tests="list-tests",
    no_build="no-build",
    no_restore="no-restore",
    results_directory="results-directory",
)

ADD_PACKAGE_KEY_MAP = _key_map(
    no_restore="no-restore",
    package_directory="package-directory",
)

PUBLISH_KEY_MAP = _key_map(
    no_build="no-build",
    no_dependencies="no-dependencies",
    no_restore="no-restore",
    self_contained="self-contained",
    no_self_contained="no-self-contained",
    version_suffix="version-suffix",
)

FORMAT_KEY_MAP = _key_map(
    no_restore="no-restore",
    fix_whitespace="fix-whitespace",
    fix_style="fix-style",
    fix_analyzers="fix-analyzers",
    verify_no_changes="verify-no-changes",
)

FORMAT_LEGACY_FLAGS = ("fix_whitespace", "fix_style", "fix_analyzers")
"""Format options whose handling moved to subcommands in SDK 6."""


KNOWN_DOTNET_TEMPLATES = (
    "console",
    "classlib",
    "wpf",
    "wpflib",
    "wpfcustomcontrollib",
    "wpfusercontrollib",
    "winforms",
    "winformscontrollib",
    "winformslib",
    "worker",
    "mstest",
    "nunit",
    "nunit-test",
    "xunit",
    "razorcomponent",
    "page",
    "viewimports",
    "viewstart",
    "blazorserver",
    "blazorwasm",
    "web",
    "mvc",
    "webapp",
    "angular",
    "react",
    "reactredux",
    "razorclasslib",
    "webapi",
    "grpc",
    "gitignore",
    "globaljson",
    "nugetconfig",
    "tool-manifest",
    "webconfig",
    "sln",
    "proto",
)


@dataclass(slots=True)
class DotnetTemplate:
    """A template reported by ``dotnet new list``."""

    name: str
    short_names: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


__all__ = [
    "ADD_PACKAGE_KEY_MAP",
    "BUILD_KEY_MAP",
    "DotnetTemplate",
    "FORMAT_KEY_MAP",
    "FORMAT_LEGACY_FLAGS",
    "KNOWN_DOTNET_TEMPLATES",
    "NEW_KEY_MAP",
    "PUBLISH_KEY_MAP",
    "RUN_KEY_MAP",
    "TEST_KEY_MAP",
]
