"""Drive the dotnet command-line toolchain from Python."""

from core.command_runner import ExecutionError

from .client import DotNetClient
from .factory import CliInfo, CliNotFoundError, LoadedCLI, dotnet_factory
from .models import DotnetTemplate, KNOWN_DOTNET_TEMPLATES
from .parameters import get_spawn_parameter_array, swap_keys_using_map, tokenize_extra_parameters
from .versions import SdkVersion, TemplateListGrammar, plan_format_subcommands, template_list_arguments

__all__ = [
    "CliInfo",
    "CliNotFoundError",
    "DotNetClient",
    "DotnetTemplate",
    "ExecutionError",
    "KNOWN_DOTNET_TEMPLATES",
    "LoadedCLI",
    "SdkVersion",
    "TemplateListGrammar",
    "dotnet_factory",
    "get_spawn_parameter_array",
    "plan_format_subcommands",
    "swap_keys_using_map",
    "template_list_arguments",
    "tokenize_extra_parameters",
]
