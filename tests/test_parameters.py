from __future__ import annotations

import unittest

from dotnetcli.models import BUILD_KEY_MAP, FORMAT_KEY_MAP
from dotnetcli.parameters import (
    get_spawn_parameter_array,
    map_options,
    swap_keys_using_map,
    tokenize_extra_parameters,
)


class SwapKeysTests(unittest.TestCase):
    def test_renames_mapped_keys_and_keeps_others(self) -> None:
        options = {"configuration": "Release", "no_restore": True}
        swapped = swap_keys_using_map(options, BUILD_KEY_MAP)
        self.assertEqual(swapped, {"configuration": "Release", "no-restore": True})

    def test_does_not_mutate_input(self) -> None:
        options = {"no_restore": True}
        swap_keys_using_map(options, BUILD_KEY_MAP)
        self.assertEqual(options, {"no_restore": True})

    def test_preserves_order(self) -> None:
        options = {"version_suffix": "beta", "framework": "net8.0", "no_incremental": True}
        self.assertEqual(
            list(swap_keys_using_map(options, BUILD_KEY_MAP)),
            ["version-suffix", "framework", "no-incremental"],
        )


class SpawnParameterArrayTests(unittest.TestCase):
    def test_flattens_values(self) -> None:
        tokens = get_spawn_parameter_array(
            {"configuration": "Release", "no-restore": True, "nologo": False, "output": None, "verbosity": "q"}
        )
        self.assertEqual(tokens, ["--configuration", "Release", "--no-restore", "--verbosity", "q"])

    def test_numbers_become_separate_tokens(self) -> None:
        self.assertEqual(get_spawn_parameter_array({"blame-hang-timeout": 30}), ["--blame-hang-timeout", "30"])

    def test_dashed_keys_are_kept_verbatim(self) -> None:
        self.assertEqual(get_spawn_parameter_array({"-c": "Debug"}), ["-c", "Debug"])

    def test_map_options_handles_missing_options(self) -> None:
        self.assertEqual(map_options(None, FORMAT_KEY_MAP), [])
        self.assertEqual(
            map_options({"verify_no_changes": True, "fix_style": "warn"}, FORMAT_KEY_MAP),
            ["--verify-no-changes", "--fix-style", "warn"],
        )


class TokenizeExtraParametersTests(unittest.TestCase):
    def test_quoted_flag_is_one_token(self) -> None:
        self.assertEqual(
            tokenize_extra_parameters('--flag="a b c" --other=x'),
            ['--flag="a b c"', "--other=x"],
        )

    def test_bare_tokens(self) -> None:
        self.assertEqual(tokenize_extra_parameters("  -v   minimal --no-build "), ["-v", "minimal", "--no-build"])

    def test_empty_input(self) -> None:
        self.assertEqual(tokenize_extra_parameters(""), [])
        self.assertEqual(tokenize_extra_parameters(None), [])

    def test_property_with_quoted_value(self) -> None:
        self.assertEqual(
            tokenize_extra_parameters('-p:Version=1.0 -p:Description="My app" --nologo'),
            ["-p:Version=1.0", '-p:Description="My app"', "--nologo"],
        )


if __name__ == "__main__":
    unittest.main()
