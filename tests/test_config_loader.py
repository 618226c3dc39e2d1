from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from core.config_loader import find_config_file, load_config_file, merge_mappings


class ConfigurationLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_supports_toml_and_json(self) -> None:
        toml_path = self.root / "a.toml"
        toml_path.write_text(
            textwrap.dedent(
                """
                command = "dotnet"

                [extra]
                nested = true
                """
            )
        )
        json_path = self.root / "b.json"
        json_path.write_text('{"command": "dotnet8"}')

        self.assertEqual(load_config_file(toml_path), {"command": "dotnet", "extra": {"nested": True}})
        self.assertEqual(load_config_file(json_path), {"command": "dotnet8"})

    def test_rejects_unknown_suffix(self) -> None:
        path = self.root / "settings.ini"
        path.write_text("[x]\n")
        with self.assertRaises(ValueError):
            load_config_file(path)

    def test_rejects_non_mapping_root(self) -> None:
        path = self.root / "list.json"
        path.write_text("[1, 2]")
        with self.assertRaises(TypeError):
            load_config_file(path)

    def test_find_config_file(self) -> None:
        self.assertIsNone(find_config_file(self.root, "dotnet-driver"))
        (self.root / "dotnet-driver.json").write_text("{}")
        self.assertEqual(find_config_file(self.root, "dotnet-driver"), self.root / "dotnet-driver.json")

    def test_merge_mappings_is_deep(self) -> None:
        merged = merge_mappings({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
        self.assertEqual(merged, {"a": {"x": 1, "y": 3}, "b": 1, "c": 4})


if __name__ == "__main__":
    unittest.main()
