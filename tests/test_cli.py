"""Tests for the command line interface."""
import logging
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import TestCase, main

from typer.testing import CliRunner

from domgame.cli import app, resolve_config
from domgame.config import BUNDLED_CATALOG


class CheckTests(TestCase):
    """Tests for the check command."""

    def tearDown(self) -> None:
        logging.getLogger("domgame").handlers.clear()

    def test_bundled_catalog(self):
        result = CliRunner().invoke(app, ["check", str(BUNDLED_CATALOG)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("The catalog is valid", result.output)

    def test_invalid_catalog(self):
        with TemporaryDirectory() as folder:
            path = Path(folder) / "graphs.json"
            path.write_text('[{"nodes": 2, "adjList": {}, "minDominatingSets": []}]')
            result = CliRunner().invoke(app, ["check", str(path)])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("does not fit the schema", result.output)


class ConfigResolutionTests(TestCase):
    """Tests for picking the config from the cli arguments."""

    def test_config_file_and_url(self):
        with TemporaryDirectory() as folder:
            path = Path(folder) / "domgame.toml"
            path.write_text("[dataset]\ntimeout = 3\n")
            config = resolve_config(path, "https://example.com/graphs.json")
        self.assertEqual(config.dataset.source, "https://example.com/graphs.json")
        self.assertEqual(config.dataset.timeout, 3)

    def test_config_file(self):
        with TemporaryDirectory() as folder:
            path = Path(folder) / "domgame.toml"
            path.write_text("[display]\nwidth = 100\n")
            config = resolve_config(path, None)
        self.assertEqual(config.display.width, 100)
        self.assertEqual(config.dataset.source, str(BUNDLED_CATALOG))


if __name__ == "__main__":
    main()
