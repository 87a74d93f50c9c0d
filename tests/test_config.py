"""
Tests for config loading and validation in `tremote.core.configs`.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from tremote.core.configs import (
    ClientConfig,
    get_client_config,
    load_raw_config,
    save_config,
)

CLEAN_ENV = {
    "TREMOTE_HOST": "",
    "TREMOTE_PORT": "",
    "TREMOTE_RPC_PATH": "",
    "TREMOTE_TIMEOUT_S": "",
}


class TestConfig(unittest.TestCase):
    """Test cases for configuration helpers."""

    def setUp(self):
        """Set up test environment with temporary directories."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = Path(self.temp_dir) / "config.cfg"
        self.env_file = Path(self.temp_dir) / ".env"

    def tearDown(self):
        """Clean up temporary files."""
        import shutil

        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, **defaults: str) -> None:
        import configparser

        cfg = configparser.ConfigParser()
        cfg["DEFAULT"] = defaults
        with open(self.config_file, "w") as handle:
            cfg.write(handle)

    def test_load_raw_config_lowercases_keys(self):
        self._write_config(HOST="nas.local", PORT="9092")

        raw = load_raw_config(self.config_file, self.env_file)
        self.assertEqual(raw["host"], "nas.local")
        self.assertEqual(raw["port"], "9092")

    def test_load_raw_config_missing_file_returns_empty_dict(self):
        self.assertEqual(load_raw_config(self.config_file, self.env_file), {})

    def test_env_file_fallback(self):
        self.env_file.write_text("TREMOTE_HOST=seedbox\nTREMOTE_PORT=9999\nOTHER=1\n")
        raw = load_raw_config(self.config_file, self.env_file)
        self.assertEqual(raw, {"host": "seedbox", "port": "9999"})

    def test_config_file_wins_over_env_file(self):
        self._write_config(host="from-cfg")
        self.env_file.write_text("TREMOTE_HOST=from-env-file\n")
        self.assertEqual(load_raw_config(self.config_file, self.env_file)["host"], "from-cfg")

    def test_defaults(self):
        with patch.dict(os.environ, CLEAN_ENV):
            config = get_client_config({})
        self.assertEqual(config, ClientConfig())
        self.assertEqual(config.host, "localhost")
        self.assertEqual(config.port, 9091)
        self.assertEqual(config.rpc_path, "/transmission/rpc")
        self.assertEqual(config.timeout, 30.0)

    def test_values_are_parsed(self):
        raw = {"host": "nas", "port": "9092", "rpc_path": "/rpc", "timeout": "2.5"}
        with patch.dict(os.environ, CLEAN_ENV):
            config = get_client_config(raw)
        self.assertEqual(config, ClientConfig("nas", 9092, "/rpc", 2.5))

    def test_zero_timeout_disables_deadline(self):
        with patch.dict(os.environ, CLEAN_ENV):
            self.assertIsNone(get_client_config({"timeout": "0"}).timeout)

    def test_environment_overrides(self):
        env = dict(CLEAN_ENV, TREMOTE_HOST="override", TREMOTE_TIMEOUT_S="5")
        with patch.dict(os.environ, env):
            config = get_client_config({"host": "nas", "timeout": "1"})
        self.assertEqual(config.host, "override")
        self.assertEqual(config.timeout, 5.0)

    def test_invalid_values_raise(self):
        with patch.dict(os.environ, CLEAN_ENV):
            for raw in ({"port": "abc"}, {"port": "70000"}, {"timeout": "soon"}, {"timeout": "-1"}):
                with self.assertRaises(ValueError):
                    get_client_config(raw)

    def test_non_finite_timeout_raises(self):
        with patch.dict(os.environ, CLEAN_ENV):
            for value in ("inf", "-inf", "nan", "Infinity"):
                with self.assertRaises(ValueError):
                    get_client_config({"timeout": value})

    def test_save_and_reload(self):
        path = Path(self.temp_dir) / "nested" / "config.cfg"
        save_config(ClientConfig("nas", 9092, "/rpc", None), path)

        with patch.dict(os.environ, CLEAN_ENV):
            config = get_client_config(load_raw_config(path, self.env_file))
        self.assertEqual(config, ClientConfig("nas", 9092, "/rpc", None))


if __name__ == "__main__":
    unittest.main()
