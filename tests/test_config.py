"""
Unit Tests - Console configuration

Module: tests.test_config
Date: 2026-10-17
Version: 0.1.0-alpha
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from certaxis_console.core.config import ConsoleConfig
from certaxis_console.core.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_SESSION_CHECK_INTERVAL,
)


class TestConsoleConfig(unittest.TestCase):
    """Test suite for ConsoleConfig"""

    def test_defaults(self):
        """Test defaults without environment"""
        config = ConsoleConfig.from_env({})
        self.assertEqual(config.api_base_url, DEFAULT_API_BASE_URL)
        self.assertEqual(config.session_check_interval, DEFAULT_SESSION_CHECK_INTERVAL)
        self.assertEqual(config.session_check_interval, 60.0)
        self.assertEqual(config.login_path, "/login")
        self.assertEqual(config.session_file, Path("./data") / "session.json")

    def test_env_overrides(self):
        """Test environment variables"""
        config = ConsoleConfig.from_env({
            "CERTAXIS_API_BASE_URL": "https://api.certaxis.io/",
            "CERTAXIS_API_TIMEOUT": "5",
            "CERTAXIS_DATA_DIR": "/tmp/certaxis",
            "CERTAXIS_SESSION_CHECK_INTERVAL": "15",
        })
        self.assertEqual(config.api_base_url, "https://api.certaxis.io")
        self.assertEqual(config.request_timeout, 5.0)
        self.assertEqual(config.session_file, Path("/tmp/certaxis/session.json"))
        self.assertEqual(config.session_check_interval, 15.0)

    def test_invalid_number(self):
        """Test malformed numeric override"""
        with self.assertRaises(ValueError):
            ConsoleConfig.from_env({"CERTAXIS_API_TIMEOUT": "soon"})

    def test_non_positive_interval(self):
        """Test interval validation"""
        with self.assertRaises(ValueError):
            ConsoleConfig(session_check_interval=0)


if __name__ == "__main__":
    unittest.main()
