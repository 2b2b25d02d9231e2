"""Tests for logging setup."""

import logging
import sys
from unittest.mock import patch

from lxcspawn.utils.logging import setup_logging


@patch("lxcspawn.utils.logging.logging.basicConfig")
def test_records_go_to_stderr(mock_basic_config):
    """Test that log records stay off the stdout progress display."""
    setup_logging("DEBUG")

    kwargs = mock_basic_config.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    (handler,) = kwargs["handlers"]
    assert handler.stream is sys.stderr


@patch("lxcspawn.utils.logging.logging.basicConfig")
def test_unknown_level_defaults_to_info(mock_basic_config):
    """Test that an unrecognized level falls back to INFO."""
    setup_logging("chatty")

    assert mock_basic_config.call_args.kwargs["level"] == logging.INFO
