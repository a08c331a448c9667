#!/usr/bin/env python3

from pathlib import Path

import click
import pytest

from avsc_to_code.avsc_to_code import avsc_to_code
from avsc_to_code.cli_utils import reconstruct_command_line

COMPANY = Path(__file__).parent / "test_data" / "schemas" / "company"


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context only the command name is returned"""
        assert reconstruct_command_line(avsc_to_code) == "avsc_to_code"

    def test_reconstruct_command_line_with_context(self):
        """Options come before arguments and existing paths are shortened"""
        params = {
            "schema_path": str(COMPANY),
            "protocol_path": None,
            "namespaces": ("com.example:Example.Models",),
            "skip_directories": False,
            "language": "python",
            "config": None,
            "force": True,
            "verbose": False,
            "output": "/nonexistent/out",
        }
        with click.Context(avsc_to_code, info_name="avsc_to_code") as ctx:
            ctx.params = params
            result = reconstruct_command_line(avsc_to_code)

        assert result == (
            "avsc_to_code --schema company --namespace com.example:Example.Models --language python --force /nonexistent/out"
        )

    def test_repeated_options(self):
        """Every value of a multiple option is repeated with its flag"""
        with click.Context(avsc_to_code) as ctx:
            ctx.params = {"namespaces": ("a:b", "c:d"), "output": "out"}
            result = reconstruct_command_line(avsc_to_code)

        assert result == "avsc_to_code --namespace a:b --namespace c:d out"


if __name__ == "__main__":
    pytest.main([__file__])
