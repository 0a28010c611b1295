"""Command-line interface module for Firmware Strings.

This module provides the firmware-strings tool for encoding text into
firmware strings and validating raw string dumps.
"""

from .main import main

__all__ = ["main"]
