#!/usr/bin/env python3
"""
Quick Start Guide for Firmware Strings.

This example walks through encoding text into a fixed-size UCS-2 buffer,
continuing after truncation, and validating a raw Latin-1 dump.
"""

import sys
from array import array
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from firmware_strings import Char8, Char16, CStr8, encode, iter_encode


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Firmware Strings")
    print("=" * 45)

    # Step 1: Encode into a caller-owned buffer
    print("\n📄 Step 1: Encoding into a 16-unit UCS-2 buffer")
    print("-" * 30)

    buffer = array("H", bytes(32))
    result = encode("Boot entry:\nWindows Boot Manager", buffer, Char16)
    string = result.unwrap()
    print(f"✅ Encoded {len(string)} units: {str(string)!r}")
    print(f"📏 Remainder: {result.remainder!r}")

    # Step 2: Continue with fresh buffers
    print("\n🔁 Step 2: Chunked encoding")
    print("-" * 30)

    for chunk in iter_encode("Caf\xe9 cr\xe8me br\xfbl\xe9e", 6, Char8):
        print(f"   {chunk.unwrap().to_ints().tobytes()!r}")

    # Step 3: Validate a raw dump
    print("\n🔍 Step 3: Validating raw Latin-1 data")
    print("-" * 30)

    for raw in (b"EFI\x00", b"EF\x00I\x00", b"EFI"):
        validation = CStr8.from_ints_with_nul(raw)
        if validation.success:
            print(f"   ✅ {raw!r} -> {str(validation.value)!r}")
        else:
            print(f"   ❌ {raw!r} -> {validation.error}")


if __name__ == "__main__":
    quick_start_example()
