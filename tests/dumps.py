"""Synthetic CPUID dumps in the InstLatx64 text format."""

from __future__ import annotations

from pathlib import Path

IVYBRIDGE = """\
------[ Versions ]------

Program Version : AIDA64 v3.00.2500

------[ CPU Info ]------

CPU Name : Intel Core i7-3770K

------[ Logical CPU #0 ]------

CPUID 00000000: 0000000D-756E6547-6C65746E-49656E69 [GenuineIntel]
CPUID 00000001: 000306A9-00100800-7FBAE3FF-BFEBFBFF
CPUID 00000004: 1C004121-01C0003F-0000003F-00000000 [SL 00]
CPUID 00000004: 1C004122-01C0003F-0000003F-00000000 [SL 01]
CPUID 00000007: 00000000-00000281-00000000-00000000 [SL 00]
CPUID 80000000: 80000008-00000000-00000000-00000000
CPUID 80000001: 00000000-00000000-00000001-28100800
CPUID 80000002: 20202020-20202020-65746E49-2952286C [        Intel(R]
CPUID 80000003: 726F4320-4D542865-37692029-3737332D [ Core(TM) i7-377]
CPUID 80000004: 43204B30-40205550-352E3320-7A484730 [0K CPU @ 3.50GHz]

------[ Logical CPU #1 ]------

CPUID 00000000: 0000000D-756E6547-6C65746E-49656E69 [GenuineIntel]
CPUID 00000001: 000306A9-01100800-7FBAE3FF-BFEBFBFF
"""

CORRUPT = """\
------[ Versions ]------

Program Version : AIDA64 v3.00.2500
this dump got truncated before any register line
"""


def make_dump(vendor: str = "GenuineIntel", signature: int = 0x000306A9, max_level: int = 1) -> str:
    """Build a minimal dump with leaf 0 and leaf 1 only."""
    raw = vendor.encode("ascii")
    ebx, edx, ecx = (int.from_bytes(raw[i : i + 4], "little") for i in (0, 4, 8))
    return (
        f"CPUID 00000000: {max_level:08X}-{ebx:08X}-{ecx:08X}-{edx:08X}\n"
        f"CPUID 00000001: {signature:08X}-00000000-00000000-00000000\n"
    )


def write_dump(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path
