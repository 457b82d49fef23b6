#!/usr/bin/env python3
#
#   Copyright 2021 MultisampledNight
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
"""
Parses the CPUID dumps of InstLatx64 (the AIDA64 text format) into CPU
records.

The interesting lines of such a dump look like this:

    ------[ Logical CPU #0 ]------

    CPUID 00000000: 0000000D-756E6547-6C65746E-49656E69 [GenuineIntel]
    CPUID 00000001: 000306A9-00100800-7FBAE3FF-BFEBFBFF
    CPUID 00000004: 1C004121-01C0003F-0000003F-00000000 [SL 00]
    CPUID 00000004: 1C004122-01C0003F-0000003F-00000000 [SL 01]

Everything else (AIDA64 version, motherboard, the other logical CPUs...) is
ignored.
"""
import os
import re

from ._models import CPU, Leaf
from .features import decode_features


LEAFREGEX = re.compile(
    r"^\s*CPUID\s+([0-9a-f]{8}):\s*"
    r"([0-9a-f]{8})-([0-9a-f]{8})-([0-9a-f]{8})-([0-9a-f]{8})(.*)$",
    re.IGNORECASE,
)
SUBLEAFREGEX = re.compile(r"\[SL\s+([0-9a-f]+)\]", re.IGNORECASE)
SECTIONREGEX = re.compile(r"^\s*-+\[\s*(.*?)\s*\]-+\s*$")
LOGICALREGEX = re.compile(r"^Logical CPU #\d+$", re.IGNORECASE)

BRAND_LEAVES = (0x80000002, 0x80000003, 0x80000004)


class ParseError(ValueError):
    """Raised if a dump doesn't contain a usable CPU."""


def _register_lines(text: str) -> list[str]:
    """
    Returns the lines of the first logical CPU. If the dump has no logical CPU
    sections at all, all lines are returned.
    """
    lines = []
    in_logical = False
    for line in text.splitlines():
        section = SECTIONREGEX.match(line)
        if section is None:
            lines.append(line)
            continue

        if in_logical:
            # the first logical CPU is done, the others are usually identical
            break
        if LOGICALREGEX.match(section.group(1)):
            in_logical = True
            lines = []
    return lines


def parse_leaves(text: str) -> tuple[Leaf, ...]:
    """Extracts all leaves of the first logical CPU, in file order."""
    leaves = []
    seen = {}
    for line in _register_lines(text):
        match = LEAFREGEX.match(line)
        if match is None:
            continue
        leaf, eax, ebx, ecx, edx = (int(group, 16) for group in match.groups()[:5])

        # without an explicit [SL nn] marker, repeated leaves just count up
        sub = SUBLEAFREGEX.search(match.group(6))
        if sub is not None:
            subleaf = int(sub.group(1), 16)
        else:
            subleaf = seen.get(leaf, 0)
        seen[leaf] = seen.get(leaf, 0) + 1

        leaves.append(Leaf(leaf, subleaf, eax, ebx, ecx, edx))
    return tuple(leaves)


def _registers_to_string(*registers: int) -> str:
    raw = b"".join(register.to_bytes(4, "little") for register in registers)
    return raw.decode("latin-1")


def decode_signature(eax: int) -> tuple[int, int, int]:
    """
    Converts leaf 1 EAX to the (family, model, stepping) triple as vendors
    display it. The extended family only counts for family 0xF, the extended
    model only for family 6 and 0xF.
    """
    stepping = eax & 0xF
    model = (eax >> 4) & 0xF
    family = (eax >> 8) & 0xF

    if family == 0xF:
        family += (eax >> 20) & 0xFF
    if family == 0x6 or family >= 0xF:
        model += ((eax >> 16) & 0xF) << 4

    return family, model, stepping


def parse_cpu(text: str, cpu_id: str) -> CPU:
    """
    Parses the given dump text into a CPU with the given ID. Raises a
    ParseError if there's nothing to build a CPU from.
    """
    leaves = parse_leaves(text)
    if not leaves:
        raise ParseError("no CPUID register lines found")
    by_key = {}
    for leaf in leaves:
        by_key.setdefault((leaf.leaf, leaf.subleaf), leaf)

    basic = by_key.get((0x00000000, 0))
    if basic is None:
        raise ParseError("CPUID leaf 00000000 is missing")
    max_standard_level = basic.eax

    vendor = _registers_to_string(basic.ebx, basic.edx, basic.ecx)
    if not vendor.isascii() or not vendor.isprintable():
        raise ParseError(f"vendor string {vendor!r} isn't printable")

    if max_standard_level >= 1:
        version = by_key.get((0x00000001, 0))
        if version is None:
            raise ParseError("CPUID leaf 00000001 is missing")
        signature = version.eax
    else:
        # a CPU that only knows leaf 0, nothing to decode
        signature = 0
    family, model, stepping = decode_signature(signature)

    extended = by_key.get((0x80000000, 0))
    max_extended_level = 0
    if extended is not None and extended.eax & 0x80000000:
        max_extended_level = extended.eax

    brand = ""
    brand_leaves = [by_key.get((leaf, 0)) for leaf in BRAND_LEAVES]
    if max_extended_level >= BRAND_LEAVES[-1] and None not in brand_leaves:
        brand = "".join(
                _registers_to_string(leaf.eax, leaf.ebx, leaf.ecx, leaf.edx)
                for leaf in brand_leaves
            )
        brand = brand.replace("\x00", "").strip()

    return CPU(
            id=cpu_id,
            vendor=vendor,
            brand=brand,
            family=family,
            model=model,
            stepping=stepping,
            signature=signature,
            max_standard_level=max_standard_level,
            max_extended_level=max_extended_level,
            features=decode_features(
                leaves, max_standard_level, max_extended_level),
            leaves=leaves,
        )


def parse_cpu_file(path: str) -> CPU:
    """
    Reads and parses the given dump. The file name without `.txt` becomes the
    ID of the CPU.
    """
    cpu_id = os.path.basename(path)
    if cpu_id.casefold().endswith(".txt"):
        cpu_id = cpu_id[:-len(".txt")]

    # the dumps are mostly ASCII, but some have stray latin-1 in the
    # motherboard section we don't care about anyway
    with open(path, encoding="utf-8", errors="replace") as fh:
        text = fh.read()

    return parse_cpu(text, cpu_id)


# vim:textwidth=80:
