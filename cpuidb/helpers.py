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
Lookup functions over the generated CPU table.
"""
import difflib
from typing import Optional, Sequence

import cpuinfo

from ._models import CPU


# 0 means "not looked up yet", None is a valid (cached) miss
_cached_cpu = 0


def _database(cpus: Optional[Sequence[CPU]]) -> Sequence[CPU]:
    if cpus is None:
        from .db import CPUS
        return CPUS
    return cpus


def find_cpu_by_model(model: str,
        cpus: Optional[Sequence[CPU]] = None) -> Optional[CPU]:
    """
    Finds the CPU whose brand string (or ID, for CPUs without one) matches the
    given model best, or None if nothing matches at all.

    The model doesn't have to match exactly, "i7-3770K" is enough to find
    "Intel(R) Core(TM) i7-3770K CPU @ 3.50GHz". The longest common block wins,
    on a tie the first CPU in the table.
    """
    # SequenceMatcher caches information about seq2, so the searched model
    # goes there and every candidate is fed in as seq1
    sequence_matcher = difflib.SequenceMatcher(b=model.casefold())

    current_score = 0
    best = None
    for cpu in _database(cpus):
        for candidate in (cpu.brand, cpu.id):
            if not candidate:
                continue
            sequence_matcher.set_seq1(candidate.casefold())
            # the size of the match is the length of the common substring
            match = sequence_matcher.find_longest_match()
            if match.size > current_score:
                current_score = match.size
                best = cpu

    return best


def find_cpu_by_signature(vendor: str,
        family: int,
        model: int,
        stepping: Optional[int] = None,
        cpus: Optional[Sequence[CPU]] = None) -> Optional[CPU]:
    """
    Returns the first CPU with the given vendor string and display family and
    model (and stepping, if given), or None.
    """
    for cpu in _database(cpus):
        if cpu.vendor != vendor or cpu.family != family or cpu.model != model:
            continue
        if stepping is not None and cpu.stepping != stepping:
            continue
        return cpu
    return None


def user_cpu(cpus: Optional[Sequence[CPU]] = None) -> Optional[CPU]:
    """
    Tries to find the CPU of this machine in the table, first by signature,
    then by the brand string. Returns None if it isn't in there.

    Lookups in the generated table are cached, hits and misses alike, since
    the host doesn't change while we run. An explicitly given table is always
    searched again.
    """
    global _cached_cpu

    if cpus is None and not isinstance(_cached_cpu, int):
        return _cached_cpu

    info = cpuinfo.get_cpu_info()

    cpu = None
    vendor = info.get("vendor_id_raw")
    if vendor and "family" in info and "model" in info:
        cpu = find_cpu_by_signature(
            vendor,
            info["family"],
            info["model"],
            info.get("stepping"),
            cpus,
        )
        if cpu is None:
            # steppings are often missing from the dumps, the model is close
            # enough
            cpu = find_cpu_by_signature(
                vendor, info["family"], info["model"], cpus=cpus)

    if cpu is None:
        # brand_raw could look like Intel(R) Core(TM) i9-1337M CPU @ 4.20GHz
        brand = info.get("brand_raw")
        if brand:
            cpu = find_cpu_by_model(brand, cpus)

    if cpus is None:
        _cached_cpu = cpu
    return cpu


# vim:textwidth=80:
