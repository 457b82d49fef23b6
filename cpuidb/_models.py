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
The data models of the CPU database. Both are frozen, once a dump has been
parsed nothing should touch the record anymore.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Leaf:
    """
    The result of one CPUID invocation. `leaf` is what went into EAX,
    `subleaf` what went into ECX, the rest is what came out.
    """
    leaf: int
    subleaf: int
    eax: int
    ebx: int
    ecx: int
    edx: int


@dataclass(frozen=True)
class CPU:
    """
    A data model of a CPU, as read from one CPUID dump. Family, model and
    stepping are the display values (extended fields already folded in), the
    raw leaf 1 EAX is kept as `signature`.
    """
    id: str
    vendor: str
    brand: str
    family: int
    model: int
    stepping: int
    signature: int
    max_standard_level: int
    max_extended_level: int
    features: tuple[str, ...] = ()
    leaves: tuple[Leaf, ...] = ()

    def leaf(self, leaf: int, subleaf: int = 0):
        """Returns the given leaf, or None if the dump didn't contain it."""
        for entry in self.leaves:
            if entry.leaf == leaf and entry.subleaf == subleaf:
                return entry
        return None

    def has_feature(self, name: str) -> bool:
        return name.casefold() in self.features


# vim:textwidth=80:
