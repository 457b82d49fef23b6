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
Turns parsed CPUs into the source of the `cpuidb.db` module.

Every record is written field by field as a `CPU(...)` call, so the generated
module is plain Python that needs nothing but the model classes at import
time. The result is run through black before it's written, which is also the
check that we generated valid Python at all.
"""
import ast
import os
import tempfile
from typing import Callable, Iterable

import black

from ._models import CPU, Leaf


GENERATOR = "cpuidb.make_db"
HEADER = f"# Code generated by {GENERATOR}. DO NOT EDIT.\n\n"
PREAMBLE = (
    '"""CPU records parsed from InstLatx64 CPUID dumps."""\n'
    "from cpuidb._models import CPU, Leaf\n\n"
)


class FormatError(ValueError):
    """Raised if the generated source isn't valid Python."""


def _hex(value: int) -> str:
    return f"0x{value:08X}"


def _tuple(items: Iterable[str]) -> str:
    items = list(items)
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def _strings(values: tuple[str, ...]) -> str:
    return _tuple(repr(value) for value in values)


def _leaves(leaves: tuple[Leaf, ...]) -> str:
    return _tuple(leaf_python_syntax(leaf) for leaf in leaves)


# field name -> how its value is written, in the order of the dataclasses
LEAF_FIELDS: tuple[tuple[str, Callable], ...] = (
    ("leaf", _hex),
    ("subleaf", str),
    ("eax", _hex),
    ("ebx", _hex),
    ("ecx", _hex),
    ("edx", _hex),
)

CPU_FIELDS: tuple[tuple[str, Callable], ...] = (
    ("id", repr),
    ("vendor", repr),
    ("brand", repr),
    ("family", str),
    ("model", str),
    ("stepping", str),
    ("signature", _hex),
    ("max_standard_level", _hex),
    ("max_extended_level", _hex),
    ("features", _strings),
    ("leaves", _leaves),
)


def _call(name: str, fields: tuple[tuple[str, Callable], ...], record) -> str:
    arguments = ", ".join(
        f"{field}={render(getattr(record, field))}" for field, render in fields
    )
    return f"{name}({arguments})"


def leaf_python_syntax(leaf: Leaf) -> str:
    return _call("Leaf", LEAF_FIELDS, leaf)


def cpu_python_syntax(cpu: CPU) -> str:
    """
    Returns Python code constructing the given CPU. Meant to be used as an
    element of a list literal, the names are unqualified.
    """
    return _call("CPU", CPU_FIELDS, cpu)


def build(cpus: Iterable[CPU]) -> str:
    """
    Builds the source of a module defining `CPUS` as the given CPUs, in the
    given order. Not formatted, see format_source.
    """
    lines = [HEADER, PREAMBLE, "CPUS = [\n"]
    for cpu in cpus:
        lines.append(f"{cpu_python_syntax(cpu)},\n")
    lines.append("]\n")
    return "".join(lines)


def format_source(raw: str) -> str:
    """
    Formats the given source with black. Raises FormatError if it isn't valid
    Python.
    """
    try:
        formatted = black.format_str(raw, mode=black.Mode())
    except black.InvalidInput as err:
        raise FormatError(f"generated source isn't valid Python: {err}") \
            from err

    # black should never produce this, but the file gets imported later on
    try:
        ast.parse(formatted)
    except SyntaxError as err:
        raise FormatError(f"formatted source isn't valid Python: {err}") \
            from err
    return formatted


def output(path: str, cpus: Iterable[CPU]):
    """
    Writes the formatted module for the given CPUs to the given path. The
    file is only replaced once everything succeeded, on failure the old one
    stays as it was.
    """
    code = format_source(build(cpus))

    directory = os.path.dirname(os.path.abspath(path))
    fd, tmppath = tempfile.mkstemp(
        prefix=".cpuidb-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(code)
        os.chmod(tmppath, 0o644)
        os.replace(tmppath, path)
    except BaseException:
        if os.path.exists(tmppath):
            os.unlink(tmppath)
        raise


# vim:textwidth=80:
