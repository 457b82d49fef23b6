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
Creates the CPU database out of a mirror of InstLatx64's CPUID dumps.

    python -m cpuidb.make_db --src ./source --out cpuidb/db.py

Dumps which can't be parsed are skipped with a warning, so a handful of odd
files never stops the database from being regenerated.
"""
import argparse
import fnmatch
import os
import sys
from typing import NamedTuple, Optional, Sequence

from . import dogelog
from ._models import CPU
from .emit import FormatError, output
from .parse import ParseError, parse_cpu_file


DEFAULT_SRC = "./source"
DEFAULT_OUT = "db.py"
CPUID_PATTERN = "*CPUID*.txt"


class ImportResult(NamedTuple):
    """The parsed CPUs, and (path, error) for every dump that failed."""
    cpus: list[CPU]
    failures: list[tuple[str, Exception]]


def cpuid_files(directory: str, pattern: str = CPUID_PATTERN) -> list[str]:
    """
    Returns all files in the given directory whose name matches the pattern,
    sorted by name. Raises OSError if the directory can't be listed.
    """
    names = sorted(os.listdir(directory))
    return [
        os.path.join(directory, name) for name in names
        if fnmatch.fnmatchcase(name, pattern)
    ]


def parse_cpuid_files(directory: str,
        pattern: str = CPUID_PATTERN) -> ImportResult:
    """
    Parses all CPUID dumps in the given directory. Dumps that fail are logged
    and skipped, the others are returned in the order of `cpuid_files`.
    """
    filenames = cpuid_files(directory, pattern)
    dogelog.debug(f"Found {len(filenames)} CPUID dumps in {directory}")

    result = ImportResult([], [])
    progress = dogelog.Progress("Parsing CPUID dumps...", len(filenames))
    for filename in filenames:
        progress.stack()
        try:
            cpu = parse_cpu_file(filename)
        except (ParseError, OSError) as err:
            dogelog.warning(f"Failed to parse {filename}: {err}")
            result.failures.append((filename, err))
            continue
        result.cpus.append(cpu)
    progress.finish()

    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpuidb-make-db",
        description="Generates the cpuidb CPU table from CPUID dumps.",
    )
    parser.add_argument("--src", default=DEFAULT_SRC,
        help="source directory containing a mirror of InstLatx64")
    parser.add_argument("--out", default=DEFAULT_OUT, help="output file")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="also print debug messages")
    parser.add_argument("--no-color", action="store_true",
        help="don't color the log prefixes")
    parser.add_argument("--log-file",
        help="log into this file instead of the terminal")
    return parser


def init_logging(args: argparse.Namespace):
    if args.log_file:
        dogelog.init_file(args.log_file)
    elif args.no_color:
        dogelog.init_colorless()
    elif args.verbose:
        dogelog.init_debug()
    else:
        dogelog.init()

    if args.verbose:
        dogelog.filterlevel = dogelog.DEBUG


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Runs the generator, returns the exit code."""
    args = build_parser().parse_args(argv)
    try:
        init_logging(args)
    except OSError as err:
        dogelog.init_colorless()
        dogelog.error(f"Can't open the log file {args.log_file}: {err}")
        return 1

    try:
        cpus, failures = parse_cpuid_files(args.src)
    except OSError as err:
        dogelog.error(f"Can't read the source directory {args.src}: {err}")
        return 1
    dogelog.info(f"Parsed {len(cpus)} CPUs, skipped {len(failures)} dumps")

    try:
        output(args.out, cpus)
    except FormatError as err:
        dogelog.error(str(err))
        return 1
    except OSError as err:
        dogelog.error(f"Can't write {args.out}: {err}")
        return 1

    dogelog.info(f"Done with CPUs, saved to:\n{args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())


# vim:textwidth=80:
