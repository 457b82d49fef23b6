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
Feature flag tables for the CPUID leaves we care about. Names follow the ones
Linux prints in /proc/cpuinfo, so they're easy to grep for.
"""
from typing import Iterable

from ._models import Leaf


# (leaf, subleaf, register) -> {bit: name}
FEATURE_BITS = {
    (0x00000001, 0, "edx"): {
        0: "fpu", 1: "vme", 2: "de", 3: "pse", 4: "tsc", 5: "msr", 6: "pae",
        7: "mce", 8: "cx8", 9: "apic", 11: "sep", 12: "mtrr", 13: "pge",
        14: "mca", 15: "cmov", 16: "pat", 17: "pse36", 18: "pn",
        19: "clflush", 21: "dts", 22: "acpi", 23: "mmx", 24: "fxsr",
        25: "sse", 26: "sse2", 27: "ss", 28: "ht", 29: "tm", 30: "ia64",
        31: "pbe",
    },
    (0x00000001, 0, "ecx"): {
        0: "sse3", 1: "pclmulqdq", 2: "dtes64", 3: "monitor", 4: "ds_cpl",
        5: "vmx", 6: "smx", 7: "est", 8: "tm2", 9: "ssse3", 10: "cid",
        11: "sdbg", 12: "fma", 13: "cx16", 14: "xtpr", 15: "pdcm",
        17: "pcid", 18: "dca", 19: "sse4_1", 20: "sse4_2", 21: "x2apic",
        22: "movbe", 23: "popcnt", 24: "tsc_deadline_timer", 25: "aes",
        26: "xsave", 27: "osxsave", 28: "avx", 29: "f16c", 30: "rdrand",
        31: "hypervisor",
    },
    (0x00000007, 0, "ebx"): {
        0: "fsgsbase", 1: "tsc_adjust", 2: "sgx", 3: "bmi1", 4: "hle",
        5: "avx2", 7: "smep", 8: "bmi2", 9: "erms", 10: "invpcid", 11: "rtm",
        12: "cqm", 14: "mpx", 15: "rdt_a", 16: "avx512f", 17: "avx512dq",
        18: "rdseed", 19: "adx", 20: "smap", 21: "avx512ifma",
        23: "clflushopt", 24: "clwb", 25: "intel_pt", 26: "avx512pf",
        27: "avx512er", 28: "avx512cd", 29: "sha_ni", 30: "avx512bw",
        31: "avx512vl",
    },
    (0x00000007, 0, "ecx"): {
        0: "prefetchwt1", 1: "avx512vbmi", 2: "umip", 3: "pku", 4: "ospke",
        5: "waitpkg", 6: "avx512_vbmi2", 7: "cet_ss", 8: "gfni", 9: "vaes",
        10: "vpclmulqdq", 11: "avx512_vnni", 12: "avx512_bitalg",
        14: "avx512_vpopcntdq", 16: "la57", 22: "rdpid", 25: "cldemote",
        27: "movdiri", 28: "movdir64b", 30: "sgx_lc",
    },
    (0x00000007, 0, "edx"): {
        2: "avx512_4vnniw", 3: "avx512_4fmaps", 4: "fsrm",
        8: "avx512_vp2intersect", 10: "md_clear", 14: "serialize",
        16: "tsxldtrk", 18: "pconfig", 20: "ibt", 22: "amx_bf16",
        23: "avx512_fp16", 24: "amx_tile", 25: "amx_int8", 26: "spec_ctrl",
        27: "intel_stibp", 28: "flush_l1d", 29: "arch_capabilities",
        31: "spec_ctrl_ssbd",
    },
    (0x80000001, 0, "edx"): {
        11: "syscall", 20: "nx", 22: "mmxext", 25: "fxsr_opt", 26: "pdpe1gb",
        27: "rdtscp", 29: "lm", 30: "3dnowext", 31: "3dnow",
    },
    (0x80000001, 0, "ecx"): {
        0: "lahf_lm", 1: "cmp_legacy", 2: "svm", 3: "extapic",
        4: "cr8_legacy", 5: "abm", 6: "sse4a", 7: "misalignsse",
        8: "3dnowprefetch", 9: "osvw", 10: "ibs", 11: "xop", 12: "skinit",
        13: "wdt", 15: "lwp", 16: "fma4", 17: "tce", 21: "tbm",
        22: "topoext", 23: "perfctr_core", 24: "perfctr_nb", 26: "bpext",
        28: "perfctr_llc", 29: "mwaitx",
    },
}


def decode_features(leaves: Iterable[Leaf],
        max_standard_level: int,
        max_extended_level: int) -> tuple[str, ...]:
    """
    Returns the names of all set feature bits, in the order of FEATURE_BITS
    and then by bit. Leaves above the reported maximum levels are ignored,
    some dumps contain garbage there.
    """
    # the first row wins on duplicates, the same as in parse_cpu
    by_key = {}
    for entry in leaves:
        by_key.setdefault((entry.leaf, entry.subleaf), entry)

    features = []
    for (leaf, subleaf, register), bits in FEATURE_BITS.items():
        if leaf & 0x80000000:
            if leaf > max_extended_level:
                continue
        elif leaf > max_standard_level:
            continue

        entry = by_key.get((leaf, subleaf))
        if entry is None:
            continue

        value = getattr(entry, register)
        for bit in sorted(bits):
            if value & (1 << bit):
                features.append(bits[bit])

    return tuple(features)


# vim:textwidth=80:
