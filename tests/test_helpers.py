"""Tests for lookups over the CPU table."""

from __future__ import annotations

from cpuidb import helpers
from cpuidb._models import CPU
from cpuidb.helpers import find_cpu_by_model, find_cpu_by_signature, user_cpu


def _cpu(cpu_id: str, vendor: str, brand: str, family: int, model: int, stepping: int) -> CPU:
    return CPU(
        id=cpu_id,
        vendor=vendor,
        brand=brand,
        family=family,
        model=model,
        stepping=stepping,
        signature=0,
        max_standard_level=0,
        max_extended_level=0,
    )


CPUS = [
    _cpu("GenuineIntel00306A9_IvyBridge_CPUID", "GenuineIntel", "Intel(R) Core(TM) i7-3770K CPU @ 3.50GHz", 6, 58, 9),
    _cpu("GenuineIntel00306A9_IvyBridge2_CPUID", "GenuineIntel", "Intel(R) Core(TM) i5-3570 CPU @ 3.40GHz", 6, 58, 9),
    _cpu("AuthenticAMD0A20F10_K19_Vermeer_CPUID", "AuthenticAMD", "AMD Ryzen 9 5950X 16-Core Processor", 25, 33, 0),
    _cpu("GenuineIntel0000F29_P4_CPUID", "GenuineIntel", "", 15, 2, 9),
]


def test_find_cpu_by_model_matches_partial_brand() -> None:
    assert find_cpu_by_model("i5-3570", CPUS) is CPUS[1]
    assert find_cpu_by_model("Ryzen 9 5950X", CPUS) is CPUS[2]


def test_find_cpu_by_model_falls_back_to_id() -> None:
    assert find_cpu_by_model("0000F29_P4", CPUS) is CPUS[3]


def test_find_cpu_by_model_without_any_overlap() -> None:
    assert find_cpu_by_model("###", CPUS) is None


def test_find_cpu_by_signature_returns_first_match() -> None:
    assert find_cpu_by_signature("GenuineIntel", 6, 58, cpus=CPUS) is CPUS[0]
    assert find_cpu_by_signature("AuthenticAMD", 25, 33, 0, CPUS) is CPUS[2]
    assert find_cpu_by_signature("AuthenticAMD", 25, 33, 1, CPUS) is None


def test_lookups_default_to_generated_table(monkeypatch) -> None:
    from cpuidb import db

    monkeypatch.setattr(db, "CPUS", CPUS[:1])

    assert find_cpu_by_signature("GenuineIntel", 6, 58) is CPUS[0]


def test_user_cpu_by_signature(monkeypatch) -> None:
    info = {"vendor_id_raw": "AuthenticAMD", "family": 25, "model": 33, "stepping": 2, "brand_raw": "x"}
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", lambda: info)

    assert user_cpu(CPUS) is CPUS[2]


def test_user_cpu_by_brand_and_cached(monkeypatch) -> None:
    calls = []

    def get_cpu_info() -> dict:
        calls.append(1)
        return {"vendor_id_raw": "GenuineIntel", "family": 6, "model": 42, "brand_raw": "Intel(R) Core(TM) i5-3570"}

    from cpuidb import db

    monkeypatch.setattr(db, "CPUS", CPUS)
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", get_cpu_info)

    assert user_cpu() is CPUS[1]
    assert user_cpu() is CPUS[1]
    assert len(calls) == 1


def test_user_cpu_unknown_host(monkeypatch) -> None:
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", lambda: {})

    assert user_cpu(CPUS) is None


def test_user_cpu_caches_misses(monkeypatch) -> None:
    from cpuidb import db

    calls = []

    def get_cpu_info() -> dict:
        calls.append(1)
        return {}

    monkeypatch.setattr(db, "CPUS", [])
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", get_cpu_info)

    assert [user_cpu(), user_cpu(), user_cpu()] == [None, None, None]
    assert len(calls) == 1


def test_user_cpu_searches_explicit_tables_again(monkeypatch) -> None:
    info = {"vendor_id_raw": "GenuineIntel", "family": 6, "model": 58, "stepping": 9}
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", lambda: info)

    assert user_cpu(CPUS[:1]) is CPUS[0]
    assert user_cpu(CPUS[1:2]) is CPUS[1]


def test_user_cpu_explicit_table_leaves_cache_alone(monkeypatch) -> None:
    from cpuidb import db

    info = {"vendor_id_raw": "AuthenticAMD", "family": 25, "model": 33, "stepping": 0}
    monkeypatch.setattr(helpers.cpuinfo, "get_cpu_info", lambda: info)
    monkeypatch.setattr(db, "CPUS", [])

    assert user_cpu(CPUS) is CPUS[2]
    assert user_cpu() is None
