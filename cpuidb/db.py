# Code generated by cpuidb.make_db. DO NOT EDIT.

"""CPU records parsed from InstLatx64 CPUID dumps."""

from cpuidb._models import CPU, Leaf

CPUS = []
