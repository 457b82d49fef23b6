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
A database of x86 CPUs, generated from InstLatx64's CPUID dumps.
"""
from ._models import CPU, Leaf
from .db import CPUS
from .helpers import find_cpu_by_model, find_cpu_by_signature, user_cpu


__version__ = "0.1.0"


# vim:textwidth=80:
