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
Regenerates cpuidb/db.py out of a local mirror of InstLatx64, e.g.

    git clone https://github.com/InstLatx64/InstLatx64 source
    ./database-scripts/make-db.py --src source --out cpuidb/db.py
"""
import sys

from cpuidb.make_db import main


if __name__ == "__main__":
    sys.exit(main())


# vim:textwidth=80:
