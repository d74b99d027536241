# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/utils/versioncmp.py

from __future__ import annotations

import re

from dockprov.errors import VersionParseError

_VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)(?:-([0-9A-Za-z.]+))?")

# Docker edition suffixes are releases, not pre-releases.
_RELEASE_SUFFIXES = {"ce", "ee"}


def _key(version: str) -> tuple[tuple[int, ...], int, str]:
    m = _VERSION_RE.match(version.strip())
    if not m:
        raise VersionParseError(f"unparseable version: {version!r}")

    nums = tuple(int(p) for p in m.group(1).split("."))
    # pad to three components so 1.12 == 1.12.0
    nums = nums + (0,) * (3 - len(nums))

    suffix = (m.group(2) or "").lower()
    if not suffix or suffix in _RELEASE_SUFFIXES:
        return nums, 1, ""
    # rc / beta / dev builds sort below the final release
    return nums, 0, suffix


def compare(v1: str, v2: str) -> int:
    """Return -1, 0 or 1 as v1 is older than, equal to or newer than v2."""
    k1, k2 = _key(v1), _key(v2)
    return (k1 > k2) - (k1 < k2)


def less_than(v1: str, v2: str) -> bool:
    return compare(v1, v2) < 0


def greater_than_or_equal_to(v1: str, v2: str) -> bool:
    return compare(v1, v2) >= 0
