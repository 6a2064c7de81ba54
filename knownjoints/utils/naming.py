from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .presets import (
    PREFIX_SUFFIX_COVERAGE,
    PREFIX_SEPARATORS,
    SUFFIX_SEPARATORS,
    COMMON_SUFFIXES,
    LEFT_SIDE_MARKERS,
    RIGHT_SIDE_MARKERS,
    HIP_SIDE_MARKERS,
    SPINE_KEYWORDS,
    LEG_KEYWORDS,
    SHOULDER_KEYWORDS,
)

# =============================================================================
# Name Tests
# =============================================================================


def contains_any(name: str, keywords: Sequence[str]) -> bool:
    return any(kw in name for kw in keywords)


def is_left_side(name: str) -> bool:
    return contains_any(name.lower(), LEFT_SIDE_MARKERS)


def is_right_side(name: str) -> bool:
    return contains_any(name.lower(), RIGHT_SIDE_MARKERS)


def is_spine_joint(name: str) -> bool:
    return contains_any(name.lower(), SPINE_KEYWORDS)


def is_leg_joint(name: str) -> bool:
    name = name.lower()
    if contains_any(name, LEG_KEYWORDS):
        return True
    # "L_Hip" style rigs name the upper leg after the hip
    return "hip" in name and contains_any(name, HIP_SIDE_MARKERS)


def is_upper_arm_name(name: str) -> bool:
    """'arm' that is not a forearm or a lower arm"""
    name = name.lower()
    return "arm" in name and "forearm" not in name and "lower" not in name


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    def matches(self, name: str) -> bool:
        if self is Side.LEFT:
            return is_left_side(name)
        return is_right_side(name)

    @property
    def opposite(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class JointFilter(Enum):
    """Joint type gate applied while scanning a parent's children"""
    ANY = "any"
    LEG = "leg"
    SHOULDER = "shoulder"

    def accepts(self, name: str) -> bool:
        if self is JointFilter.LEG:
            return is_leg_joint(name)
        if self is JointFilter.SHOULDER:
            return contains_any(name.lower(), SHOULDER_KEYWORDS)
        return True


def find_joint_by_name_patterns(names: Sequence[str], patterns: Sequence[str]) -> Optional[int]:
    """
    Index of the first name containing a pattern (case-insensitive).
    Patterns are tried in order, so earlier patterns take precedence over
    earlier names.
    """
    lowered = [n.lower() for n in names]
    for pattern in patterns:
        pattern = pattern.lower()
        for i, name in enumerate(lowered):
            if pattern in name:
                return i
    return None


# =============================================================================
# Shared Prefix / Suffix Detection
# =============================================================================


def coverage_count(total: int, coverage: float) -> int:
    """Smallest name count that reaches the coverage share"""
    return math.ceil(round(total * coverage, 6))


def _group_by_separator(names: Sequence[str], separator: str, from_end: bool) -> Optional[Tuple[str, int]]:
    groups: Dict[str, list] = {}
    for name in names:
        idx = name.rfind(separator) if from_end else name.find(separator)
        if idx < 0:
            continue
        part = name[idx:] if from_end else name[: idx + 1]
        entry = groups.setdefault(part.lower(), [part, 0])
        entry[1] += 1
    if not groups:
        return None
    # max() keeps the first group on equal counts
    key, count = max(groups.values(), key=lambda g: g[1])
    return key, count


def detect_common_prefix(names: Sequence[str], coverage: float = PREFIX_SUFFIX_COVERAGE) -> str:
    min_count = coverage_count(len(names), coverage)
    lowered = [n.lower() for n in names]

    # Longest prefix of the shortest name that enough names share
    shortest = min(names, key=len)
    best_prefix = ""
    for length in range(1, len(shortest) + 1):
        potential = shortest[:length]
        count = sum(1 for n in lowered if n.startswith(potential.lower()))
        if count < min_count:
            break
        best_prefix = potential

    if best_prefix:
        return best_prefix

    # Namespace style prefixes ("DEF-", "mixamorig:", "Bip01_")
    best_count = 0
    for separator in PREFIX_SEPARATORS:
        group = _group_by_separator(names, separator, from_end=False)
        if group and group[1] >= min_count and group[1] > best_count:
            best_prefix, best_count = group

    return best_prefix


def detect_common_suffix(names: Sequence[str], coverage: float = PREFIX_SUFFIX_COVERAGE) -> str:
    min_count = coverage_count(len(names), coverage)
    lowered = [n.lower() for n in names]

    best_suffix = ""
    best_count = 0
    for suffix in COMMON_SUFFIXES:
        count = sum(1 for n in lowered if n.endswith(suffix.lower()))
        if count >= min_count and count > best_count:
            best_suffix, best_count = suffix, count

    if best_suffix:
        return best_suffix

    shortest = min(names, key=len)
    for length in range(1, len(shortest) + 1):
        potential = shortest[len(shortest) - length:]
        count = sum(1 for n in lowered if n.endswith(potential.lower()))
        if count < min_count:
            break
        best_suffix = potential

    if best_suffix:
        return best_suffix

    for separator in SUFFIX_SEPARATORS:
        group = _group_by_separator(names, separator, from_end=True)
        if group and group[1] >= min_count and group[1] > best_count:
            best_suffix, best_count = group

    return best_suffix


def detect_common_prefix_suffix(
    joint_names: Sequence[str], coverage: float = PREFIX_SUFFIX_COVERAGE
) -> Tuple[str, str]:
    """
    Detect a prefix and a suffix shared by most joint names (rig namespaces such as
    "mixamorig:" or exporter suffixes such as "_end"). Returns ("", "") when
    fewer than two names are usable.
    """
    if joint_names is None:
        return "", ""
    valid = [n for n in joint_names if n]
    if len(valid) < 2:
        return "", ""
    return detect_common_prefix(valid, coverage), detect_common_suffix(valid, coverage)


def strip_prefix_suffix(name: str, prefix: str, suffix: str) -> str:
    if not name:
        return name
    # A name is never stripped down to nothing
    if prefix and len(name) > len(prefix) and name.lower().startswith(prefix.lower()):
        name = name[len(prefix):]
    if suffix and len(name) > len(suffix) and name.lower().endswith(suffix.lower()):
        name = name[: len(name) - len(suffix)]
    return name


def normalize_joint_names(joint_names: Optional[Sequence[str]], prefix: str, suffix: str) -> Optional[List[str]]:
    if joint_names is None:
        return None
    return [strip_prefix_suffix(name, prefix, suffix) for name in joint_names]


def create_normalized_mapping(original_names: Sequence[str], normalized_names: Sequence[str]) -> Dict[str, str]:
    """Normalized name -> original name. Later duplicates overwrite earlier ones."""
    mapping = {}
    for original, normalized in zip(original_names, normalized_names):
        if normalized:
            mapping[normalized] = original
    return mapping
