"""
Fuzzy joint-name matching.

Scores names with a normalized Levenshtein similarity (0-100). Used to align an
arbitrary skeleton against a canonical vocabulary, or against another skeleton,
when the structural classifier has nothing to go on.
"""
from __future__ import annotations

import os
import re
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .data_types import Candidate, JointRole, empty_known_joints
from .naming import coverage_count
from .presets import (
    AMBIGUOUS_ROLE_THRESHOLD,
    DEFAULT_MATCH_THRESHOLD,
    KNOWN_JOINT_NAMES,
    KNOWN_ROLE_THRESHOLD,
    MIN_TORSO_CHILDREN,
    TIE_TOLERANCE,
    TRIM_COVERAGE,
)
from .skeleton import JointTable, find_root_joint

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

AMBIGUOUS_ROLES = {
    JointRole.Hips,
    JointRole.Chest,
    JointRole.LeftUpperArm,
    JointRole.RightUpperArm,
    JointRole.LeftUpperLeg,
    JointRole.RightUpperLeg,
}

OPPOSITE_ROLES = {
    JointRole.LeftUpperLeg: JointRole.RightUpperLeg,
    JointRole.RightUpperLeg: JointRole.LeftUpperLeg,
    JointRole.LeftUpperArm: JointRole.RightUpperArm,
    JointRole.RightUpperArm: JointRole.LeftUpperArm,
}

# =============================================================================
# Similarity
# =============================================================================


def strip_symbols(name: str) -> str:
    return _NON_ALNUM.sub("", name).lower()


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings"""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)
    if len(s2) == 0:
        return len(s1)

    previous_row = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def _stripped_similarity(a: str, b: str) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100.0
    return 100.0 * (1.0 - levenshtein_distance(a, b) / max_len)


def similarity(a: str, b: str) -> float:
    """
    Percentage similarity of two joint names, ignoring case and symbols.
    similarity("Left_Hand", "lefthand") == 100.0
    """
    return _stripped_similarity(strip_symbols(a), strip_symbols(b))


def role_threshold(role: JointRole) -> float:
    """Hips, chest and the upper limbs have the most naming variety"""
    if role in AMBIGUOUS_ROLES:
        return AMBIGUOUS_ROLE_THRESHOLD
    return KNOWN_ROLE_THRESHOLD


# =============================================================================
# Matching
# =============================================================================


def trim_shared_prefix_suffix(names: Sequence[str], coverage: float = TRIM_COVERAGE) -> Dict[str, str]:
    """
    Map each name to itself minus a prefix/suffix shared by nearly all names.
    The prefix/suffix is derived from the 2nd-4th names, which skips a root that
    often sits outside the rig namespace.
    """
    if not names:
        return {}
    if len(names) < 4:
        return {n: n for n in names}

    samples = list(names[1:4])
    prefix = os.path.commonprefix(samples)
    suffix = os.path.commonprefix([s[::-1] for s in samples])[::-1]

    min_count = coverage_count(len(names), coverage)
    use_prefix = bool(prefix) and sum(1 for n in names if n.startswith(prefix)) >= min_count
    use_suffix = bool(suffix) and sum(1 for n in names if n.endswith(suffix)) >= min_count

    trimmed = {}
    for name in names:
        result = name
        if use_prefix and result.startswith(prefix):
            result = result[len(prefix):]
        if use_suffix and result.endswith(suffix):
            result = result[: len(result) - len(suffix)]
        trimmed[name] = result
    return trimmed


def _disambiguate(matches: List[Candidate]) -> List[Tuple[str, float]]:
    """
    Emit matches best-first. Matches within TIE_TOLERANCE of the best remaining
    score form a group; only the one with the earliest canonical name survives.
    """
    remaining = list(matches)
    result = []
    while remaining:
        top = max(remaining, key=lambda m: m.score)
        group = [m for m in remaining if top.score - m.score <= TIE_TOLERANCE]
        winner = min(group, key=lambda m: m.order)
        result.append((winner.name, winner.score))
        remaining = [m for m in remaining if m not in group]
    return result


def find_closest_matches(
    candidate_names: Sequence[str],
    canonical_names: Sequence[str],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> List[Tuple[str, float]]:
    """
    Match canonical names against candidate joint names.

    For every canonical name the first candidate scoring at least `threshold`
    is taken, otherwise the best scoring one. The per-name matches are then
    disambiguated into (candidate_name, score) pairs, best first. Several
    canonical names may resolve to the same candidate.
    """
    trimmed = trim_shared_prefix_suffix(candidate_names)
    if not trimmed or not canonical_names:
        return []

    originals = list(trimmed.keys())
    stripped = [strip_symbols(v) for v in trimmed.values()]
    scores = np.array(
        [[_stripped_similarity(strip_symbols(c), s) for s in stripped] for c in canonical_names],
        dtype=np.float64,
    )

    matches: List[Candidate] = []
    for order, row in enumerate(scores):
        hits = np.flatnonzero(row >= threshold)
        if hits.size:
            best = int(hits[0])
        else:
            best = int(np.argmax(row))
            if row[best] <= 0.0:
                continue
        matches.append(Candidate(originals[best], float(row[best]), order))

    return _disambiguate(matches)


# =============================================================================
# Vocabulary-Driven Known Joints
# =============================================================================


def _parent_name(table: JointTable, name: str) -> Optional[str]:
    joint = table.id_of(name)
    if joint is None or table.parents[joint] < 0:
        return None
    return table.names[int(table.parents[joint])]


def _filter_by_structure(
    role: JointRole, results: List[Tuple[str, float]], known: List[str], table: JointTable
) -> List[Tuple[str, float]]:
    if role in (JointRole.Hips, JointRole.Chest):
        return [r for r in results if table.child_count(table.id_of(r[0])) >= MIN_TORSO_CHILDREN]

    if role in (JointRole.LeftUpperLeg, JointRole.RightUpperLeg) and known[JointRole.Hips]:
        opposite = known[OPPOSITE_ROLES[role]]
        return [
            r for r in results
            if table.id_of(r[0]) is not None
            and r[0] != opposite
            and _parent_name(table, r[0]) == known[JointRole.Hips]
        ]

    if role in (JointRole.LeftUpperArm, JointRole.RightUpperArm) and known[JointRole.Chest]:
        opposite = known[OPPOSITE_ROLES[role]]
        return [
            r for r in results
            if table.id_of(r[0]) is not None
            and r[0] != opposite
            and _parent_name(table, r[0]) != known[JointRole.Chest]
        ]

    return []


def find_known_joints_by_similarity(
    joint_names: Optional[Sequence[str]], parent_joint_names: Optional[Sequence[str]]
) -> List[str]:
    """
    Classify joints purely by name similarity to the canonical vocabulary, with a
    light structural filter when a role has several plausible matches.
    """
    known = empty_known_joints()
    if joint_names is None or parent_joint_names is None or len(joint_names) != len(parent_joint_names):
        return known
    if not joint_names:
        return known

    table = JointTable(joint_names, parent_joint_names)
    names = table.joint_names()
    known[JointRole.Root] = find_root_joint(joint_names, parent_joint_names) or ""

    for role in JointRole:
        if role is JointRole.Root:
            continue

        results = find_closest_matches(names, KNOWN_JOINT_NAMES[role], role_threshold(role))
        if not results:
            print(f"[Fuzzy] Could not find any known joint for {role.name}.")
            continue

        best = results[0]
        if len(results) > 1:
            filtered = _filter_by_structure(role, results, known, table)
            if filtered:
                best = filtered[0]

        known[role] = best[0]

    return known
