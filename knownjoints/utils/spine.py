from __future__ import annotations

from typing import Optional, Set

from .naming import contains_any, find_joint_by_name_patterns, is_leg_joint, is_spine_joint
from .presets import (
    ARM_ROOT_KEYWORDS,
    CHEST_CHILD_KEYWORDS,
    CHEST_PATTERNS,
    HEAD_KEYWORDS,
    HIPS_FALLBACK_KEYWORDS,
    HIPS_PATTERNS,
    MIN_LIMB_DEPTH,
    NECK_PATTERNS,
    SPINE_CHAIN_KEYWORDS,
)
from .skeleton import JointTable

# =============================================================================
# Hips
# =============================================================================


def count_leg_children(table: JointTable, joint: int) -> int:
    """Leg children deep enough to be real chains"""
    legs = 0
    for child in table.children[joint]:
        name = table.lower[child]
        # A child named like both counts as spine, never as a leg
        if is_spine_joint(name):
            continue
        if is_leg_joint(name) and table.has_depth(child, MIN_LIMB_DEPTH):
            legs += 1
    return legs


def has_hips_signature(table: JointTable, joint: Optional[int]) -> bool:
    if joint is None or table.child_count(joint) < 2:
        return False
    # A spine child is optional, two legs are not
    return count_leg_children(table, joint) >= 2


def is_valid_hips(table: JointTable, candidate: int, root: int) -> bool:
    return candidate != root and has_hips_signature(table, candidate)


def find_hips_joint(table: JointTable, root: Optional[int]) -> Optional[int]:
    """
    Find the hips: the joint that parents both legs (and usually the spine).

    Tries the usual hips names first, then looks for the structural signature among
    the root's children. Rigs where the hips are the root itself (Mixamo) fall
    through to the root.
    """
    if root is None:
        return None

    candidate = find_joint_by_name_patterns(table.joint_names(), HIPS_PATTERNS)
    if (
        candidate is not None
        and is_valid_hips(table, candidate, root)
        and table.is_descendant(candidate, root)
    ):
        return candidate

    root_children = table.children[root]
    for child in root_children:
        if has_hips_signature(table, child):
            return child

    for child in root_children:
        if contains_any(table.lower[child], HIPS_FALLBACK_KEYWORDS) and is_valid_hips(table, child, root):
            return child

    if has_hips_signature(table, root):
        return root

    return None


# =============================================================================
# Chest
# =============================================================================


def is_valid_chest(table: JointTable, candidate: int) -> bool:
    children = table.children[candidate]
    if len(children) < 2:
        return False
    return any(contains_any(table.lower[c], CHEST_CHILD_KEYWORDS) for c in children)


def has_chest_characteristics(table: JointTable, joint: int) -> bool:
    """Neck (or head) plus two shoulders/arms that continue into a limb"""
    children = table.children[joint]
    if len(children) < 3:
        return False

    has_neck = False
    shoulders = 0
    for child in children:
        name = table.lower[child]
        if contains_any(name, HEAD_KEYWORDS):
            has_neck = True
        elif contains_any(name, ARM_ROOT_KEYWORDS) and table.child_count(child) >= 1:
            shoulders += 1

    return has_neck and shoulders >= 2


def get_spine_child(table: JointTable, joint: int) -> Optional[int]:
    for child in table.children[joint]:
        if contains_any(table.lower[child], SPINE_CHAIN_KEYWORDS):
            return child
    return None


def walk_spine_for_chest(table: JointTable, start: int, visited: Set[int]) -> Optional[int]:
    """
    Depth-first search down the spine for the first joint that looks like a chest.

    Each stack frame walks one spine chain: it descends into every spine-named
    child, then moves on to the next spine joint of its own chain. When a chain
    runs out without a chest, its last spine joint is accepted if it still
    branches into a real limb.
    """
    if start in visited:
        return None
    visited.add(start)

    # [current joint, remaining children, last spine child seen on this chain]
    stack = [[start, iter(table.children[start]), None]]
    while stack:
        frame = stack[-1]
        child = next(frame[1], None)

        if child is not None:
            if not is_spine_joint(table.lower[child]):
                continue
            if has_chest_characteristics(table, child) and table.has_depth(child, MIN_LIMB_DEPTH):
                return child
            frame[2] = child
            if child not in visited:
                visited.add(child)
                stack.append([child, iter(table.children[child]), None])
            continue

        following = get_spine_child(table, frame[0])
        if following is not None and following not in visited:
            visited.add(following)
            frame[0] = following
            frame[1] = iter(table.children[following])
            continue

        stack.pop()
        last_spine = frame[2]
        if (
            last_spine is not None
            and table.child_count(last_spine) >= 2
            and table.has_depth(last_spine, MIN_LIMB_DEPTH)
        ):
            return last_spine

    return None


def find_chest_joint(table: JointTable, hips: Optional[int]) -> Optional[int]:
    if hips is None:
        return None

    candidate = find_joint_by_name_patterns(table.joint_names(), CHEST_PATTERNS)
    if (
        candidate is not None
        and is_valid_chest(table, candidate)
        and table.has_depth(candidate, MIN_LIMB_DEPTH)
        and table.is_descendant(candidate, hips)
    ):
        return candidate

    return walk_spine_for_chest(table, hips, set())


# =============================================================================
# Neck
# =============================================================================


def find_neck_joint(table: JointTable, chest: Optional[int]) -> Optional[int]:
    if chest is None:
        return None

    candidate = find_joint_by_name_patterns(table.joint_names(), NECK_PATTERNS)
    if candidate is not None and table.is_child(candidate, chest):
        return candidate

    for child in table.children[chest]:
        if "neck" in table.lower[child]:
            return child

    return None
