from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from .data_types import Candidate
from .naming import (
    JointFilter,
    Side,
    contains_any,
    find_joint_by_name_patterns,
    is_leg_joint,
    is_upper_arm_name,
)
from .presets import (
    ANKLE_PATTERNS,
    ANKLE_PENALIZED_SUFFIXES,
    ANKLE_PRIORITIES,
    ARM_CONTINUE_PATTERNS,
    EXACT_SIDE_NAME_BONUS,
    GENERIC_ARM_PRIORITY,
    HELPER_SUFFIXES,
    LEFT_SHOULDER_PATTERNS,
    LEFT_UPPER_LEG_PATTERNS,
    LEG_CONTINUE_PATTERNS,
    MIN_HAND_FINGERS,
    MIN_LIMB_DEPTH,
    RIGHT_SHOULDER_PATTERNS,
    RIGHT_UPPER_LEG_PATTERNS,
    SHOULDER_PRIORITY,
    SUFFIX_PENALTY,
    UPPER_ARM_PRIORITIES,
    UPPER_LEG_PRIORITIES,
    WRIST_PATTERNS,
    WRIST_PRIORITIES,
)
from .skeleton import JointTable

Pair = Tuple[Optional[int], Optional[int]]

# =============================================================================
# Ranking Helpers
# =============================================================================


def first_priority(name: str, priorities: Sequence[Tuple[str, int]]) -> int:
    """Bonus of the first priority pattern found in the name"""
    for pattern, bonus in priorities:
        if pattern in name:
            return bonus
    return 0


def suffix_penalty(name: str, suffixes: Sequence[str]) -> int:
    return SUFFIX_PENALTY if contains_any(name, suffixes) else 0


def rank_candidates(candidates: List[Candidate]) -> List[Candidate]:
    """Lowest score first; equal scores keep first-occurrence order"""
    return sorted(candidates, key=Candidate.sort_key)


def _make_candidates(table: JointTable, joints: Sequence[int], score_fn) -> List[Candidate]:
    return [
        Candidate(table.names[j], score_fn(table.lower[j]), order, joint=j)
        for order, j in enumerate(joints)
    ]


def _append_unique(pool: List[int], joint: Optional[int]):
    if joint is not None and joint not in pool:
        pool.append(joint)


def _first_deep_enough(table: JointTable, ranked: List[Candidate]) -> Optional[int]:
    # Shallow candidates are skipped, not just ranked lower
    for candidate in ranked:
        if table.has_depth(candidate.joint, MIN_LIMB_DEPTH):
            return candidate.joint
    return None


# =============================================================================
# Generic Paired Search
# =============================================================================


def find_paired_joints(
    table: JointTable,
    parent: Optional[int],
    left_patterns: Sequence[str],
    right_patterns: Sequence[str],
    joint_filter: JointFilter = JointFilter.ANY,
) -> Pair:
    """
    Find a left/right pair of joints.

    Exact patterns are matched anywhere in the skeleton first. A side that is
    still missing is filled from the parent's children, using the side markers
    and the joint filter.
    """
    if parent is None:
        return None, None

    names = table.joint_names()
    left = find_joint_by_name_patterns(names, left_patterns)
    right = find_joint_by_name_patterns(names, right_patterns)
    if left is not None and right is not None:
        return left, right

    for child in table.children[parent]:
        name = table.lower[child]
        if not joint_filter.accepts(name):
            continue
        if left is None and Side.LEFT.matches(name):
            left = child
        elif right is None and Side.RIGHT.matches(name):
            right = child

    return left, right


def find_best_joint_by_name(
    table: JointTable,
    side: Side,
    include_patterns: Sequence[str],
    priority_patterns: Sequence[Tuple[str, int]],
    penalized_suffixes: Sequence[str],
) -> Optional[int]:
    """Best sided joint whose name contains one of the include patterns"""
    joints = [
        j for j in table.joint_ids()
        if side.matches(table.lower[j]) and contains_any(table.lower[j], include_patterns)
    ]
    if not joints:
        return None
    if len(joints) == 1:
        return joints[0]

    def score(name: str) -> int:
        priority = first_priority(name, priority_patterns)
        # "lefthand", "rightfoot": the plain name is the real joint
        if any(name == side.value + pattern for pattern in include_patterns):
            priority += EXACT_SIDE_NAME_BONUS
        return priority + len(name) + suffix_penalty(name, penalized_suffixes)

    return rank_candidates(_make_candidates(table, joints, score))[0].joint


def traverse_hierarchy_for_joint(
    table: JointTable,
    start: Optional[int],
    target_patterns: Sequence[str],
    continue_patterns: Sequence[str] = (),
    penalized_suffixes: Sequence[str] = (),
    visited: Optional[Set[int]] = None,
) -> Optional[int]:
    """
    Walk down from `start` collecting children that match the target patterns.
    Children matching a continue pattern (e.g. "calf" on the way to the foot) get
    a walk of their own whose best match joins the parent's matches. Every walk
    follows the first child.
    """
    if start is None:
        return None
    if visited is None:
        visited = set()
    if start in visited:
        return None
    visited.add(start)

    def best_of(found: List[int]) -> Optional[int]:
        if not found:
            return None
        if len(found) == 1:
            return found[0]
        ranked = rank_candidates(
            _make_candidates(table, found, lambda name: len(name) + suffix_penalty(name, penalized_suffixes))
        )
        return ranked[0].joint

    # [current joint, remaining children, matches of this walk]
    stack = [[start, iter(table.children[start]), []]]
    while True:
        frame = stack[-1]
        child = next(frame[1], None)

        if child is not None:
            name = table.lower[child]
            if contains_any(name, target_patterns):
                frame[2].append(child)
            if continue_patterns and contains_any(name, continue_patterns) and child not in visited:
                visited.add(child)
                stack.append([child, iter(table.children[child]), []])
            continue

        following = table.first_child(frame[0])
        if following is not None and following not in visited:
            visited.add(following)
            frame[0] = following
            frame[1] = iter(table.children[following])
            continue

        stack.pop()
        best = best_of(frame[2])
        if not stack:
            return best
        if best is not None:
            stack[-1][2].append(best)


# =============================================================================
# Legs
# =============================================================================


def find_valid_upper_leg(
    table: JointTable, primary: Optional[int], hips: Optional[int], side: Side
) -> Optional[int]:
    if table.has_depth(primary, MIN_LIMB_DEPTH):
        return primary

    pool: List[int] = []
    if hips is not None:
        for child in table.children[hips]:
            name = table.lower[child]
            if side.matches(name) and is_leg_joint(name):
                _append_unique(pool, child)

    patterns = LEFT_UPPER_LEG_PATTERNS if side is Side.LEFT else RIGHT_UPPER_LEG_PATTERNS
    names = table.joint_names()
    for pattern in patterns:
        _append_unique(pool, find_joint_by_name_patterns(names, [pattern]))

    ranked = rank_candidates(
        _make_candidates(table, pool, lambda name: len(name) + first_priority(name, UPPER_LEG_PRIORITIES))
    )
    return _first_deep_enough(table, ranked)


def find_upper_legs(table: JointTable, hips: Optional[int]) -> Pair:
    left, right = find_paired_joints(
        table, hips, LEFT_UPPER_LEG_PATTERNS, RIGHT_UPPER_LEG_PATTERNS, JointFilter.LEG
    )
    return (
        find_valid_upper_leg(table, left, hips, Side.LEFT),
        find_valid_upper_leg(table, right, hips, Side.RIGHT),
    )


def find_ankle_for_leg(table: JointTable, upper_leg: Optional[int]) -> Optional[int]:
    return traverse_hierarchy_for_joint(
        table, upper_leg, ANKLE_PATTERNS, LEG_CONTINUE_PATTERNS, HELPER_SUFFIXES
    )


def find_ankles(table: JointTable, left_upper_leg: Optional[int], right_upper_leg: Optional[int]) -> Pair:
    left = find_best_joint_by_name(table, Side.LEFT, ANKLE_PATTERNS, ANKLE_PRIORITIES, ANKLE_PENALIZED_SUFFIXES)
    right = find_best_joint_by_name(table, Side.RIGHT, ANKLE_PATTERNS, ANKLE_PRIORITIES, ANKLE_PENALIZED_SUFFIXES)
    if left is not None and right is not None:
        return left, right

    if left is None:
        left = find_ankle_for_leg(table, left_upper_leg)
    if right is None:
        right = find_ankle_for_leg(table, right_upper_leg)
    return left, right


# =============================================================================
# Arms
# =============================================================================


def find_shoulders(table: JointTable, chest: Optional[int]) -> Pair:
    return find_paired_joints(
        table, chest, LEFT_SHOULDER_PATTERNS, RIGHT_SHOULDER_PATTERNS, JointFilter.SHOULDER
    )


def _upper_arm_name_score(name: str) -> int:
    priority = first_priority(name, UPPER_ARM_PRIORITIES)
    if priority == 0:
        if "arm" in name and "upper" not in name:
            priority = GENERIC_ARM_PRIORITY
        elif "shoulder" in name:
            priority = SHOULDER_PRIORITY
    # Every helper marker counts against the name
    penalty = sum(SUFFIX_PENALTY for suffix in HELPER_SUFFIXES if suffix in name)
    return priority + len(name) + penalty


def find_best_upper_arm_by_name(table: JointTable, side: Side) -> Optional[int]:
    joints = [
        j for j in table.joint_ids()
        if side.matches(table.lower[j])
        and (is_upper_arm_name(table.lower[j]) or "shoulder" in table.lower[j])
    ]
    if not joints:
        return None
    if len(joints) == 1:
        return joints[0]

    # A separate arm joint beats a shoulder-only one
    arms = [j for j in joints if "arm" in table.lower[j]]
    if arms:
        joints = arms

    return rank_candidates(_make_candidates(table, joints, _upper_arm_name_score))[0].joint


def find_upper_arm_for_shoulder(table: JointTable, shoulder: Optional[int]) -> Optional[int]:
    if shoulder is None:
        return None
    for child in table.children[shoulder]:
        if is_upper_arm_name(table.lower[child]):
            return child
    return None


def find_arms_from_chest(table: JointTable, chest: Optional[int]) -> Pair:
    if chest is None:
        return None, None

    left = right = None
    for child in table.children[chest]:
        name = table.lower[child]
        if not is_upper_arm_name(name):
            continue
        if Side.LEFT.matches(name):
            left = child
        elif Side.RIGHT.matches(name):
            right = child
    return left, right


def _upper_arm_pool_score(name: str) -> int:
    priority = first_priority(name, UPPER_ARM_PRIORITIES)
    if priority == 0:
        if is_upper_arm_name(name):
            priority = GENERIC_ARM_PRIORITY
        elif "shoulder" in name:
            priority = SHOULDER_PRIORITY
    return priority + len(name)


def find_valid_upper_arm(
    table: JointTable, shoulder: Optional[int], chest: Optional[int], side: Side
) -> Optional[int]:
    pool: List[int] = []
    _append_unique(pool, find_best_upper_arm_by_name(table, side))
    _append_unique(pool, find_upper_arm_for_shoulder(table, shoulder))

    left_arm, right_arm = find_arms_from_chest(table, chest)
    _append_unique(pool, left_arm if side is Side.LEFT else right_arm)

    if chest is not None:
        for child in table.children[chest]:
            name = table.lower[child]
            if side.matches(name) and ("arm" in name or "shoulder" in name):
                _append_unique(pool, child)

    ranked = rank_candidates(_make_candidates(table, pool, _upper_arm_pool_score))
    return _first_deep_enough(table, ranked)


def find_upper_arms(
    table: JointTable, left_shoulder: Optional[int], right_shoulder: Optional[int], chest: Optional[int]
) -> Pair:
    return (
        find_valid_upper_arm(table, left_shoulder, chest, Side.LEFT),
        find_valid_upper_arm(table, right_shoulder, chest, Side.RIGHT),
    )


# =============================================================================
# Wrists
# =============================================================================


def has_hand_structure(table: JointTable, joint: int) -> bool:
    """Several children that each continue into more segments (fingers)"""
    children = table.children[joint]
    if len(children) < MIN_HAND_FINGERS:
        return False
    segmented = sum(1 for c in children if table.child_count(c) > 0)
    return segmented >= MIN_HAND_FINGERS


def find_structural_hand(table: JointTable, start: Optional[int]) -> Optional[int]:
    current = start
    visited: Set[int] = set()
    while current is not None and current not in visited:
        visited.add(current)
        for child in table.children[current]:
            if has_hand_structure(table, child):
                return child
        current = table.first_child(current)
    return None


def find_wrist_for_arm(table: JointTable, upper_arm: Optional[int]) -> Optional[int]:
    wrist = traverse_hierarchy_for_joint(
        table, upper_arm, WRIST_PATTERNS, ARM_CONTINUE_PATTERNS, HELPER_SUFFIXES
    )
    if wrist is not None:
        return wrist
    return find_structural_hand(table, upper_arm)


def find_wrists(table: JointTable, left_upper_arm: Optional[int], right_upper_arm: Optional[int]) -> Pair:
    left = find_best_joint_by_name(table, Side.LEFT, WRIST_PATTERNS, WRIST_PRIORITIES, HELPER_SUFFIXES)
    right = find_best_joint_by_name(table, Side.RIGHT, WRIST_PATTERNS, WRIST_PRIORITIES, HELPER_SUFFIXES)
    if left is not None and right is not None:
        return left, right

    if left is None:
        left = find_wrist_for_arm(table, left_upper_arm)
    if right is None:
        right = find_wrist_for_arm(table, right_upper_arm)
    return left, right
