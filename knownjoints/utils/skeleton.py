from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

import numpy as np

from .data_types import INVALID_JOINT_INDEX
from .presets import ROOT_PARENT_NAMES

# =============================================================================
# Joint Table
# =============================================================================


class JointTable:
    """
    Index-based view of a skeleton hierarchy.

    Every distinct joint name gets an id in first-occurrence order. Parent names
    that never appear as joints ("orphan" parents, e.g. an armature object that
    was not exported as a bone) get ids after the joints so they can still act
    as the root. Joints sharing a name share an id, which merges their children.
    """

    def __init__(self, joint_names: Sequence[str], parent_joint_names: Sequence[str]):
        self.names: List[str] = []
        self.ids: Dict[str, int] = {}

        for name in joint_names:
            if name and name not in self.ids:
                self._add(name)
        self.joint_count = len(self.names)

        for parent in parent_joint_names:
            if parent and parent not in self.ids:
                self._add(parent)

        count = len(self.names)
        self.lower = [n.lower() for n in self.names]
        self.children: List[List[int]] = [[] for _ in range(count)]
        self.parents = np.full(count, INVALID_JOINT_INDEX, dtype=np.int64)

        for name, parent in zip(joint_names, parent_joint_names):
            if not name or not parent:
                continue
            child_id = self.ids[name]
            parent_id = self.ids[parent]
            if child_id not in self.children[parent_id]:
                self.children[parent_id].append(child_id)
            self.parents[child_id] = parent_id

        self.child_counts = np.array([len(c) for c in self.children], dtype=np.int64)

    def _add(self, name: str):
        self.ids[name] = len(self.names)
        self.names.append(name)

    def __len__(self):
        return len(self.names)

    def id_of(self, name: Optional[str]) -> Optional[int]:
        if not name:
            return None
        return self.ids.get(name)

    def name_of(self, joint: Optional[int]) -> Optional[str]:
        if joint is None:
            return None
        return self.names[joint]

    def joint_ids(self) -> range:
        """Ids of real joints (orphan parents excluded), in input order"""
        return range(self.joint_count)

    def joint_names(self) -> List[str]:
        return self.names[: self.joint_count]

    def child_count(self, joint: Optional[int]) -> int:
        if joint is None:
            return 0
        return int(self.child_counts[joint])

    def first_child(self, joint: Optional[int]) -> Optional[int]:
        if joint is None or not self.children[joint]:
            return None
        return self.children[joint][0]

    def is_child(self, joint: Optional[int], parent: Optional[int]) -> bool:
        if joint is None or parent is None:
            return False
        return joint in self.children[parent]

    def is_descendant(self, joint: Optional[int], ancestor: Optional[int]) -> bool:
        """True if ancestor lies strictly above joint"""
        if joint is None or ancestor is None:
            return False
        visited: Set[int] = {joint}
        current = int(self.parents[joint])
        while current != INVALID_JOINT_INDEX and current not in visited:
            if current == ancestor:
                return True
            visited.add(current)
            current = int(self.parents[current])
        return False

    def subtree_depth(self, joint: Optional[int], limit: Optional[int] = None) -> int:
        """
        Maximum number of descendant generations below a joint (0 for a leaf).
        A child already on the current path (a cycle) contributes nothing.
        With `limit`, the walk stops as soon as that depth is reached.
        """
        if joint is None:
            return 0

        path: Set[int] = {joint}
        stack = [(joint, 0, iter(self.children[joint]))]
        best = 0
        while stack:
            current, depth, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.discard(current)
                continue
            if child in path:
                continue
            best = max(best, depth + 1)
            if limit is not None and best >= limit:
                return best
            path.add(child)
            stack.append((child, depth + 1, iter(self.children[child])))
        return best

    def has_depth(self, joint: Optional[int], min_depth: int) -> bool:
        return joint is not None and self.subtree_depth(joint, limit=min_depth) >= min_depth

    def as_hierarchy_map(self) -> Dict[str, List[str]]:
        """Parent name -> ordered child names, for joints that have children"""
        return {
            self.names[p]: [self.names[c] for c in kids]
            for p, kids in enumerate(self.children)
            if kids
        }


# =============================================================================
# Root Detection
# =============================================================================


def find_orphan_parents(joint_names: Sequence[str], parent_joint_names: Sequence[str]) -> List[str]:
    """Parent names that are not joints themselves, in first-reference order"""
    joint_set = {n for n in joint_names if n}
    orphans = []
    for parent in parent_joint_names:
        if parent and parent not in joint_set and parent not in orphans:
            orphans.append(parent)
    return orphans


def find_root_joint(joint_names: Sequence[str], parent_joint_names: Sequence[str]) -> Optional[str]:
    if not joint_names:
        return None

    # 1. A single parent that is referenced but never defined
    orphans = find_orphan_parents(joint_names, parent_joint_names)
    if len(orphans) == 1:
        return orphans[0]

    # 2. A joint without a parent
    for name, parent in zip(joint_names, parent_joint_names):
        if not parent:
            return name

    # 3. Several undefined parents: prefer one called "root"
    if len(orphans) > 1:
        named_root = [o for o in orphans if "root" in o.lower()]
        if len(named_root) == 1:
            return named_root[0]
        return orphans[0]

    # 4. Self-parented joints or joints hanging off a scene-level node
    for name, parent in zip(joint_names, parent_joint_names):
        if parent == name or parent.lower() in ROOT_PARENT_NAMES:
            return name

    return joint_names[0]
