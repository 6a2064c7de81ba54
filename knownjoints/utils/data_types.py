from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

INVALID_JOINT_INDEX = -1


class JointRole(IntEnum):
    """Canonical anatomical roles, in classification slot order"""
    Root = 0
    Hips = 1
    RightUpperArm = 2
    LeftUpperArm = 3
    RightWrist = 4
    LeftWrist = 5
    Chest = 6
    Neck = 7
    RightUpperLeg = 8
    LeftUpperLeg = 9
    RightAnkle = 10
    LeftAnkle = 11


KNOWN_JOINT_COUNT = len(JointRole)


def empty_known_joints() -> List[str]:
    return [""] * KNOWN_JOINT_COUNT


class Candidate:
    """A joint under consideration for a role, ranked by ascending score"""
    def __init__(self, name: str, score: float, order: int = 0, joint: Optional[int] = None):
        self.name = name
        self.score = score
        self.order = order  # first-occurrence position, breaks score ties
        self.joint = joint

    def sort_key(self):
        return (self.score, self.order)

    def __repr__(self):
        return f"Candidate({self.name!r}, {self.score}, {self.order})"


class SkeletonData:
    """Joint names with their parent names, as parallel lists"""
    def __init__(self, name: str, joint_names: Optional[List[str]], parent_joint_names: Optional[List[str]]):
        self.name = name
        self.joint_names = joint_names
        self.parent_joint_names = parent_joint_names

    @property
    def joint_count(self) -> int:
        return len(self.joint_names) if self.joint_names else 0

    def is_well_formed(self) -> bool:
        return (
            self.joint_names is not None
            and self.parent_joint_names is not None
            and len(self.joint_names) == len(self.parent_joint_names)
        )

