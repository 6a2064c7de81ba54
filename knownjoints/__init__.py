from .utils.classifier import (
    classify_skeleton,
    find_known_joints,
    find_role_collisions,
    known_joint_index,
)
from .utils.data_types import INVALID_JOINT_INDEX, JointRole, SkeletonData
from .utils.fuzzy import find_closest_matches, find_known_joints_by_similarity, similarity

__all__ = [
    "INVALID_JOINT_INDEX",
    "JointRole",
    "SkeletonData",
    "classify_skeleton",
    "find_closest_matches",
    "find_known_joints",
    "find_known_joints_by_similarity",
    "find_role_collisions",
    "known_joint_index",
    "similarity",
]
