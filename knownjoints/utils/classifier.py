from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .data_types import (
    INVALID_JOINT_INDEX,
    JointRole,
    SkeletonData,
    empty_known_joints,
)
from .fuzzy import find_known_joints_by_similarity
from .limbs import find_ankles, find_shoulders, find_upper_arms, find_upper_legs, find_wrists
from .naming import create_normalized_mapping, detect_common_prefix_suffix, normalize_joint_names
from .skeleton import JointTable, find_root_joint
from .spine import find_chest_joint, find_hips_joint, find_neck_joint

# =============================================================================
# Known Joint Classification
# =============================================================================


def find_known_joints(
    joint_names: Optional[Sequence[str]], parent_joint_names: Optional[Sequence[str]]
) -> List[str]:
    """
    Find which joint plays each canonical role in an arbitrary humanoid skeleton.

    Args:
        joint_names: Joint names in skeleton order
        parent_joint_names: Parent name per joint ("" for a joint without parent)

    Returns:
        One original joint name per JointRole slot, "" where the role could not
        be resolved. Malformed input yields an all-empty result.
    """
    known = empty_known_joints()
    if joint_names is None or parent_joint_names is None or len(joint_names) != len(parent_joint_names):
        return known
    if not joint_names:
        return known

    # Rig namespaces ("mixamorig:", "DEF-") would defeat the name patterns
    prefix, suffix = detect_common_prefix_suffix(joint_names)
    normalized_joints = normalize_joint_names(joint_names, prefix, suffix)
    normalized_parents = normalize_joint_names(parent_joint_names, prefix, suffix)

    to_original = create_normalized_mapping(parent_joint_names, normalized_parents)
    to_original.update(create_normalized_mapping(joint_names, normalized_joints))

    table = JointTable(normalized_joints, normalized_parents)

    root = table.id_of(find_root_joint(normalized_joints, normalized_parents))
    if root is not None and root >= table.joint_count:
        print(f"[KnownJoints] Root '{table.names[root]}' is only referenced as a parent.")

    hips = find_hips_joint(table, root)
    chest = find_chest_joint(table, hips)
    neck = find_neck_joint(table, chest)

    left_upper_leg, right_upper_leg = find_upper_legs(table, hips)
    left_ankle, right_ankle = find_ankles(table, left_upper_leg, right_upper_leg)

    left_shoulder, right_shoulder = find_shoulders(table, chest)
    left_upper_arm, right_upper_arm = find_upper_arms(table, left_shoulder, right_shoulder, chest)
    left_wrist, right_wrist = find_wrists(table, left_upper_arm, right_upper_arm)

    resolved = {
        JointRole.Root: root,
        JointRole.Hips: hips,
        JointRole.Chest: chest,
        JointRole.Neck: neck,
        JointRole.LeftUpperLeg: left_upper_leg,
        JointRole.RightUpperLeg: right_upper_leg,
        JointRole.LeftAnkle: left_ankle,
        JointRole.RightAnkle: right_ankle,
        JointRole.LeftUpperArm: left_upper_arm,
        JointRole.RightUpperArm: right_upper_arm,
        JointRole.LeftWrist: left_wrist,
        JointRole.RightWrist: right_wrist,
    }
    for role, joint in resolved.items():
        if joint is not None:
            name = table.names[joint]
            known[role] = to_original.get(name, name)

    report_role_collisions(known)
    return known


def find_role_collisions(known_joints: Sequence[str]) -> Dict[str, List[JointRole]]:
    """Joints that were assigned to more than one role"""
    roles_by_joint: Dict[str, List[JointRole]] = {}
    for role in JointRole:
        name = known_joints[role]
        if name:
            roles_by_joint.setdefault(name, []).append(role)
    return {name: roles for name, roles in roles_by_joint.items() if len(roles) > 1}


def report_role_collisions(known_joints: Sequence[str]) -> Dict[str, List[JointRole]]:
    collisions = find_role_collisions(known_joints)
    for name, roles in collisions.items():
        role_names = ", ".join(r.name for r in roles)
        print(f"[KnownJoints] WARNING: '{name}' resolved for several roles: {role_names}")
    return collisions


def known_joints_to_dict(known_joints: Sequence[str]) -> Dict[str, str]:
    return {role.name: known_joints[role] for role in JointRole}


def classify_skeleton(skeleton: SkeletonData, method: str = "structural") -> Dict[str, str]:
    """Role name -> joint name for a loaded skeleton"""
    if not skeleton.is_well_formed():
        print(f"[KnownJoints] Skeleton '{skeleton.name}' has mismatched joint and parent lists.")

    if method == "structural":
        known = find_known_joints(skeleton.joint_names, skeleton.parent_joint_names)
    elif method == "similarity":
        known = find_known_joints_by_similarity(skeleton.joint_names, skeleton.parent_joint_names)
    else:
        raise ValueError(f"Unknown classification method: {method}")
    return known_joints_to_dict(known)


def known_joint_index(joint_names: Sequence[str], known_joints: Sequence[str], role: JointRole) -> int:
    name = known_joints[role]
    if not name or name not in joint_names:
        return INVALID_JOINT_INDEX
    return list(joint_names).index(name)
