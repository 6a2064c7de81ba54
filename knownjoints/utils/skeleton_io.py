"""
Skeleton loaders used by the command-line tools.

Every loader returns a SkeletonData with parallel joint/parent name lists,
"" marking a joint without parent.
"""
from __future__ import annotations

import json
import os
import re
from typing import List, Optional

from .data_types import SkeletonData
from .presets import (
    DUMP_SKELETON_EXTENSIONS,
    FBX_BONE_KEYWORDS,
    FBX_NULL_ATTRIBUTE_TYPE,
    FBX_SKELETON_ATTRIBUTE_TYPES,
    FBX_SKELETON_EXTENSIONS,
    JSON_SKELETON_EXTENSIONS,
)

# Attempt to import FBX SDK
try:
    import fbx

    HAS_FBX_SDK = True
except ImportError:
    HAS_FBX_SDK = False

_DUMP_LINE = re.compile(r"^\s*(?P<name>.+?)\s+\(Parent:\s*(?P<parent>.*?)\)\s*$")


def _skeleton_name(filepath: str) -> str:
    return os.path.splitext(os.path.basename(filepath))[0]


# =============================================================================
# JSON
# =============================================================================


def skeleton_from_dict(data: dict, name: str = "") -> SkeletonData:
    """
    Build a skeleton from either layout:
        {"joints": [...], "parents": [...]}
        {"bones": [{"name": ..., "parent": ...}, ...]}
    """
    if not isinstance(data, dict):
        raise ValueError(f"Skeleton '{name}' must be a JSON object")

    if "bones" in data:
        bones = data["bones"]
        if not isinstance(bones, list):
            raise ValueError(f"Skeleton '{name}': 'bones' must be a list")
        joints = []
        parents = []
        for bone in bones:
            if not isinstance(bone, dict) or "name" not in bone:
                raise ValueError(f"Skeleton '{name}': every bone needs a 'name'")
            joints.append(str(bone["name"]))
            parents.append(str(bone.get("parent") or ""))
        return SkeletonData(data.get("name", name), joints, parents)

    joints = data.get("joints")
    parents = data.get("parents")
    if not isinstance(joints, list) or not isinstance(parents, list):
        raise ValueError(f"Skeleton '{name}' needs 'joints' and 'parents' lists or a 'bones' list")
    if len(joints) != len(parents):
        raise ValueError(
            f"Skeleton '{name}': {len(joints)} joints but {len(parents)} parents"
        )
    return SkeletonData(
        data.get("name", name),
        [str(j) for j in joints],
        [str(p) if p else "" for p in parents],
    )


def load_skeleton_json(filepath: str) -> SkeletonData:
    with open(filepath, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid skeleton JSON in {filepath}: {e}") from e
    return skeleton_from_dict(data, _skeleton_name(filepath))


# =============================================================================
# Hierarchy Dump
# =============================================================================


def parse_hierarchy_dump(lines: List[str], name: str = "") -> SkeletonData:
    """Parse "  Name (Parent: X)" lines, X == "None" marking a root"""
    joints = []
    parents = []
    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        match = _DUMP_LINE.match(line.rstrip("\n"))
        if not match:
            raise ValueError(f"Skeleton '{name}' line {line_number}: cannot parse {line.strip()!r}")
        parent = match.group("parent").strip()
        joints.append(match.group("name").strip())
        parents.append("" if parent in ("", "None") else parent)
    return SkeletonData(name, joints, parents)


def load_hierarchy_dump(filepath: str) -> SkeletonData:
    with open(filepath, "r") as f:
        lines = f.readlines()
    return parse_hierarchy_dump(lines, _skeleton_name(filepath))


def dump_hierarchy(skeleton: SkeletonData, output_path: str):
    """Write a skeleton in the dump format, indented by depth"""
    depth = {}
    with open(output_path, "w") as f:
        for joint, parent in zip(skeleton.joint_names, skeleton.parent_joint_names):
            depth[joint] = depth.get(parent, -1) + 1 if parent else 0
            indent = "  " * depth[joint]
            f.write(f"{indent}{joint} (Parent: {parent or 'None'})\n")
    print(f"[Tools] Hierarchy dumped to {output_path}")


# =============================================================================
# FBX
# =============================================================================


def _is_bone_node(node) -> bool:
    attr = node.GetNodeAttribute()
    if attr:
        at = attr.GetAttributeType()
        if at in FBX_SKELETON_ATTRIBUTE_TYPES:
            return True
        if at == FBX_NULL_ATTRIBUTE_TYPE and node.GetChildCount() > 0:
            return True

    name_lower = node.GetName().lower()
    return any(k in name_lower for k in FBX_BONE_KEYWORDS)


def _collect_bones(node, joints: List[str], parents: List[str], last_bone_parent: Optional[str]):
    if _is_bone_node(node):
        joints.append(node.GetName())
        parents.append(last_bone_parent or "")
        last_bone_parent = node.GetName()

    for i in range(node.GetChildCount()):
        _collect_bones(node.GetChild(i), joints, parents, last_bone_parent)


def load_fbx_skeleton(filepath: str) -> SkeletonData:
    if not HAS_FBX_SDK:
        raise RuntimeError("FBX SDK not found. Install the Autodesk FBX Python SDK to read .fbx files.")

    manager = fbx.FbxManager.Create()
    try:
        importer = fbx.FbxImporter.Create(manager, "")
        if not importer.Initialize(filepath, -1, manager.GetIOSettings()):
            error_msg = f"Failed to initialize FBX importer for: {filepath}. Error: {importer.GetStatus().GetErrorString()}"
            print(f"[Tools] ERROR: {error_msg}")
            raise RuntimeError(error_msg)

        scene = fbx.FbxScene.Create(manager, "")
        importer.Import(scene)
        importer.Destroy()

        joints: List[str] = []
        parents: List[str] = []
        root_node = scene.GetRootNode()
        # The scene root itself is never a bone
        for i in range(root_node.GetChildCount()):
            _collect_bones(root_node.GetChild(i), joints, parents, None)
    finally:
        manager.Destroy()

    return SkeletonData(_skeleton_name(filepath), joints, parents)


def load_skeleton(filepath: str) -> SkeletonData:
    ext = os.path.splitext(filepath)[1].lower()
    if ext in JSON_SKELETON_EXTENSIONS:
        return load_skeleton_json(filepath)
    if ext in DUMP_SKELETON_EXTENSIONS:
        return load_hierarchy_dump(filepath)
    if ext in FBX_SKELETON_EXTENSIONS:
        return load_fbx_skeleton(filepath)
    raise ValueError(f"Unsupported skeleton file type: {filepath}")


def is_skeleton_file(filepath: str) -> bool:
    ext = os.path.splitext(filepath)[1].lower()
    return ext in JSON_SKELETON_EXTENSIONS + DUMP_SKELETON_EXTENSIONS + FBX_SKELETON_EXTENSIONS
