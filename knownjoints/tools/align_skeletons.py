"""
Classify a source and a target skeleton and match every source joint onto the
target by name similarity.
Usage: knownjoints-align --source a.json --target b.fbx --threshold 80
"""
import argparse
import sys

from knownjoints.utils.classifier import classify_skeleton
from knownjoints.utils.data_types import JointRole
from knownjoints.utils.fuzzy import find_closest_matches
from knownjoints.utils.naming import create_normalized_mapping, detect_common_prefix_suffix, normalize_joint_names
from knownjoints.utils.presets import DEFAULT_MATCH_THRESHOLD
from knownjoints.utils.skeleton_io import load_skeleton


def strip_rig_namespace(skeleton):
    prefix, suffix = detect_common_prefix_suffix(skeleton.joint_names)
    return normalize_joint_names(skeleton.joint_names, prefix, suffix)


def align_joint_names(source, target, threshold=DEFAULT_MATCH_THRESHOLD):
    """Source joint name -> (target joint name, score), None when nothing matched"""
    source_names = strip_rig_namespace(source)
    target_names = strip_rig_namespace(target)
    to_target = create_normalized_mapping(target.joint_names, target_names)

    alignment = {}
    for joint, name in zip(source.joint_names, source_names):
        matches = find_closest_matches(target_names, [name], threshold)
        if matches:
            match, score = matches[0]
            alignment[joint] = (to_target.get(match, match), score)
        else:
            alignment[joint] = None
    return alignment


def align_roles(source_roles, target_roles):
    """Role name -> (source joint, target joint)"""
    return {role.name: (source_roles[role.name], target_roles[role.name]) for role in JointRole}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Align the joints of two humanoid skeletons")
    parser.add_argument("--source", "-s", required=True)
    parser.add_argument("--target", "-t", required=True)
    parser.add_argument("--threshold", type=float, default=DEFAULT_MATCH_THRESHOLD)
    parser.add_argument(
        "--method",
        "-m",
        choices=["structural", "similarity"],
        default="structural",
    )
    args = parser.parse_args(argv)

    try:
        source = load_skeleton(args.source)
        target = load_skeleton(args.target)
    except (OSError, ValueError, RuntimeError) as e:
        print(f"[Tools] ERROR: {e}")
        return 1

    print(f"[Tools] Source '{source.name}': {source.joint_count} joints")
    print(f"[Tools] Target '{target.name}': {target.joint_count} joints")

    roles = align_roles(
        classify_skeleton(source, args.method), classify_skeleton(target, args.method)
    )
    print("=" * 60)
    print(f"{'Role':<14} {'Source':<22} Target")
    print("-" * 60)
    for role, (src, tgt) in roles.items():
        print(f"{role:<14} {src or '-':<22} {tgt or '-'}")

    alignment = align_joint_names(source, target, args.threshold)
    matched = sum(1 for m in alignment.values() if m is not None and m[1] >= args.threshold)
    print("=" * 60)
    for joint, match in alignment.items():
        if match is None:
            print(f"  {joint} -> (none)")
        else:
            print(f"  {joint} -> {match[0]} ({match[1]:.1f})")
    print(f"[Tools] {matched}/{source.joint_count} joints matched at >= {args.threshold:.0f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
