"""
Classify the known joints of one or more skeleton files.
Usage: knownjoints-classify rig.fbx rigs/ --method structural --json
"""
import argparse
import glob
import json
import os
import sys

from tqdm import tqdm

from knownjoints.utils.classifier import classify_skeleton
from knownjoints.utils.data_types import JointRole
from knownjoints.utils.skeleton_io import is_skeleton_file, load_skeleton


def collect_skeleton_files(paths):
    files = []
    for path in paths:
        if os.path.isdir(path):
            found = glob.glob(os.path.join(path, "**", "*"), recursive=True)
            files += sorted(f for f in found if os.path.isfile(f) and is_skeleton_file(f))
        else:
            files.append(path)
    return files


def format_roles(name, roles):
    lines = [f"{name}:"]
    for role in JointRole:
        joint = roles[role.name] or "-"
        lines.append(f"  {role.name:<14} {joint}")
    return "\n".join(lines)


def classify_files(files, method="structural"):
    """Returns ({path: roles}, {path: error message})"""
    results = {}
    errors = {}
    for path in tqdm(files, desc="Classifying skeletons", disable=len(files) < 2):
        try:
            skeleton = load_skeleton(path)
            results[path] = classify_skeleton(skeleton, method)
        except (OSError, ValueError, RuntimeError) as e:
            print(f"[Tools] ERROR: {path}: {e}")
            errors[path] = str(e)
    return results, errors


def main(argv=None):
    parser = argparse.ArgumentParser(description="Find the known joints of humanoid skeletons")
    parser.add_argument("paths", nargs="+", help="Skeleton files (.json, .txt, .fbx) or folders")
    parser.add_argument(
        "--method",
        "-m",
        choices=["structural", "similarity"],
        default="structural",
        help="Structural hierarchy analysis or name similarity only",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args(argv)

    files = collect_skeleton_files(args.paths)
    if not files:
        print("[Tools] No skeleton files found.")
        return 1

    results, errors = classify_files(files, args.method)

    if args.json:
        print(json.dumps(results, indent=2))
    else:
        for path, roles in results.items():
            print(format_roles(os.path.basename(path), roles))

    if errors:
        print(f"[Tools] {len(errors)}/{len(files)} skeletons failed.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
