import sys
import os
import io
import unittest
from contextlib import redirect_stdout

# Add the project root to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)
sys.path.insert(0, script_dir)

from knownjoints import (
    INVALID_JOINT_INDEX,
    JointRole,
    SkeletonData,
    classify_skeleton,
    find_known_joints,
    find_role_collisions,
    known_joint_index,
)
from rigs import humanoid_rig, mixamo_rig, ue_rig

EMPTY = [""] * 12


class TestKnownJoints(unittest.TestCase):
    def test_humanoid_rig(self):
        known = find_known_joints(*humanoid_rig())
        expected = {
            JointRole.Root: "Root",
            JointRole.Hips: "Hips",
            JointRole.Chest: "Chest",
            JointRole.Neck: "Neck",
            JointRole.LeftUpperLeg: "LeftUpperLeg",
            JointRole.RightUpperLeg: "RightUpperLeg",
            JointRole.LeftAnkle: "LeftFoot",
            JointRole.RightAnkle: "RightFoot",
            JointRole.LeftUpperArm: "LeftArm",
            JointRole.RightUpperArm: "RightArm",
            JointRole.LeftWrist: "LeftHand",
            JointRole.RightWrist: "RightHand",
        }
        for role, name in expected.items():
            self.assertEqual(known[role], name, role.name)

    def test_long_accessory_chain(self):
        joints, parents = humanoid_rig()
        parent = "LeftUpperLeg"
        for i in range(1500):
            joints.append(f"Strap{i}")
            parents.append(parent)
            parent = f"Strap{i}"
        self.assertEqual(find_known_joints(joints, parents), find_known_joints(*humanoid_rig()))

    def test_malformed_input(self):
        self.assertEqual(find_known_joints(["Root", "Hips"], ["Root"]), EMPTY)
        self.assertEqual(find_known_joints(None, ["Root"]), EMPTY)
        self.assertEqual(find_known_joints(["Root"], None), EMPTY)
        self.assertEqual(find_known_joints([], []), EMPTY)

    def test_idempotent(self):
        joints, parents = mixamo_rig()
        self.assertEqual(find_known_joints(joints, parents), find_known_joints(joints, parents))

    def test_two_joint_skeleton(self):
        known = find_known_joints(["Root", "Hips"], ["", "Root"])
        self.assertEqual(known[JointRole.Root], "Root")
        for role in JointRole:
            if role is not JointRole.Root:
                self.assertEqual(known[role], "", role.name)

    def test_mixamo_rig(self):
        with redirect_stdout(io.StringIO()):
            known = find_known_joints(*mixamo_rig())
        self.assertEqual(known[JointRole.Root], "mixamorig:Hips")
        self.assertEqual(known[JointRole.Hips], "mixamorig:Hips")
        self.assertEqual(known[JointRole.Chest], "mixamorig:Spine2")
        self.assertEqual(known[JointRole.Neck], "mixamorig:Neck")
        self.assertEqual(known[JointRole.LeftUpperLeg], "mixamorig:LeftUpLeg")
        self.assertEqual(known[JointRole.RightUpperLeg], "mixamorig:RightUpLeg")
        self.assertEqual(known[JointRole.LeftAnkle], "mixamorig:LeftFoot")
        self.assertEqual(known[JointRole.RightAnkle], "mixamorig:RightFoot")
        self.assertEqual(known[JointRole.LeftUpperArm], "mixamorig:LeftArm")
        self.assertEqual(known[JointRole.RightUpperArm], "mixamorig:RightArm")
        self.assertEqual(known[JointRole.LeftWrist], "mixamorig:LeftHand")
        self.assertEqual(known[JointRole.RightWrist], "mixamorig:RightHand")

    def test_ue_rig(self):
        known = find_known_joints(*ue_rig())
        self.assertEqual(known[JointRole.Root], "root")
        self.assertEqual(known[JointRole.Hips], "pelvis")
        self.assertEqual(known[JointRole.Chest], "spine_02")
        self.assertEqual(known[JointRole.Neck], "neck_01")
        self.assertEqual(known[JointRole.LeftUpperLeg], "thigh_l")
        self.assertEqual(known[JointRole.RightAnkle], "foot_r")
        self.assertEqual(known[JointRole.LeftUpperArm], "upperarm_l")
        self.assertEqual(known[JointRole.RightWrist], "hand_r")

    def test_orphan_root_keeps_original_name(self):
        joints, parents = humanoid_rig()
        joints = ["rig:" + j for j in joints[1:]]
        parents = ["rig:" + p for p in parents[1:]]
        self.assertEqual(parents[0], "rig:Root")
        parents[0] = "rig:Armature"
        with redirect_stdout(io.StringIO()) as out:
            known = find_known_joints(joints, parents)
        self.assertEqual(known[JointRole.Root], "rig:Armature")
        self.assertEqual(known[JointRole.Hips], "rig:Hips")
        self.assertEqual(known[JointRole.LeftWrist], "rig:LeftHand")
        self.assertIn("only referenced as a parent", out.getvalue())

    def test_cyclic_hierarchy_terminates(self):
        self.assertEqual(
            find_known_joints(["Hips", "Spine", "LeftUpLeg"], ["Spine", "Hips", "Hips"])[JointRole.Hips], ""
        )
        # Root hangs off Head; "Hips" (parented to a root-named joint) becomes the root
        joints, parents = humanoid_rig()
        parents[0] = "Head"
        with redirect_stdout(io.StringIO()):
            known = find_known_joints(joints, parents)
        self.assertEqual(known[JointRole.Root], "Hips")
        self.assertEqual(known[JointRole.Hips], "Hips")
        self.assertEqual(known[JointRole.Chest], "Chest")
        self.assertEqual(known[JointRole.LeftWrist], "LeftHand")


class TestCollisions(unittest.TestCase):
    def test_collision_reported_not_fixed(self):
        with redirect_stdout(io.StringIO()) as out:
            known = find_known_joints(*mixamo_rig())
        self.assertEqual(
            find_role_collisions(known), {"mixamorig:Hips": [JointRole.Root, JointRole.Hips]}
        )
        self.assertIn("mixamorig:Hips", out.getvalue())
        self.assertIn("Root, Hips", out.getvalue())

    def test_no_collisions(self):
        self.assertEqual(find_role_collisions(find_known_joints(*humanoid_rig())), {})
        self.assertEqual(find_role_collisions([""] * 12), {})


class TestClassifySkeleton(unittest.TestCase):
    def test_structural(self):
        skeleton = SkeletonData("humanoid", *humanoid_rig())
        roles = classify_skeleton(skeleton)
        self.assertEqual(len(roles), 12)
        self.assertEqual(roles["Hips"], "Hips")
        self.assertEqual(roles["LeftWrist"], "LeftHand")

    def test_similarity(self):
        skeleton = SkeletonData("humanoid", *humanoid_rig())
        roles = classify_skeleton(skeleton, method="similarity")
        self.assertEqual(roles["Neck"], "Neck")

    def test_unknown_method(self):
        with self.assertRaises(ValueError):
            classify_skeleton(SkeletonData("humanoid", *humanoid_rig()), method="random")

    def test_known_joint_index(self):
        joints, parents = humanoid_rig()
        known = find_known_joints(joints, parents)
        self.assertEqual(known_joint_index(joints, known, JointRole.Hips), 1)
        self.assertEqual(known_joint_index(joints, known, JointRole.RightWrist), 19)
        self.assertEqual(known_joint_index(joints, EMPTY, JointRole.Hips), INVALID_JOINT_INDEX)


if __name__ == "__main__":
    unittest.main()
