import sys
import os
import unittest

# Add the project root to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)
sys.path.insert(0, script_dir)

from knownjoints.utils.skeleton import JointTable, find_orphan_parents, find_root_joint
from rigs import humanoid_rig


class TestJointTable(unittest.TestCase):
    def setUp(self):
        self.table = JointTable(*humanoid_rig())

    def test_orphan_parents_get_ids_after_joints(self):
        table = JointTable(["Hips", "Spine"], ["Armature", "Hips"])
        self.assertEqual(table.joint_count, 2)
        self.assertEqual(len(table), 3)
        self.assertEqual(table.id_of("Armature"), 2)
        self.assertEqual(table.parents.tolist(), [2, 0, -1])
        self.assertEqual(table.child_counts.tolist(), [1, 0, 1])
        self.assertEqual(table.joint_names(), ["Hips", "Spine"])

    def test_duplicate_names_merge_children(self):
        table = JointTable(["A", "B", "A", "C"], ["", "A", "", "A"])
        self.assertEqual(table.joint_count, 3)
        self.assertEqual(table.as_hierarchy_map(), {"A": ["B", "C"]})

    def test_subtree_depth(self):
        t = self.table
        self.assertEqual(t.subtree_depth(t.id_of("Head")), 0)
        self.assertEqual(t.subtree_depth(t.id_of("LeftUpperLeg")), 2)
        self.assertEqual(t.subtree_depth(t.id_of("Root")), 7)
        self.assertEqual(t.subtree_depth(None), 0)
        self.assertTrue(t.has_depth(t.id_of("LeftArm"), 2))
        self.assertFalse(t.has_depth(t.id_of("LeftForeArm"), 2))
        self.assertFalse(t.has_depth(None, 0))

    def test_subtree_depth_survives_cycles(self):
        table = JointTable(["A", "B", "C"], ["C", "A", "B"])
        self.assertEqual(table.subtree_depth(table.id_of("A")), 2)
        self.assertFalse(table.is_descendant(table.id_of("A"), table.id_of("Missing")))
        self.assertTrue(table.is_descendant(table.id_of("A"), table.id_of("B")))

    def test_long_chain_depth(self):
        joints = [f"Bone{i}" for i in range(1600)]
        parents = [""] + joints[:-1]
        table = JointTable(joints, parents)
        self.assertEqual(table.subtree_depth(0), 1599)
        self.assertEqual(table.subtree_depth(0, limit=2), 2)
        self.assertTrue(table.has_depth(0, 2))
        self.assertTrue(table.has_depth(1500, 99))
        self.assertFalse(table.has_depth(1500, 100))

    def test_relations(self):
        t = self.table
        self.assertTrue(t.is_child(t.id_of("Neck"), t.id_of("Chest")))
        self.assertFalse(t.is_child(t.id_of("Head"), t.id_of("Chest")))
        self.assertTrue(t.is_descendant(t.id_of("LeftHand"), t.id_of("Hips")))
        self.assertFalse(t.is_descendant(t.id_of("Hips"), t.id_of("LeftHand")))
        self.assertFalse(t.is_descendant(t.id_of("Hips"), t.id_of("Hips")))
        self.assertEqual(t.name_of(t.first_child(t.id_of("Hips"))), "Spine")


class TestRootDetection(unittest.TestCase):
    def test_single_orphan_parent(self):
        self.assertEqual(find_root_joint(["Hips", "Spine"], ["Armature", "Hips"]), "Armature")

    def test_joint_without_parent(self):
        joints, parents = humanoid_rig()
        self.assertEqual(find_root_joint(joints, parents), "Root")

    def test_several_orphans_prefers_root_name(self):
        joints = ["A", "B"]
        self.assertEqual(find_orphan_parents(joints, ["Other", "SceneRoot"]), ["Other", "SceneRoot"])
        self.assertEqual(find_root_joint(joints, ["Other", "SceneRoot"]), "SceneRoot")
        self.assertEqual(find_root_joint(joints, ["Other", "Another"]), "Other")

    def test_self_parented_joint(self):
        self.assertEqual(find_root_joint(["B", "A"], ["A", "A"]), "A")

    def test_falls_back_to_first_joint(self):
        self.assertEqual(find_root_joint(["A", "B"], ["B", "A"]), "A")
        self.assertIsNone(find_root_joint([], []))


if __name__ == "__main__":
    unittest.main()
