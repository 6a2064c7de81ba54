import sys
import os
import unittest

# Add the project root to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, project_root)

from knownjoints.utils.naming import (
    JointFilter,
    Side,
    coverage_count,
    create_normalized_mapping,
    detect_common_prefix_suffix,
    find_joint_by_name_patterns,
    is_leg_joint,
    is_left_side,
    is_right_side,
    is_upper_arm_name,
    normalize_joint_names,
    strip_prefix_suffix,
)


class TestNameTests(unittest.TestCase):
    def test_side_markers(self):
        self.assertTrue(is_left_side("LeftHand"))
        self.assertTrue(is_left_side("l_hand"))
        self.assertTrue(is_left_side("hand.L"))
        self.assertTrue(is_right_side("thigh_r"))
        self.assertFalse(is_right_side("LeftHand"))
        self.assertFalse(is_left_side("Spine"))

    def test_side_enum(self):
        self.assertTrue(Side.LEFT.matches("clavicle_l"))
        self.assertFalse(Side.RIGHT.matches("clavicle_l"))
        self.assertIs(Side.LEFT.opposite, Side.RIGHT)

    def test_leg_joints(self):
        self.assertTrue(is_leg_joint("LeftUpLeg"))
        self.assertTrue(is_leg_joint("thigh_l"))
        self.assertTrue(is_leg_joint("L_Hip"))
        self.assertFalse(is_leg_joint("Hips"))

    def test_upper_arm_names(self):
        self.assertTrue(is_upper_arm_name("LeftArm"))
        self.assertTrue(is_upper_arm_name("upperarm_l"))
        self.assertFalse(is_upper_arm_name("LeftForeArm"))
        self.assertFalse(is_upper_arm_name("lowerarm_l"))

    def test_joint_filter(self):
        self.assertTrue(JointFilter.LEG.accepts("LeftUpperLeg"))
        self.assertFalse(JointFilter.LEG.accepts("LeftShoulder"))
        self.assertTrue(JointFilter.SHOULDER.accepts("clavicle_r"))
        self.assertTrue(JointFilter.ANY.accepts("anything"))

    def test_pattern_order_beats_name_order(self):
        names = ["Spine", "Hips", "Pelvis"]
        self.assertEqual(find_joint_by_name_patterns(names, ["pelvis", "hips"]), 2)
        self.assertEqual(find_joint_by_name_patterns(names, ["HIPS"]), 1)
        self.assertIsNone(find_joint_by_name_patterns(names, ["neck"]))


class TestPrefixSuffix(unittest.TestCase):
    def test_coverage_count_rounds_up(self):
        self.assertEqual(coverage_count(20, 0.7), 14)
        self.assertEqual(coverage_count(10, 0.7), 7)
        self.assertEqual(coverage_count(4, 0.7), 3)
        self.assertEqual(coverage_count(2, 0.7), 2)

    def test_mixamo_prefix(self):
        names = ["mixamorig:Hips", "mixamorig:Spine", "mixamorig:Spine1", "mixamorig:Chest"]
        prefix, suffix = detect_common_prefix_suffix(names)
        self.assertEqual(prefix, "mixamorig:")
        self.assertEqual(suffix, "")
        self.assertEqual(
            normalize_joint_names(names, prefix, suffix), ["Hips", "Spine", "Spine1", "Chest"]
        )

    def test_known_suffix(self):
        names = ["hip.001", "spine.001", "chest.001", "neck"]
        self.assertEqual(detect_common_prefix_suffix(names), ("", ".001"))

    def test_separator_prefix_when_shortest_name_lacks_it(self):
        names = ["Armature", "DEF-hips", "DEF-spine", "DEF-chest", "DEF-neck"]
        self.assertEqual(detect_common_prefix_suffix(names), ("DEF-", ""))

    def test_shared_ending_suffix(self):
        names = ["hips_jnt", "spine_jnt", "chest_jnt", "neck_jnt"]
        self.assertEqual(detect_common_prefix_suffix(names), ("", "_jnt"))

    def test_separator_suffix_when_shortest_name_lacks_it(self):
        names = ["Hips", "spine_ctl", "chest_ctl", "neck_ctl", "head_ctl"]
        self.assertEqual(detect_common_prefix_suffix(names), ("", "_ctl"))

    def test_no_shared_affix(self):
        self.assertEqual(detect_common_prefix_suffix(["Root", "Hips"]), ("", ""))

    def test_needs_two_names(self):
        self.assertEqual(detect_common_prefix_suffix(["mixamorig:Hips"]), ("", ""))
        self.assertEqual(detect_common_prefix_suffix(["mixamorig:Hips", ""]), ("", ""))
        self.assertEqual(detect_common_prefix_suffix(None), ("", ""))

    def test_strip_never_empties_a_name(self):
        self.assertEqual(strip_prefix_suffix("mixamorig:", "mixamorig:", ""), "mixamorig:")
        self.assertEqual(strip_prefix_suffix("MIXAMORIG:Hips", "mixamorig:", ""), "Hips")
        self.assertEqual(strip_prefix_suffix("", "mixamorig:", ""), "")

    def test_normalized_mapping_last_write_wins(self):
        mapping = create_normalized_mapping(["A_x", "B_x"], ["x", "x"])
        self.assertEqual(mapping, {"x": "B_x"})


if __name__ == "__main__":
    unittest.main()
