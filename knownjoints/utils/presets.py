"""
Vocabulary tables used by the known-joint classifier and the fuzzy matcher.
All matching is done against lower-cased joint names.
"""

# =============================================================================
# Name Normalization
# =============================================================================

# Share of names that must carry a prefix/suffix before it is stripped
PREFIX_SUFFIX_COVERAGE = 0.7

PREFIX_SEPARATORS = ["_", ":", ".", "-"]
SUFFIX_SEPARATORS = ["_", ".", "-"]

COMMON_SUFFIXES = [".x", ".y", ".z", "_end", "_tip", ".001", ".L", ".R", "_L", "_R"]

LEFT_SIDE_MARKERS = ["left", "l_", ".l", "_l"]
RIGHT_SIDE_MARKERS = ["right", "r_", ".r", "_r"]

# Side markers accepted for a "hip" named leg (e.g. "L_Hip", "hip.R")
HIP_SIDE_MARKERS = ["l_", "r_", "left", "right", ".l", ".r"]

# =============================================================================
# Joint Type Keywords
# =============================================================================

SPINE_KEYWORDS = ["spine", "chest", "torso", "stomach", "back"]
SPINE_CHAIN_KEYWORDS = ["spine", "chest", "torso"]
LEG_KEYWORDS = ["leg", "thigh", "upleg"]
SHOULDER_KEYWORDS = ["shoulder", "clavicle"]
CHEST_CHILD_KEYWORDS = ["neck", "shoulder", "clavicle", "arm"]
HEAD_KEYWORDS = ["neck", "head"]
ARM_ROOT_KEYWORDS = ["shoulder", "clavicle", "arm"]

ROOT_PARENT_NAMES = ["root", "armature", "skeleton"]

# =============================================================================
# Exact Patterns
# =============================================================================

HIPS_PATTERNS = ["hips", "pelvis", "hip", "root"]
HIPS_FALLBACK_KEYWORDS = ["hip", "pelvis"]
CHEST_PATTERNS = ["chest", "upperchest", "spine2", "spine_03", "spine3"]
NECK_PATTERNS = ["neck"]

LEFT_UPPER_LEG_PATTERNS = ["leftupleg", "left_upleg", "leftleg", "leftthigh"]
RIGHT_UPPER_LEG_PATTERNS = ["rightupleg", "right_upleg", "rightleg", "rightthigh"]

LEFT_SHOULDER_PATTERNS = ["leftshoulder", "left_shoulder", "leftclavicle"]
RIGHT_SHOULDER_PATTERNS = ["rightshoulder", "right_shoulder", "rightclavicle"]

# =============================================================================
# Candidate Ranking
# =============================================================================

MIN_LIMB_DEPTH = 2

SUFFIX_PENALTY = 500
EXACT_SIDE_NAME_BONUS = -1000

# Markers of helper joints that sit next to the real one
HELPER_SUFFIXES = ["twist", "end", "tip", "roll", "bend", "ctrl", "control"]
ANKLE_PENALIZED_SUFFIXES = ["ball", "toe", "heel"] + HELPER_SUFFIXES

UPPER_LEG_PRIORITIES = [("upleg", -1000), ("upperleg", -1000), ("thigh", -500)]

UPPER_ARM_PRIORITIES = [("upperarm", -2000), ("armupper", -1500)]
GENERIC_ARM_PRIORITY = -1000
SHOULDER_PRIORITY = -500

ANKLE_PATTERNS = ["foot", "ankle"]
ANKLE_PRIORITIES = [("ankle", -2000), ("foot", -1500)]
LEG_CONTINUE_PATTERNS = ["leg", "calf", "shin"]

WRIST_PATTERNS = ["hand", "wrist"]
WRIST_PRIORITIES = [("wrist", -1500), ("hand", -1000)]
ARM_CONTINUE_PATTERNS = ["forearm", "elbow", "arm"]

# A hand has at least this many children, that many of which are segmented
MIN_HAND_FINGERS = 3

# =============================================================================
# Fuzzy Matching
# =============================================================================

DEFAULT_MATCH_THRESHOLD = 90.0
AMBIGUOUS_ROLE_THRESHOLD = 30.0
KNOWN_ROLE_THRESHOLD = 75.0

# Scores within this many percentage points are considered a tie
TIE_TOLERANCE = 5.0

# Trimming is applied only if this share of names carries the prefix/suffix
TRIM_COVERAGE = 0.9

# Synonym vocabulary per role, in JointRole order
KNOWN_JOINT_NAMES = [
    ["reference", "root", "armature"],
    ["hips", "pelvis", "spine0", "root"],
    [
        "rightupperarm", "upperarmright", "upperarmr", "rupperarm", "rightarm", "armright",
        "rightshoulder", "shoulderright", "shoulderr", "rshoulder", "armr",
    ],
    [
        "leftupperarm", "upperarmleft", "upperarml", "lupperarm", "leftarm", "armleft",
        "leftshoulder", "shoulderleft", "shoulderl", "lshoulder", "arml",
    ],
    ["righthandwrist", "righthand", "rightwrist", "handright", "wristright", "handr", "rhand", "rwrist"],
    ["lefthandwrist", "lefthand", "leftwrist", "handleft", "wristleft", "handl", "lhand", "lwrist"],
    ["chest", "spine3", "spine2", "spine1", "spineupper", "spinelower", "spine"],
    ["neck"],
    ["rightupperleg", "rightupleg", "rightleg", "rightlegupper", "rightlegup", "thighr", "legr", "rleg"],
    ["leftupperleg", "leftupleg", "leftleg", "leftlegupper", "leftlegup", "thighl", "legl", "lleg"],
    ["rightfootankle", "rightfoot", "rightankle", "footright", "ankleright", "footr", "rfoot"],
    ["leftfootankle", "leftfoot", "leftankle", "footleft", "ankleleft", "footl", "lfoot"],
]

# Hips/Chest candidates in the similarity classifier need this many children
MIN_TORSO_CHILDREN = 3

# =============================================================================
# Skeleton Loading
# =============================================================================

# FBX node attribute types: 2 = eNull, 3 = eSkeleton, 4 = eLimbNode
FBX_SKELETON_ATTRIBUTE_TYPES = (3, 4)
FBX_NULL_ATTRIBUTE_TYPE = 2

# Nodes without a skeleton attribute are still bones when named like one
FBX_BONE_KEYWORDS = (
    "hips", "hip", "pelvis", "spine", "chest", "neck", "head",
    "clavicle", "collar", "shoulder", "arm", "elbow", "forearm", "wrist", "hand",
    "leg", "upleg", "thigh", "knee", "calf", "shin", "ankle", "foot", "toe",
    "mixamo", "joint", "bone_",
)

JSON_SKELETON_EXTENSIONS = (".json",)
DUMP_SKELETON_EXTENSIONS = (".txt", ".hierarchy")
FBX_SKELETON_EXTENSIONS = (".fbx",)
