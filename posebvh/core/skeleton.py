"""
Fixed BVH skeleton for upper-body position capture.

The hierarchy is a compile-time constant: eleven joints, each carrying only
position channels. Its depth-first order is exactly ``JOINT_NAMES``, so the
channel order declared in the HIERARCHY block lines up with the values
written on every motion line.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

POSITION_CHANNELS: Tuple[str, ...] = ("Xposition", "Yposition", "Zposition")


@dataclass(frozen=True)
class SkeletonJoint:
    """A joint of the fixed skeleton."""

    name: str
    parent: Optional[str]
    offset: Tuple[float, float, float]
    channels: Tuple[str, ...] = field(default=POSITION_CHANNELS)


# (joint_name, parent_name, offset)
# Both shoulder chains hang off Head, matching the reference exporter output.
_SKELETON_TABLE = [
    ("Hips", None, (0, 0, 0)),
    ("Spine", "Hips", (0, 10, 0)),
    ("Chest", "Spine", (0, 10, 0)),
    ("Neck", "Chest", (0, 10, 0)),
    ("Head", "Neck", (0, 10, 0)),

    ("LeftShoulder", "Head", (10, 0, 0)),
    ("LeftElbow", "LeftShoulder", (10, 0, 0)),
    ("LeftWrist", "LeftElbow", (10, 0, 0)),

    ("RightShoulder", "Head", (-10, 0, 0)),
    ("RightElbow", "RightShoulder", (-10, 0, 0)),
    ("RightWrist", "RightElbow", (-10, 0, 0)),
]

SKELETON: Tuple[SkeletonJoint, ...] = tuple(
    SkeletonJoint(name, parent, offset) for name, parent, offset in _SKELETON_TABLE
)

END_SITE_OFFSET = (0, 0, 0)


def _children_of(joints: Tuple[SkeletonJoint, ...]) -> Dict[str, List[str]]:
    children: Dict[str, List[str]] = {joint.name: [] for joint in joints}
    for joint in joints:
        if joint.parent:
            children[joint.parent].append(joint.name)
    return children


def _format_offset(offset: Tuple[float, float, float]) -> str:
    return " ".join(f"{value:g}" for value in offset)


def _write_joint(
    lines: List[str],
    joints: Dict[str, SkeletonJoint],
    children: Dict[str, List[str]],
    joint_name: str,
    depth: int,
) -> None:
    """Write one joint and its subtree, tab-indented by depth."""
    joint = joints[joint_name]
    indent = "\t" * depth
    keyword = "ROOT" if joint.parent is None else "JOINT"

    lines.append(f"{indent}{keyword} {joint.name}")
    lines.append(f"{indent}{{")
    lines.append(f"{indent}\tOFFSET {_format_offset(joint.offset)}")
    lines.append(f"{indent}\tCHANNELS {len(joint.channels)} {' '.join(joint.channels)}")

    for child in children[joint_name]:
        _write_joint(lines, joints, children, child, depth + 1)

    if not children[joint_name]:
        lines.append(f"{indent}\tEnd Site")
        lines.append(f"{indent}\t{{")
        lines.append(f"{indent}\t\tOFFSET {_format_offset(END_SITE_OFFSET)}")
        lines.append(f"{indent}\t}}")

    lines.append(f"{indent}}}")


def render_hierarchy(skeleton: Tuple[SkeletonJoint, ...] = SKELETON) -> str:
    """
    Render the HIERARCHY block, including the trailing ``MOTION`` line.

    Returns:
        Newline-terminated text ready to be followed by the motion header.
    """
    joints = {joint.name: joint for joint in skeleton}
    children = _children_of(skeleton)
    root = next(joint.name for joint in skeleton if joint.parent is None)

    lines = ["HIERARCHY"]
    _write_joint(lines, joints, children, root, 0)
    lines.append("MOTION")
    return "\n".join(lines) + "\n"


def depth_first_order(skeleton: Tuple[SkeletonJoint, ...] = SKELETON) -> List[str]:
    """Joint names in the order their channels appear in the HIERARCHY block."""
    children = _children_of(skeleton)
    root = next(joint.name for joint in skeleton if joint.parent is None)

    order: List[str] = []
    stack = [root]
    while stack:
        name = stack.pop()
        order.append(name)
        stack.extend(reversed(children[name]))
    return order


# Rendered once; identical for every export.
HIERARCHY_TEXT = render_hierarchy()
