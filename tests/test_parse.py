"""Tests for parsing URDF text into links and joints."""

import numpy as np
import pytest

from urdftree import MalformedDocument, parse, parse_document
from urdftree.parse import parse_floats


def test_parse_arm(arm_urdf):
    links, joints = parse(arm_urdf)

    assert [link.name for link in links] == ["base", "arm"]
    assert [joint.name for joint in joints] == ["shoulder"]

    base, arm = links
    assert len(base.visuals) == 1
    visual = base.visuals[0]
    assert visual.geometry_reference == "meshes/base.stl"
    np.testing.assert_array_equal(visual.xyz, [0, 0, 0.5])
    np.testing.assert_array_equal(visual.scale, [1, 1, 1])
    np.testing.assert_array_equal(visual.material.color, [0, 0, 1, 1])

    np.testing.assert_array_equal(arm.visuals[0].scale, [2, 2, 2])
    assert len(arm.collisions) == 1

    joint = joints[0]
    assert joint.type == "revolute"
    assert joint.connects == ("base", "arm")
    assert joint.parent == "base"
    assert joint.child == "arm"
    np.testing.assert_array_equal(joint.xyz, [1, 0, 0])
    np.testing.assert_array_equal(joint.axis, [0, 0, 1])
    assert joint.limits.lower == -1.5
    assert joint.limits.upper == 1.5
    assert joint.limits.effort == 10.0
    assert joint.limits.velocity == 2.0


def test_document_fields(arm_urdf):
    document = parse_document(arm_urdf)
    assert document.name == "arm"
    assert set(document.materials) == {"blue"}


def test_bytes_input(arm_urdf):
    links, _ = parse(arm_urdf.encode("utf-8"))
    assert len(links) == 2


@pytest.mark.parametrize(
    "text",
    ["", "not xml at all", "<robot><link name='a'></robot>", "<model><link name='a'/></model>"],
)
def test_malformed(text):
    with pytest.raises(MalformedDocument):
        parse(text)


def test_empty_robot():
    links, joints = parse("<robot name='empty'/>")
    assert links == []
    assert joints == []


def test_defaults():
    links, joints = parse(
        """<robot>
             <link name="a"><visual><geometry><mesh filename="a.stl"/></geometry></visual></link>
             <link name="b"/>
             <joint name="j" type="fixed"><parent link="a"/><child link="b"/></joint>
           </robot>"""
    )
    visual = links[0].visuals[0]
    np.testing.assert_array_equal(visual.xyz, np.zeros(3))
    np.testing.assert_array_equal(visual.rpy, np.zeros(3))
    np.testing.assert_array_equal(visual.scale, np.ones(3))
    assert visual.material is None

    joint = joints[0]
    np.testing.assert_array_equal(joint.xyz, np.zeros(3))
    np.testing.assert_array_equal(joint.axis, np.zeros(3))
    assert joint.limits is None


def test_unknown_joint_type_preserved():
    _, joints = parse(
        """<robot><link name="a"/><link name="b"/>
           <joint name="j" type="ball"><parent link="a"/><child link="b"/></joint>
           </robot>"""
    )
    assert joints[0].type == "ball"
    assert not joints[0].known_type


def test_skipped_elements():
    links, joints = parse(
        """<robot>
             <link name="a">
               <visual><geometry><mesh/></geometry></visual>
               <visual><geometry><box size="1 1 1"/></geometry></visual>
               <visual><geometry><mesh filename="keep.stl"/></geometry></visual>
             </link>
             <link name="b"/>
             <link/>
             <joint name="no_child" type="fixed"><parent link="a"/></joint>
             <joint name="no_type"><parent link="a"/><child link="b"/></joint>
             <joint name="ok" type="fixed"><parent link="a"/><child link="b"/></joint>
           </robot>"""
    )
    assert [link.name for link in links] == ["a", "b"]
    assert [v.geometry_reference for v in links[0].visuals] == ["keep.stl"]
    assert [joint.name for joint in joints] == ["ok"]


def test_duplicate_link_keeps_first():
    links, _ = parse(
        """<robot>
             <link name="a"><visual><geometry><mesh filename="first.stl"/></geometry></visual></link>
             <link name="a"><visual><geometry><mesh filename="second.stl"/></geometry></visual></link>
           </robot>"""
    )
    assert len(links) == 1
    assert links[0].visuals[0].geometry_reference == "first.stl"


def test_bad_number_defaults_component_only():
    _, joints = parse(
        """<robot><link name="a"/><link name="b"/>
           <joint name="j" type="fixed">
             <origin xyz="1 oops 3" rpy="0.5"/>
             <parent link="a"/><child link="b"/>
           </joint></robot>"""
    )
    np.testing.assert_array_equal(joints[0].xyz, [1, 0, 3])
    np.testing.assert_array_equal(joints[0].rpy, [0.5, 0, 0])


def test_parse_floats():
    np.testing.assert_array_equal(parse_floats(None, [1, 1, 1]), [1, 1, 1])
    np.testing.assert_array_equal(parse_floats("2", [1, 1, 1]), [2, 1, 1])
    np.testing.assert_array_equal(parse_floats("  4\t5\n6 7", [0, 0, 0]), [4, 5, 6])
    np.testing.assert_array_equal(parse_floats("x y z", [1, 1, 1]), [0, 0, 0])


def test_document_order():
    names = ["l%d" % i for i in range(10)]
    body = "".join('<link name="%s"/>' % n for n in reversed(names))
    links, _ = parse("<robot>%s</robot>" % body)
    assert [link.name for link in links] == list(reversed(names))


def test_nested_links_ignored():
    links, _ = parse(
        """<robot><link name="a"/>
           <gazebo><link name="not_a_link"/></gazebo></robot>"""
    )
    assert [link.name for link in links] == ["a"]


def test_material_forms():
    links, _ = parse(
        """<robot>
             <link name="a">
               <visual>
                 <geometry><mesh filename="a.stl"/></geometry>
                 <material name="red"><color rgba="1 0 0 1"/></material>
               </visual>
               <visual>
                 <geometry><mesh filename="b.stl"/></geometry>
                 <material name="red"/>
               </visual>
               <visual>
                 <geometry><mesh filename="c.stl"/></geometry>
                 <material name="undeclared"/>
               </visual>
             </link>
           </robot>"""
    )
    first, second, third = links[0].visuals
    np.testing.assert_array_equal(first.material.color, [1, 0, 0, 1])
    assert second.material is first.material
    assert third.material.name == "undeclared"
    assert third.material.color is None


def test_namespaced_document():
    links, joints = parse(
        """<robot xmlns="http://example.com/urdf" name="ns">
             <link name="a"/><link name="b"/>
             <joint name="j" type="fixed"><parent link="a"/><child link="b"/></joint>
           </robot>"""
    )
    assert [link.name for link in links] == ["a", "b"]
    assert joints[0].connects == ("a", "b")
