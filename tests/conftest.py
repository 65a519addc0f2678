"""Shared fixtures: in-memory meshes and fetchers that count calls."""

import threading

import pytest
import trimesh


class CountingFetch(object):
    """Serve bytes from a dict and record every location requested."""

    def __init__(self, files, gate=None):
        self.files = dict(files)
        self.gate = gate
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, location):
        with self._lock:
            self.calls.append(location)
        if self.gate is not None:
            self.gate.wait(timeout=10)
        if location not in self.files:
            raise FileNotFoundError(location)
        return self.files[location]


@pytest.fixture
def box_stl():
    return trimesh.creation.box(extents=[1.0, 2.0, 3.0]).export(file_type="stl")


@pytest.fixture
def counting_fetch():
    return CountingFetch


ARM_URDF = """<?xml version="1.0" encoding="utf-8"?>
<robot name="arm">
  <material name="blue">
    <color rgba="0 0 1 1"/>
  </material>
  <link name="base">
    <visual>
      <origin xyz="0 0 0.5" rpy="0 0 0"/>
      <geometry>
        <mesh filename="meshes/base.stl"/>
      </geometry>
      <material name="blue"/>
    </visual>
  </link>
  <link name="arm">
    <visual>
      <geometry>
        <mesh filename="package://arm_description/meshes/arm.stl" scale="2 2 2"/>
      </geometry>
    </visual>
    <collision>
      <geometry>
        <mesh filename="meshes/base.stl"/>
      </geometry>
    </collision>
  </link>
  <joint name="shoulder" type="revolute">
    <parent link="base"/>
    <child link="arm"/>
    <origin xyz="1 0 0" rpy="0 0 1.5707963267948966"/>
    <axis xyz="0 0 1"/>
    <limit lower="-1.5" upper="1.5" effort="10" velocity="2"/>
  </joint>
</robot>
"""


@pytest.fixture
def arm_urdf():
    return ARM_URDF
