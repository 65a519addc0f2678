"""
orientation.py
----------------

Convert URDF `rpy` triples into rotation matrices and `origin`
elements into homogeneous transforms.

URDF angles are fixed-axis rotations: roll about X, then pitch about
Y, then yaw about Z, all about the original axes. That is the
matrix product `Rz(yaw) @ Ry(pitch) @ Rx(roll)`, which is what
`trimesh.transformations` calls the static `sxyz` convention.
"""
import numpy as np

from trimesh import transformations


def compose_rpy(roll, pitch, yaw):
    """
    Get the rotation for a roll-pitch-yaw triple.

    Parameters
    ------------
    roll : float
      Rotation about the fixed X axis in radians
    pitch : float
      Rotation about the fixed Y axis in radians
    yaw : float
      Rotation about the fixed Z axis in radians

    Returns
    ------------
    rotation : (3, 3) float
      Rotation matrix equal to `Rz(yaw) @ Ry(pitch) @ Rx(roll)`
    """
    return transformations.euler_matrix(
        float(roll), float(pitch), float(yaw), axes='sxyz')[:3, :3]


def origin_matrix(xyz=None, rpy=None):
    """
    Get the homogeneous transform of an `origin` element.

    Parameters
    ------------
    xyz : None or (3,) float
      Translation, zero if not passed
    rpy : None or (3,) float
      Fixed-axis roll, pitch, yaw, zero if not passed

    Returns
    ------------
    matrix : (4, 4) float
      Rotation from `compose_rpy` then translation
    """
    matrix = np.eye(4, dtype=np.float64)
    if rpy is not None:
        matrix[:3, :3] = compose_rpy(*rpy)
    if xyz is not None:
        matrix[:3, 3] = np.asarray(xyz, dtype=np.float64).reshape(3)
    return matrix
