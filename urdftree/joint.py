"""
joint.py
-----------

The `Joint` record: a named connection between a parent and a
child `Link` with a fixed origin transform and motion metadata.
"""
import numpy as np

# joint types defined by URDF, anything else is kept verbatim
TYPES = frozenset(['fixed',
                   'revolute',
                   'continuous',
                   'prismatic',
                   'floating',
                   'planar'])


class Limits(object):
    def __init__(self, lower=0.0, upper=0.0, effort=None, velocity=None):
        """
        Motion limits of a revolute or prismatic joint.

        Parameters
        ------------
        lower : float
          Lower position limit in radians or meters
        upper : float
          Upper position limit in radians or meters
        effort : None or float
          Maximum effort
        velocity : None or float
          Maximum velocity
        """
        self.lower = float(lower)
        self.upper = float(upper)
        self.effort = effort
        self.velocity = velocity

    def __repr__(self):
        return f'<Limits [{self.lower}, {self.upper}]>'


class Joint(object):
    def __init__(self,
                 name,
                 joint_type,
                 connects,
                 xyz=None,
                 rpy=None,
                 axis=None,
                 limits=None):
        """
        Create a joint between two links.

        Parameters
        -------------
        name : str
          The name of this joint.
        joint_type : str
          URDF joint type, unknown types are preserved
        connects : (2,) str
          Names of the parent and child `Link` objects
        xyz : None or (3,) float
          Translation of the joint origin in the parent frame
        rpy : None or (3,) float
          Fixed-axis roll, pitch, yaw of the joint origin
        axis : None or (3,) float
          Direction of motion, zeros mean unspecified
        limits : None or Limits
          Motion limits of this joint
        """
        self.name = name
        self.type = joint_type
        self.connects = connects

        self.xyz = _vector(xyz)
        self.rpy = _vector(rpy)
        # a zero axis is "unspecified" and must not be normalized
        self.axis = _vector(axis)
        self.limits = limits

    @property
    def connects(self):
        """
        The name of the two links this joint is connecting.

        Returns
        -------------
        connects : (2,) str
          Parent link name and child link name
        """
        return self._connects

    @connects.setter
    def connects(self, values):
        if values is None or len(values) != 2:
            raise ValueError('`connects` must be two link names!')
        self._connects = tuple(values)

    @property
    def parent(self):
        return self._connects[0]

    @property
    def child(self):
        return self._connects[1]

    @property
    def known_type(self):
        """
        Is `self.type` one of the types URDF defines.
        """
        return self.type in TYPES

    def __repr__(self):
        return '<Joint {!r} {} {} -> {}>'.format(
            self.name, self.type, self.parent, self.child)


def _vector(values):
    if values is None:
        return np.zeros(3, dtype=np.float64)
    return np.array(values, dtype=np.float64).reshape(3)
