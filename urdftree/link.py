"""
link.py
-----------

Records for the parts of a URDF document that hold geometry:
`Link`, the `Visual` elements it owns, and `Material`.
"""
import numpy as np


class Material(object):
    def __init__(self, name=None, color=None, texture=None):
        """
        A named appearance for visual geometry.

        Parameters
        ------------
        name : None or str
          Name used to reference this material from a visual
        color : None or (4,) float
          RGBA color with components in 0.0 - 1.0
        texture : None or str
          Raw texture filename, carried but not applied
        """
        self.name = name
        if color is not None:
            color = np.array(color, dtype=np.float64).reshape(4)
        self.color = color
        self.texture = texture

    def __repr__(self):
        return f'<Material name={self.name!r} color={self.color}>'


class Visual(object):
    def __init__(self,
                 geometry_reference,
                 scale=None,
                 xyz=None,
                 rpy=None,
                 material=None):
        """
        One piece of mesh geometry attached to a `Link`.

        Parameters
        ------------
        geometry_reference : str
          Mesh filename exactly as written in the document
        scale : None or (3,) float
          Non-uniform scale, ones if not passed
        xyz : None or (3,) float
          Translation of the visual origin
        rpy : None or (3,) float
          Fixed-axis roll, pitch, yaw of the visual origin
        material : None or Material
          Appearance, either inline or referenced by name
        """
        self.geometry_reference = geometry_reference
        self.scale = _vector(scale, default=1.0)
        self.xyz = _vector(xyz)
        self.rpy = _vector(rpy)
        self.material = material

    def __repr__(self):
        return f'<Visual {self.geometry_reference!r}>'


class Link(object):
    def __init__(self, name, visuals=None, collisions=None):
        """
        `Link` objects are rigid bodies which own geometry.

        Parameters
        ------------
        name : str
          The name of the Link object, unique in a document
        visuals : None or (n,) Visual
          Visual geometry in document order
        collisions : None or (m,) Visual
          Collision geometry in document order
        """
        self.name = name
        self.visuals = list(visuals or [])
        self.collisions = list(collisions or [])

    def __repr__(self):
        return f'<Link {self.name!r} visuals={len(self.visuals)}>'


def _vector(values, default=0.0):
    if values is None:
        return np.full(3, default, dtype=np.float64)
    return np.array(values, dtype=np.float64).reshape(3)
