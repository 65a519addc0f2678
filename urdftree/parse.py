"""
parse.py
-----------

Turn URDF text into flat lists of `Link` and `Joint` records.

Parsing is lenient: only a document which is not XML at all,
or which has no `robot` root, is an error. Elements missing
required pieces are skipped and logged, numeric tokens that do
not parse become zero for that component only.
"""
import logging

import numpy as np

from lxml import etree

from .link import Link, Visual, Material
from .joint import Joint, Limits
from .errors import MalformedDocument

log = logging.getLogger(__name__)


class Document(object):
    def __init__(self, name, links, joints, materials):
        """
        Everything read from one URDF document.

        Parameters
        ------------
        name : None or str
          Name attribute of the `robot` element
        links : (n,) Link
          Links in document order
        joints : (m,) Joint
          Joints in document order
        materials : dict
          Material name to `Material` objects
        """
        self.name = name
        self.links = links
        self.joints = joints
        self.materials = materials


def parse(text):
    """
    Parse URDF text into links and joints.

    Parameters
    ------------
    text : str or bytes
      URDF document

    Returns
    ------------
    links : (n,) Link
      Links in document order
    joints : (m,) Joint
      Joints in document order

    Raises
    ------------
    MalformedDocument
      If `text` is not XML or has no `robot` root
    """
    document = parse_document(text)
    return document.links, document.joints


def parse_document(text):
    """
    Parse URDF text into a `Document`.

    Parameters
    ------------
    text : str or bytes
      URDF document

    Returns
    ------------
    document : Document
      Links, joints and materials of the robot
    """
    root = _parse_root(text)

    # materials may be referenced before they are declared
    materials = {}
    for element in root.findall('{*}material'):
        material = _parse_material(element)
        if material is None or material.name is None:
            log.warning('skipping material without a name')
            continue
        materials.setdefault(material.name, material)

    links = []
    seen = set()
    for element in root.findall('{*}link'):
        link = _parse_link(element, materials)
        if link is None:
            continue
        if link.name in seen:
            log.warning('skipping duplicate link `%s`', link.name)
            continue
        seen.add(link.name)
        links.append(link)

    joints = []
    for element in root.findall('{*}joint'):
        joint = _parse_joint(element)
        if joint is not None:
            joints.append(joint)

    log.debug('parsed %d links, %d joints, %d materials',
              len(links), len(joints), len(materials))

    return Document(name=root.get('name'),
                    links=links,
                    joints=joints,
                    materials=materials)


def _parse_root(text):
    if isinstance(text, str):
        # lxml refuses str input carrying an encoding declaration
        text = text.encode('utf-8')
    try:
        root = etree.fromstring(
            text, parser=etree.XMLParser(remove_comments=True))
    except (etree.XMLSyntaxError, ValueError) as E:
        raise MalformedDocument(f'document is not well-formed: {E}') from E
    if root is None or etree.QName(root).localname != 'robot':
        raise MalformedDocument('document has no `robot` root element')
    return root


def parse_floats(text, default):
    """
    Parse whitespace separated numbers leniently.

    Parameters
    ------------
    text : None or str
      Raw attribute value
    default : (n,) float
      Values used when `text` is None or too short

    Returns
    ------------
    values : (n,) float
      A token which is not a number becomes zero, extra
      tokens are ignored.
    """
    values = np.array(default, dtype=np.float64)
    if text is None:
        return values
    for i, token in enumerate(text.split()[:len(values)]):
        try:
            values[i] = float(token)
        except ValueError:
            values[i] = 0.0
    return values


def _parse_float(text, default=None):
    if text is None:
        return default
    try:
        return float(text.strip())
    except ValueError:
        return 0.0


def _parse_origin(element):
    """
    Find the `origin` child of an element.

    Returns
    ----------
    xyz : (3,) float
      Translation, zero if not specified
    rpy : (3,) float
      Roll, pitch, yaw, zero if not specified
    """
    origin = element.find('{*}origin')
    if origin is None:
        return np.zeros(3), np.zeros(3)
    return (parse_floats(origin.get('xyz'), np.zeros(3)),
            parse_floats(origin.get('rpy'), np.zeros(3)))


def _parse_material(element):
    color = element.find('{*}color')
    if color is not None:
        color = parse_floats(color.get('rgba'), np.ones(4))
    texture = element.find('{*}texture')
    if texture is not None:
        texture = texture.get('filename')
    return Material(name=element.get('name'),
                    color=color,
                    texture=texture)


def _visual_material(element, materials):
    """
    Get the material of a `visual` element, either declared
    inline or referenced by name from the document.
    """
    material = element.find('{*}material')
    if material is None:
        return None
    has_body = (material.find('{*}color') is not None or
                material.find('{*}texture') is not None)
    if has_body:
        material = _parse_material(material)
        if material.name is not None:
            # inline named materials can be reused by later visuals
            materials.setdefault(material.name, material)
        return material
    name = material.get('name')
    if name in materials:
        return materials[name]
    log.debug('material `%s` is not declared', name)
    return Material(name=name)


def _parse_visual(element, link_name, materials):
    geometry = element.find('{*}geometry')
    mesh = None
    if geometry is not None:
        mesh = geometry.find('{*}mesh')
    if mesh is None:
        log.warning('link `%s`: skipping %s without mesh geometry',
                    link_name, etree.QName(element).localname)
        return None
    filename = mesh.get('filename')
    if not filename:
        log.warning('link `%s`: skipping mesh without a filename',
                    link_name)
        return None
    xyz, rpy = _parse_origin(element)
    return Visual(geometry_reference=filename,
                  scale=parse_floats(mesh.get('scale'), np.ones(3)),
                  xyz=xyz,
                  rpy=rpy,
                  material=_visual_material(element, materials))


def _parse_link(element, materials):
    name = element.get('name')
    if not name:
        log.warning('skipping link without a name')
        return None
    visuals = [_parse_visual(v, name, materials)
               for v in element.findall('{*}visual')]
    collisions = [_parse_visual(c, name, materials)
                  for c in element.findall('{*}collision')]
    return Link(name=name,
                visuals=[v for v in visuals if v is not None],
                collisions=[c for c in collisions if c is not None])


def _parse_joint(element):
    name = element.get('name')
    if not name:
        log.warning('skipping joint without a name')
        return None
    kind = element.get('type')
    if not kind:
        log.warning('skipping joint `%s` without a type', name)
        return None

    # they reference the links on either side
    parent = element.find('{*}parent')
    child = element.find('{*}child')
    if parent is None or child is None:
        log.warning('skipping joint `%s` without parent and child', name)
        return None
    connects = (parent.get('link'), child.get('link'))
    if not all(connects):
        log.warning('skipping joint `%s` with an unnamed link', name)
        return None

    xyz, rpy = _parse_origin(element)

    axis = element.find('{*}axis')
    if axis is not None:
        axis = parse_floats(axis.get('xyz'), np.zeros(3))

    limits = element.find('{*}limit')
    if limits is not None:
        limits = Limits(
            lower=_parse_float(limits.get('lower'), 0.0),
            upper=_parse_float(limits.get('upper'), 0.0),
            effort=_parse_float(limits.get('effort')),
            velocity=_parse_float(limits.get('velocity')))

    return Joint(name=name,
                 joint_type=kind,
                 connects=connects,
                 xyz=xyz,
                 rpy=rpy,
                 axis=axis,
                 limits=limits)
