"""
assemble.py
--------------

Build a `KinematicTree` from the flat links and joints of a
parsed document.

The structure of the tree (links, joints and root links) is built
first and synchronously. Meshes for every visual are then requested
from the cache all at once, and attached in document order after
every load has finished. Anything that can not be assembled is
reported as a warning record rather than an exception.
"""
import logging

from concurrent.futures import wait

import trimesh

from . import tree as kinds
from .tree import KinematicTree
from .errors import (PackageNotFound,
                     MeshLoadError,
                     DanglingJointReference,
                     DuplicateParent,
                     KinematicLoop,
                     OrphanedLink,
                     UnresolvedPackage,
                     MeshLoadFailed)
from .resolve import resolve_path
from .orientation import origin_matrix

log = logging.getLogger(__name__)


def assemble(links,
             joints,
             mesh_loader,
             base_path='',
             packages=None,
             collision=False,
             root_transform=None,
             name='robot_root'):
    """
    Assemble links and joints into a tree of transform nodes.

    Parameters
    ------------
    links : (n,) Link
      Links in document order
    joints : (m,) Joint
      Joints in document order
    mesh_loader : MeshCache
      Cache used to load the geometry of every visual
    base_path : str
      Directory or URL relative mesh references resolve against
    packages : None or dict
      Package name to directory for `package://` references
    collision : bool
      Also attach collision geometry under each link
    root_transform : None or (4, 4) float
      Pose of the robot root, for example to change the up axis
    name : str
      Name of the synthetic robot root node

    Returns
    ------------
    root : KinematicNode
      Robot root node, `root.tree` holds every node
    warnings : (p,) AssemblyWarning
      Everything that was skipped or left unreachable
    """
    tree = KinematicTree(name=name)
    warnings = []

    def warn(warning):
        log.warning(warning.message)
        warnings.append(warning)

    link_nodes = {}
    for link in links:
        if link.name in link_nodes:
            log.warning('ignoring duplicate link `%s`', link.name)
            continue
        link_nodes[link.name] = tree.add(link.name, kind=kinds.LINK)

    _connect_joints(tree=tree,
                    joints=joints,
                    link_nodes=link_nodes,
                    warn=warn)

    # a link named as a child by any joint is not a root link, even if
    # that joint was skipped
    claimed = set(joint.child for joint in joints)
    for link_name, node in link_nodes.items():
        if link_name not in claimed:
            tree.attach(node, tree.root)
    if root_transform is not None:
        tree.root.set_pose(root_transform)

    reachable = tree.reachable()
    for link_name, node in link_nodes.items():
        if node.index not in reachable:
            warn(OrphanedLink(link=link_name))

    _attach_geometry(tree=tree,
                     links=links,
                     link_nodes=link_nodes,
                     mesh_loader=mesh_loader,
                     base_path=base_path,
                     packages=packages,
                     collision=collision,
                     warn=warn)

    return tree.root, warnings


def _connect_joints(tree, joints, link_nodes, warn):
    """
    Add a node for every joint that can be placed, parenting
    it under its parent link and its child link under it.
    """
    # child link name to the joint that claimed it
    assigned = {}
    for joint in joints:
        missing = [n for n in joint.connects if n not in link_nodes]
        if len(missing) > 0:
            warn(DanglingJointReference(joint=joint.name, missing=missing))
            continue
        if joint.child in assigned:
            warn(DuplicateParent(child_link=joint.child,
                                 joint=joint.name,
                                 kept=assigned[joint.child]))
            continue

        parent = link_nodes[joint.parent]
        child = link_nodes[joint.child]
        if child is parent or tree.is_ancestor(child, parent):
            warn(KinematicLoop(joint=joint.name,
                               parent_link=joint.parent,
                               child_link=joint.child))
            continue

        node = tree.add(joint.name, kind=kinds.JOINT)
        node.set_pose(origin_matrix(joint.xyz, joint.rpy))
        node.metadata = {'type': joint.type,
                         'axis': joint.axis.copy(),
                         'limits': joint.limits}

        tree.attach(node, parent)
        tree.attach(child, node)
        assigned[joint.child] = joint.name


def _attach_geometry(tree,
                     links,
                     link_nodes,
                     mesh_loader,
                     base_path,
                     packages,
                     collision,
                     warn):
    """
    Request every mesh at once, then attach the results in
    document order once all requests have finished.
    """
    pending = []
    # only the first declaration of a link name owns its node
    handled = set()
    for link in links:
        if link.name in handled:
            continue
        handled.add(link.name)
        node = link_nodes[link.name]
        groups = [('visual', link.visuals)]
        if collision:
            groups.append(('collision', link.collisions))
        for label, visuals in groups:
            for i, visual in enumerate(visuals):
                try:
                    location = resolve_path(
                        visual.geometry_reference,
                        base_path=base_path,
                        packages=packages)
                except PackageNotFound as E:
                    warn(UnresolvedPackage(link=link.name,
                                           reference=E.reference,
                                           package=E.package))
                    continue
                pending.append((node,
                                f'{link.name}_{label}_{i}',
                                visual,
                                location,
                                mesh_loader.request(location)))

    wait([item[-1] for item in pending])

    for node, name, visual, location, future in pending:
        try:
            mesh = mesh_loader.instance(future, location=location)
        except MeshLoadError as E:
            warn(MeshLoadFailed(link=node.name,
                                location=location,
                                cause=E.cause))
            continue

        if visual.material is not None and visual.material.color is not None:
            apply_color(mesh, visual.material.color)

        visual_node = tree.add(name, kind=kinds.VISUAL)
        visual_node.set_pose(origin_matrix(visual.xyz, visual.rpy))
        visual_node.scale = visual.scale.copy()

        mesh_node = tree.add(location.rsplit('/', 1)[-1], kind=kinds.MESH)
        mesh_node.geometry = mesh

        tree.attach(visual_node, node)
        tree.attach(mesh_node, visual_node)


def apply_color(mesh, color):
    """
    Set a single face color on a mesh or every mesh in a scene.

    Parameters
    ------------
    mesh : trimesh.Trimesh or trimesh.Scene
      Geometry owned by one visual
    color : (4,) float
      RGBA in 0.0 - 1.0
    """
    if isinstance(mesh, trimesh.Scene):
        meshes = mesh.geometry.values()
    else:
        meshes = [mesh]
    for m in meshes:
        if hasattr(m.visual, 'face_colors'):
            m.visual.face_colors = color
