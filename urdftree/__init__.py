"""
urdftree
-----------

Load URDF robot descriptions into a tree of transform nodes
with joint metadata and mesh geometry, ready to be handed to
a renderer as a `trimesh.Scene`.
"""
import logging

from .orientation import compose_rpy, origin_matrix
from .link import Link, Visual, Material
from .joint import Joint, Limits
from .parse import parse, parse_document, Document
from .resolve import resolve_path, fetch_location
from .cache import MeshCache
from .tree import KinematicNode, KinematicTree
from .assemble import assemble
from .exchange import Robot, load_urdf, load_urdf_string
from .errors import (MalformedDocument,
                     PackageNotFound,
                     MeshLoadError,
                     AssemblyWarning,
                     DanglingJointReference,
                     DuplicateParent,
                     KinematicLoop,
                     OrphanedLink,
                     UnresolvedPackage,
                     MeshLoadFailed)

# library code is silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ['compose_rpy',
           'origin_matrix',
           'Link',
           'Visual',
           'Material',
           'Joint',
           'Limits',
           'parse',
           'parse_document',
           'Document',
           'resolve_path',
           'fetch_location',
           'MeshCache',
           'KinematicNode',
           'KinematicTree',
           'assemble',
           'Robot',
           'load_urdf',
           'load_urdf_string',
           'MalformedDocument',
           'PackageNotFound',
           'MeshLoadError',
           'AssemblyWarning',
           'DanglingJointReference',
           'DuplicateParent',
           'KinematicLoop',
           'OrphanedLink',
           'UnresolvedPackage',
           'MeshLoadFailed']
