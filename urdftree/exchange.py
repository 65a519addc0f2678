"""
exchange.py
--------------

Load URDF robots from text, a file path, or a ZIP archive
into an assembled `Robot`.
"""
import os
import logging

import trimesh

from trimesh import resolvers

from .parse import parse_document
from .cache import MeshCache
from .assemble import assemble

log = logging.getLogger(__name__)


class Robot(object):
    """
    A loaded robot: the parsed document, the assembled tree
    and any warnings produced while assembling it.
    """

    def __init__(self, document, root, warnings):
        self.document = document
        self.root = root
        self.warnings = warnings

    @property
    def name(self):
        return self.document.name

    @property
    def tree(self):
        return self.root.tree

    @property
    def links(self):
        return self.document.links

    @property
    def joints(self):
        return self.document.joints

    def graph(self):
        return self.tree.graph()

    def scene(self):
        """
        Get a scene containing the geometry for every link.

        Returns
        -----------
        scene : trimesh.Scene
          Scene with link geometry
        """
        return self.tree.scene()

    def show(self, **kwargs):
        """
        Open a pyglet window showing all geometry.
        """
        return self.tree.show(**kwargs)


def _parse_file(file_obj, ext):
    """
    Read an XML file from a file path or ZIP archive.

    Parameters
    ----------
    file_obj : str
      Path to an XML file or ZIP archive
    ext : str
      Desired extension of XML-like file

    Returns
    -----------
    text : bytes
      Raw document
    base_path : str
      Location relative mesh references resolve against
    fetch : None or callable
      Fetches resolved locations, None for the default
    """
    # make sure extension is in the format '.extension'
    ext = '.' + ext.lower().strip().lstrip('.')

    if not isinstance(file_obj, (str, os.PathLike)):
        raise NotImplementedError('must load by file name')
    file_obj = os.fspath(file_obj)

    if file_obj.lower().endswith(ext):
        with open(file_obj, 'rb') as f:
            text = f.read()
        base_path = os.path.dirname(os.path.abspath(file_obj))
        return text, base_path, None
    elif file_obj.lower().endswith('.zip'):
        # load the ZIP archive
        with open(file_obj, 'rb') as f:
            archive = trimesh.util.decompress(f, 'zip')
        # find the first key in the archive that matches our extension
        # this will be screwey if there are multiple XML files
        try:
            key = next(k for k in archive.keys()
                       if k.lower().endswith(ext))
        except StopIteration:
            raise ValueError(f'no {ext} file in `{file_obj}`!') from None
        text = archive[key].read()
        archive[key].seek(0)
        # meshes are fetched from the archive by their key
        resolver = resolvers.ZipResolver(archive)
        return text, os.path.dirname(key), resolver.get

    raise ValueError(f'must be {ext} or ZIP with {ext} inside!')


def load_urdf_string(text,
                     base_path='',
                     packages=None,
                     collision=False,
                     root_transform=None,
                     fetch=None,
                     max_workers=None):
    """
    Load a URDF robot from a string.

    Parameters
    ------------
    text : str or bytes
      URDF document
    base_path : str
      Directory or URL relative mesh references resolve against
    packages : None or dict
      Package name to directory for `package://` references
    collision : bool
      Also attach collision geometry
    root_transform : None or (4, 4) float
      Pose of the robot root
    fetch : None or callable
      Takes a resolved location and returns bytes
    max_workers : None or int
      Number of threads loading meshes

    Returns
    ------------
    robot : Robot
      Assembled result

    Raises
    ------------
    MalformedDocument
      If the text is not a URDF document
    """
    document = parse_document(text)
    # the cache lives only as long as this load
    with MeshCache(fetch=fetch, max_workers=max_workers) as cache:
        root, warnings = assemble(links=document.links,
                                  joints=document.joints,
                                  mesh_loader=cache,
                                  base_path=base_path,
                                  packages=packages,
                                  collision=collision,
                                  root_transform=root_transform)
    if len(warnings) > 0:
        log.info('assembled `%s` with %d warnings',
                 document.name, len(warnings))
    return Robot(document=document, root=root, warnings=warnings)


def load_urdf(file_obj,
              packages=None,
              collision=False,
              root_transform=None,
              fetch=None,
              max_workers=None):
    """
    Load a URDF robot from a ZIP or file path.

    Parameters
    ------------
    file_obj : str
      Path to URDF file or ZIP with URDF inside
    packages : None or dict
      Package name to directory for `package://` references
    collision : bool
      Also attach collision geometry
    root_transform : None or (4, 4) float
      Pose of the robot root
    fetch : None or callable
      Overrides how meshes are fetched
    max_workers : None or int
      Number of threads loading meshes

    Returns
    ------------
    robot : Robot
      Loaded result from URDF
    """
    text, base_path, archive_fetch = _parse_file(file_obj=file_obj,
                                                 ext='.urdf')
    if fetch is None:
        fetch = archive_fetch
    return load_urdf_string(text,
                            base_path=base_path,
                            packages=packages,
                            collision=collision,
                            root_transform=root_transform,
                            fetch=fetch,
                            max_workers=max_workers)
