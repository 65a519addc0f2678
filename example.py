import sys
import logging

import numpy as np

import urdftree

from trimesh import transformations


def show_robot(file_obj, packages=None, **kwargs):
    """
    Load a URDF and open a window showing every link which could
    be assembled, printing anything that was skipped.

    Parameters
    -----------
    file_obj : str
      Path to a URDF file or a ZIP with a URDF inside
    packages : None or dict
      Package name to directory for `package://` references
    kwargs : dict
      Passed to scene.show
    """
    # URDF is Z-up, rotate the whole robot so it stands in a Y-up viewer
    up = transformations.rotation_matrix(-np.pi / 2, [1, 0, 0])
    robot = urdftree.load_urdf(file_obj,
                               packages=packages,
                               root_transform=up)

    for warning in robot.warnings:
        print(f'{warning.kind}: {warning.message}')

    for node in robot.tree:
        if node.kind == 'joint':
            print(node.name, node.metadata['type'], node.metadata['axis'])

    return robot.show(**kwargs)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)

    show_robot(sys.argv[1] if len(sys.argv) > 1 else 'robots/ur5.zip')
