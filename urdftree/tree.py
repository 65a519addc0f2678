"""
tree.py
-----------

The assembled robot: an arena of transform nodes referenced by
integer index, rooted at a synthetic robot root node.

Every node has a local translation, rotation and scale relative
to its parent. Link and joint nodes come from the document, visual
nodes hold the origin and scale of one `visual` element, and mesh
nodes hold the loaded geometry instance.
"""
import trimesh

import numpy as np
import networkx as nx

ROOT = 'root'
LINK = 'link'
JOINT = 'joint'
VISUAL = 'visual'
MESH = 'mesh'


class KinematicNode(object):
    """
    One transform node in a `KinematicTree`.

    Nodes refer to their parent and children by index into the
    tree that owns them, use `parent` and `children` to get the
    node objects themselves.
    """

    def __init__(self, tree, index, name, kind, frame):
        self.tree = tree
        self.index = index
        self.name = name
        self.kind = kind
        # unique name of this node in an exported scene graph
        self.frame = frame

        self.translation = np.zeros(3, dtype=np.float64)
        self.rotation = np.eye(3, dtype=np.float64)
        self.scale = np.ones(3, dtype=np.float64)

        # joint type, axis and limits for joint nodes
        self.metadata = {}
        # trimesh.Trimesh or trimesh.Scene for mesh nodes
        self.geometry = None

        self.parent_index = None
        self.child_indices = []

    @property
    def parent(self):
        if self.parent_index is None:
            return None
        return self.tree.nodes[self.parent_index]

    @property
    def children(self):
        return [self.tree.nodes[i] for i in self.child_indices]

    @property
    def matrix(self):
        """
        The local transform of this node relative to its parent.

        Returns
        ----------
        matrix : (4, 4) float
          Translation, then rotation, then scale
        """
        matrix = np.eye(4, dtype=np.float64)
        matrix[:3, :3] = self.rotation * self.scale
        matrix[:3, 3] = self.translation
        return matrix

    def set_pose(self, matrix):
        """
        Set translation and rotation from a rigid transform.

        Parameters
        ------------
        matrix : (4, 4) float
          Homogeneous transform without scale
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        self.rotation = matrix[:3, :3].copy()
        self.translation = matrix[:3, 3].copy()

    def __repr__(self):
        return f'<KinematicNode {self.kind} {self.name!r}>'


class KinematicTree(object):
    """
    An arena of `KinematicNode` objects forming a single tree.
    """

    def __init__(self, name='robot_root'):
        self.nodes = []
        self._frames = set()
        self.root = self.add(name, kind=ROOT)

    def __len__(self):
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def add(self, name, kind):
        """
        Add an unparented node with identity pose.

        Parameters
        ------------
        name : str
          Name of the link, joint or visual
        kind : str
          One of ROOT, LINK, JOINT, VISUAL, MESH

        Returns
        ------------
        node : KinematicNode
          The new node
        """
        frame = name
        if frame in self._frames:
            # links and joints may share names in a document
            frame = f'{kind}:{name}'
            count = 1
            while frame in self._frames:
                frame = f'{kind}:{name}:{count}'
                count += 1
        self._frames.add(frame)

        node = KinematicNode(tree=self,
                             index=len(self.nodes),
                             name=name,
                             kind=kind,
                             frame=frame)
        self.nodes.append(node)
        return node

    def attach(self, child, parent):
        """
        Parent one node under another.

        Parameters
        ------------
        child : KinematicNode
          Node without a parent
        parent : KinematicNode
          New parent of `child`
        """
        if child.parent_index is not None:
            raise ValueError(f'{child} already has a parent!')
        if child is self.root:
            raise ValueError('the root can not have a parent!')
        if child is parent or self.is_ancestor(child, parent):
            raise ValueError(f'attaching {child} would create a cycle!')
        child.parent_index = parent.index
        parent.child_indices.append(child.index)

    def is_ancestor(self, node, other):
        """
        Is `node` on the path from `other` up to its top.
        """
        current = other.parent_index
        while current is not None:
            if current == node.index:
                return True
            current = self.nodes[current].parent_index
        return False

    def find(self, name, kind=None):
        """
        Get the first node with a name.

        Parameters
        ------------
        name : str
          Name of a link, joint or visual
        kind : None or str
          Only consider nodes of this kind

        Returns
        ------------
        node : None or KinematicNode
          Matching node
        """
        for node in self.nodes:
            if node.name == name and (kind is None or node.kind == kind):
                return node
        return None

    def link(self, name):
        return self.find(name, kind=LINK)

    def joint(self, name):
        return self.find(name, kind=JOINT)

    def reachable(self):
        """
        Indexes of every node connected to the root.

        Returns
        ----------
        reachable : set
          Node indexes including the root
        """
        seen = set()
        stack = [self.root.index]
        while stack:
            index = stack.pop()
            seen.add(index)
            stack.extend(self.nodes[index].child_indices)
        return seen

    def orphans(self):
        """
        Nodes which are not connected to the root.
        """
        reachable = self.reachable()
        return [n for n in self.nodes if n.index not in reachable]

    def world_matrix(self, node):
        """
        Transform from a node to the frame of the root.

        Parameters
        ------------
        node : KinematicNode
          Any node in this tree

        Returns
        ----------
        matrix : (4, 4) float
          Product of local transforms from the top down to `node`
        """
        matrix = node.matrix
        current = node.parent
        while current is not None:
            matrix = np.dot(current.matrix, matrix)
            current = current.parent
        return matrix

    def relative_matrix(self, frame_from, frame_to):
        """
        Transform taking coordinates in `frame_to` into `frame_from`.

        Parameters
        ------------
        frame_from : KinematicNode
          Reference node
        frame_to : KinematicNode
          Node to express in the reference frame

        Returns
        ----------
        matrix : (4, 4) float
          Pose of `frame_to` relative to `frame_from`
        """
        return np.dot(np.linalg.inv(self.world_matrix(frame_from)),
                      self.world_matrix(frame_to))

    def graph(self):
        """
        Get a directed graph of parent to child edges.

        Returns
        ----------
        graph : networkx.DiGraph
          Nodes are indexes with `name` and `kind` attributes
        """
        graph = nx.DiGraph()
        for node in self.nodes:
            graph.add_node(node.index, name=node.name, kind=node.kind)
        for node in self.nodes:
            for child in node.child_indices:
                graph.add_edge(node.index, child)
        return graph

    def validate(self):
        """
        Check that the nodes reachable from the root form a tree
        where every link has at most one joint parent.

        Raises
        ----------
        ValueError
          If the structure is not a tree
        """
        reachable = self.reachable()
        graph = self.graph().subgraph(reachable)
        if not nx.is_arborescence(graph):
            raise ValueError('nodes do not form a tree!')
        for node in self.nodes:
            if node.kind != LINK or node.parent is None:
                continue
            if node.parent.kind not in (JOINT, ROOT):
                raise ValueError(f'{node} has parent {node.parent}!')

    def scene(self):
        """
        Get a scene containing the geometry of every mesh node
        reachable from the root.

        Returns
        -----------
        scene : trimesh.Scene
          Scene whose graph mirrors this tree
        """
        reachable = self.reachable()
        root = self.root
        # a frame above the root carries the root's own pose
        base_frame = 'world' if root.frame != 'world' else 'world_base'
        geometry = {}
        edges = [(base_frame, root.frame, {'matrix': root.matrix})]
        for node in self.nodes:
            if node.index not in reachable or node is root:
                continue
            attr = {'matrix': node.matrix}
            if node.geometry is not None:
                mesh = node.geometry
                if isinstance(mesh, trimesh.Scene):
                    # flatten with transforms so a frame holds one geometry
                    mesh = trimesh.util.concatenate(mesh.dump())
                attr['geometry'] = node.frame
                geometry[node.frame] = mesh
            edges.append((node.parent.frame, node.frame, attr))

        graph = trimesh.scene.transforms.SceneGraph(
            base_frame=base_frame)
        graph.from_edgelist(edges)

        return trimesh.Scene(geometry, graph=graph)

    def show(self, **kwargs):
        """
        Open a pyglet window showing all geometry.
        """
        return self.scene().show(**kwargs)
