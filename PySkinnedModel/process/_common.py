from typing import Iterator, Optional

import numpy as np

from PySkinnedModel.common_types import InvalidContentError
from PySkinnedModel.model import NodeContent, BoneContent, MeshContent, AnimationKeyframe, VertexChannelNames


def iterate_nodes(node: NodeContent) -> Iterator[NodeContent]:
    """
    Yields the node and all of its descendants in document order (parents before children)
    """
    yield node
    for child in node.children:
        yield from iterate_nodes(child)


def find_skeleton(node: NodeContent) -> Optional[BoneContent]:
    """
    Searches the scene for the root bone of the skeleton
    :param node: root of the scene
    :return: the root bone or None if the scene has no bones
    """
    roots = [n for n in iterate_nodes(node)
             if isinstance(n, BoneContent) and not isinstance(n.parent, BoneContent)]

    if len(roots) > 1:
        raise InvalidContentError(f"Scene contains {len(roots)} skeletons "
                                  f"({', '.join(repr(root.name) for root in roots)}), but only one is supported.")

    return roots[0] if roots else None


def transform_scene(node: NodeContent, matrix: np.ndarray):
    """
    Applies matrix to all geometry below node. The transforms and animation keyframes of the
    descendants are moved into the new coordinate system so the scene looks the same afterwards
    """
    normal_matrix = np.linalg.inv(matrix[:3, :3]).T
    inverse = np.linalg.inv(matrix)

    for current in iterate_nodes(node):
        if current is not node:
            current.transform = matrix @ current.transform @ inverse

            # keyframes replace bone transforms, so they have to stay in the same space
            for animation in current.animations.values():
                for bone_name, channel in animation.channels.items():
                    animation.channels[bone_name] = [AnimationKeyframe(keyframe.time,
                                                                       matrix @ keyframe.transform @ inverse)
                                                     for keyframe in channel]

        if not isinstance(current, MeshContent):
            continue

        for geometry in current.geometry:
            positions = geometry.vertices[VertexChannelNames.POSITION]
            geometry.vertices[VertexChannelNames.POSITION] = positions @ matrix[:3, :3].T + matrix[:3, 3]

            normals = geometry.vertices.get(VertexChannelNames.NORMAL)
            if normals is not None:
                normals = normals @ normal_matrix.T
                lengths = np.linalg.norm(normals, axis=1, keepdims=True)
                lengths[lengths == 0.0] = 1.0
                geometry.vertices[VertexChannelNames.NORMAL] = normals / lengths
