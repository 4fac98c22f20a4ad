import logging
from typing import Optional

from PySkinnedModel.model import NodeContent, MeshContent, BoneContent, VertexChannelNames

logger = logging.getLogger(__name__)


def mesh_has_skinning(mesh: MeshContent) -> bool:
    """
    Checks whether every geometry of the mesh carries skin weights
    """
    return all(VertexChannelNames.WEIGHTS in geometry.vertices for geometry in mesh.geometry)


def validate_mesh(node: NodeContent, parent_bone_name: Optional[str] = None, log: logging.Logger = logger):
    """
    Makes sure the scene only contains meshes that can be animated.
    Meshes without skin weights are removed from the scene
    :param node: node to validate together with its descendants
    :param parent_bone_name: name of the closest bone above node, None if node is not inside the skeleton
    :param log: receives the warnings about unsupported meshes
    """
    if isinstance(node, MeshContent):
        if parent_bone_name is not None:
            log.warning(f"Mesh {node.name} is a child of bone {parent_bone_name}. "
                        "SkinnedModelProcessor does not correctly handle meshes that are children of bones.")

        if not mesh_has_skinning(node):
            log.warning(f"Mesh {node.name} has no skinning information, so it has been deleted.")
            if node.parent is not None:
                node.parent.remove_child(node)
            return

    elif isinstance(node, BoneContent):
        parent_bone_name = node.name

    # validating a child can remove it, so walk a copy
    for child in list(node.children):
        validate_mesh(child, parent_bone_name, log)
