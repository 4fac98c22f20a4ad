import logging
from typing import List

from PySkinnedModel.common_types import Bone, InvalidContentError, identity
from PySkinnedModel.model import NodeContent, BoneContent
from PySkinnedModel.process._common import transform_scene
from PySkinnedModel.settings import MAX_BONES

logger = logging.getLogger(__name__)


class BoneCountError(InvalidContentError):
    pass


def flatten_transforms(node: NodeContent, skeleton: BoneContent):
    """
    Bakes the local transforms of all nodes except the skeleton into their geometry,
    so everything ends up in the same coordinate system
    :param node: node whose children get flattened
    :param skeleton: root bone, its subtree is left untouched
    """
    for child in node.children:
        if child is skeleton:
            continue

        transform_scene(child, child.transform)
        child.transform = identity()

        flatten_transforms(child, skeleton)


def _collect_bones(bone: BoneContent, parent_index: int, bones: List[Bone]):
    index = len(bones)
    bones.append(Bone(bone.name, index, parent_index, bone.transform, bone.absolute_transform))
    logger.debug(f"Flattened bone '{bone.name}' to index {index}")

    for child in bone.children:
        if isinstance(child, BoneContent):
            _collect_bones(child, index, bones)


def flatten_skeleton(skeleton: BoneContent, max_bones: int = MAX_BONES) -> List[Bone]:
    """
    Turns the bone tree into a list in which every parent comes before its children
    :param skeleton: root bone of the skeleton
    :param max_bones: maximum number of bones the runtime can handle
    :return: the bones, the index of a bone is its position in the list
    """
    bones: List[Bone] = []
    _collect_bones(skeleton, -1, bones)

    if len(bones) > max_bones:
        raise BoneCountError(f"Skeleton has {len(bones)} bones, but the maximum supported is {max_bones}.")

    logger.info(f"Flattened skeleton '{skeleton.name}' with {len(bones)} bones")
    return bones
