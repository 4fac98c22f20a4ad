import logging
from datetime import timedelta
from operator import attrgetter
from typing import Dict, List, Mapping

from PySkinnedModel.animation import AnimationClip, Keyframe
from PySkinnedModel.common_types import Bone, InvalidContentError
from PySkinnedModel.model import AnimationContent

logger = logging.getLogger(__name__)


class UnknownBoneError(InvalidContentError):
    pass


class InvalidAnimationError(InvalidContentError):
    pass


class NoAnimationsError(InvalidContentError):
    pass


def build_bone_map(bones: List[Bone]) -> Dict[str, int]:
    """
    Maps the names of the bones to their indices. Unnamed bones can't be animated and are left out
    """
    bone_map: Dict[str, int] = {}
    for bone in bones:
        if not bone.name:
            continue
        if bone.name in bone_map:
            raise InvalidContentError(f"Skeleton contains more than one bone called '{bone.name}'.")
        bone_map[bone.name] = bone.index
    return bone_map


def process_animation(animation: AnimationContent, bone_map: Mapping[str, int]) -> AnimationClip:
    """
    Merges the channels of an animation into a single keyframe list sorted by time
    :param animation: source animation, one channel per bone
    :param bone_map: bone name to bone index
    :return: the runtime clip
    """
    keyframes: List[Keyframe] = []

    for bone_name, channel in animation.channels.items():
        try:
            bone_index = bone_map[bone_name]
        except KeyError:
            raise UnknownBoneError(f"Found animation for bone '{bone_name}', "
                                   "which is not part of the skeleton.")

        keyframes.extend(Keyframe(bone_index, keyframe.time, keyframe.transform) for keyframe in channel)

    # sorted() is stable, equal times stay in channel order
    keyframes = sorted(keyframes, key=attrgetter('time'))

    if not keyframes:
        raise InvalidAnimationError("Animation has no keyframes.")

    if animation.duration <= timedelta(0):
        raise InvalidAnimationError("Animation has a zero duration.")

    return AnimationClip(animation.duration, keyframes)


def process_animations(animations: Mapping[str, AnimationContent], bones: List[Bone]) -> Dict[str, AnimationClip]:
    """
    Converts all animations of the skeleton to the runtime format
    :param animations: source animations keyed by name
    :param bones: flattened skeleton
    :return: runtime clips keyed by animation name
    """
    bone_map = build_bone_map(bones)

    animation_clips: Dict[str, AnimationClip] = {}
    for name, animation in animations.items():
        animation_clips[name] = process_animation(animation, bone_map)
        logger.info(f"Processed animation '{name}' with {len(animation_clips[name])} keyframes")

    if not animation_clips:
        raise NoAnimationsError("Input file does not contain any animations.")

    return animation_clips
