from datetime import timedelta
from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Sequence, Iterable

import numpy as np


class Keyframe(NamedTuple):
    """
    Transform of a single bone at a point in time of a clip
    """
    bone: int  # index of the animated bone in the flattened skeleton
    time: timedelta  # offset from the start of the clip
    transform: np.ndarray  # local transform of the bone


class AnimationClip:
    """
    Runtime representation of an animation: keyframes of all bones in ascending time order
    """
    duration: timedelta
    keyframes: Sequence[Keyframe]

    def __init__(self, duration: timedelta, keyframes: Iterable[Keyframe]):
        self.duration = duration
        self.keyframes = tuple(keyframes)

    def __len__(self):
        return len(self.keyframes)

    def __repr__(self):
        return f"AnimationClip(duration={self.duration}, keyframes={len(self.keyframes)})"


class ClipDefinition(NamedTuple):
    """
    Named range of frames that is cut out of a longer animation
    """
    name: str
    start_frame: int
    end_frame: int


class SkinningData:
    """
    Animation data that is attached to the processed model.
    Bind pose, inverse bind pose and hierarchy are parallel to the flattened skeleton
    """
    animation_clips: Mapping[str, AnimationClip]
    bind_pose: Sequence[np.ndarray]
    inverse_bind_pose: Sequence[np.ndarray]
    skeleton_hierarchy: Sequence[int]  # parent index of each bone, -1 for the root

    def __init__(self, animation_clips: Mapping[str, AnimationClip], bind_pose: List[np.ndarray],
                 inverse_bind_pose: List[np.ndarray], skeleton_hierarchy: List[int]):
        if not (len(bind_pose) == len(inverse_bind_pose) == len(skeleton_hierarchy)):
            raise ValueError("Bind pose, inverse bind pose and skeleton hierarchy must have the same length")

        self.animation_clips = MappingProxyType(dict(animation_clips))
        self.bind_pose = tuple(bind_pose)
        self.inverse_bind_pose = tuple(inverse_bind_pose)
        self.skeleton_hierarchy = tuple(skeleton_hierarchy)

    @property
    def bone_count(self) -> int:
        return len(self.skeleton_hierarchy)
