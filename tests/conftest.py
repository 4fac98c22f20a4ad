"""
Pytest fixtures: small scenes with a three bone skeleton and a skinned mesh.
"""

from datetime import timedelta

import numpy as np
import pytest

from PySkinnedModel.model import (NodeContent, BoneContent, MeshContent, GeometryContent, AnimationContent,
                                  AnimationKeyframe, BasicMaterialContent, ExternalReference, VertexChannelNames)


def translation(x, y, z):
    matrix = np.identity(4)
    matrix[:3, 3] = (x, y, z)
    return matrix


def rotation_z_90():
    return np.array([[0.0, -1.0, 0.0, 0.0],
                     [1.0, 0.0, 0.0, 0.0],
                     [0.0, 0.0, 1.0, 0.0],
                     [0.0, 0.0, 0.0, 1.0]])


def ms(milliseconds):
    return timedelta(milliseconds=milliseconds)


def skinned_mesh(name, material=None):
    mesh = MeshContent(name)
    geometry = GeometryContent([[0, 0, 0], [1, 0, 0], [0, 1, 0]], material, [0, 1, 2])
    geometry.add_channel(VertexChannelNames.WEIGHTS, [[1.0], [1.0], [1.0]])
    geometry.add_channel(VertexChannelNames.NORMAL, [[0, 0, 1], [0, 0, 1], [0, 0, 1]])
    mesh.geometry.append(geometry)
    return mesh


def static_mesh(name):
    mesh = MeshContent(name)
    mesh.geometry.append(GeometryContent([[0, 0, 0], [1, 0, 0], [0, 1, 0]], None, [0, 1, 2]))
    return mesh


def walk_animation():
    """Two channels sampled every 500ms over two seconds."""
    animation = AnimationContent("Take 001", ms(2000))
    animation.channels["Root"] = [AnimationKeyframe(ms(t), translation(0, t / 1000, 0))
                                  for t in range(0, 2001, 500)]
    animation.channels["Head"] = [AnimationKeyframe(ms(t), translation(t / 1000, 0, 0))
                                  for t in range(0, 2001, 500)]
    return animation


@pytest.fixture
def skeleton():
    """Root -> Spine -> Head chain."""
    root = BoneContent("Root", translation(0, 1, 0))
    spine = root.add_child(BoneContent("Spine", translation(0, 2, 0)))
    spine.add_child(BoneContent("Head", translation(0, 3, 0)))
    root.animations["Take 001"] = walk_animation()
    return root


@pytest.fixture
def material():
    return BasicMaterialContent("Skin", ExternalReference("skin.png"))


@pytest.fixture
def scene(skeleton, material):
    """Scene with the skeleton and one skinned mesh below the root."""
    root = NodeContent("Scene")
    root.add_child(skeleton)
    root.add_child(skinned_mesh("Body", material))
    return root
