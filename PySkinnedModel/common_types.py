from typing import Optional

import numpy as np


class InvalidContentError(Exception):
    """
    Raised when the source content cannot be turned into skinning data.
    Aborts processing of the whole asset
    """
    pass


def identity() -> np.ndarray:
    return np.identity(4, dtype=np.float64)


def as_matrix(matrix) -> np.ndarray:
    """
    Copies the given value into a 4x4 affine matrix (column vector convention, translation in the last column)
    """
    result = np.array(matrix, dtype=np.float64)
    if result.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix but got shape {result.shape}")
    return result


class Bone:
    """
    Represents a bone in the flattened bone hierarchy of the skeleton
    """
    name: str = ""
    index: int = -1  # position of this bone in the flattened skeleton
    parent_index: int = -1  # index of the parent bone or -1 for the root
    transform: np.ndarray  # bind pose of the bone relative to its parent
    absolute_transform: np.ndarray  # bind pose of the bone in model space

    def __init__(self, name: Optional[str], index: int, parent_index: int,
                 transform: np.ndarray, absolute_transform: np.ndarray):
        self.name = name or ""
        self.index = index
        self.parent_index = parent_index
        self.transform = as_matrix(transform)
        self.absolute_transform = as_matrix(absolute_transform)

    @property
    def inverse_bind_pose(self) -> np.ndarray:
        return np.linalg.inv(self.absolute_transform)

    def __repr__(self):
        return f"Bone(name='{self.name}', index={self.index}, parent_index={self.parent_index})"
