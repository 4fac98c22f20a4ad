from datetime import timedelta
from typing import Dict, List, NamedTuple, Optional

import numpy as np

from PySkinnedModel.common_types import identity, as_matrix


class VertexChannelNames:
    POSITION = 'Position'
    NORMAL = 'Normal'
    WEIGHTS = 'Weights'
    TEXTURE_COORDINATE = 'TextureCoordinate0'


class ExternalReference(NamedTuple):
    """
    Reference to a file that is built separately from the model
    """
    filename: str


class MaterialContent:
    name: str = ""

    def __init__(self, name: str = ""):
        self.name = name


class BasicMaterialContent(MaterialContent):
    """
    Fixed function material with an optional diffuse texture
    """
    texture: Optional[ExternalReference]

    def __init__(self, name: str = "", texture: Optional[ExternalReference] = None):
        super().__init__(name)
        self.texture = texture


class EffectMaterialContent(MaterialContent):
    """
    Material that is rendered by a custom effect
    """
    effect: Optional[ExternalReference]
    textures: Dict[str, ExternalReference]

    def __init__(self, name: str = "", effect: Optional[ExternalReference] = None):
        super().__init__(name)
        self.effect = effect
        self.textures = {}


class NodeContent:
    """
    Node of the intermediate scene tree. The transform is relative to the parent node
    """
    name: str
    transform: np.ndarray
    parent: Optional['NodeContent']
    children: List['NodeContent']
    animations: Dict[str, 'AnimationContent']  # animations keyed by name

    def __init__(self, name: Optional[str] = None, transform: Optional[np.ndarray] = None):
        self.name = name
        self.transform = identity() if transform is None else as_matrix(transform)
        self.parent = None
        self.children = []
        self.animations = {}

    def add_child(self, child: 'NodeContent') -> 'NodeContent':
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: 'NodeContent'):
        self.children.remove(child)
        child.parent = None

    @property
    def absolute_transform(self) -> np.ndarray:
        if self.parent is None:
            return self.transform.copy()
        return self.parent.absolute_transform @ self.transform

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}', children={len(self.children)})"


class BoneContent(NodeContent):
    pass


class GeometryContent:
    """
    Batch of triangles sharing one material. Vertex data is stored per channel,
    one row per vertex
    """
    vertices: Dict[str, np.ndarray]
    indices: List[int]
    material: Optional[MaterialContent]

    def __init__(self, positions, material: Optional[MaterialContent] = None, indices: Optional[List[int]] = None):
        self.vertices = {VertexChannelNames.POSITION: np.array(positions, dtype=np.float64).reshape(-1, 3)}
        self.indices = list(indices) if indices is not None else []
        self.material = material

    @property
    def positions(self) -> np.ndarray:
        return self.vertices[VertexChannelNames.POSITION]

    def add_channel(self, name: str, data) -> np.ndarray:
        channel = np.array(data, dtype=np.float64)
        if len(channel) != len(self.positions):
            raise ValueError(f"Channel {name} has {len(channel)} entries but the geometry "
                             f"has {len(self.positions)} vertices")
        self.vertices[name] = channel
        return channel


class MeshContent(NodeContent):
    geometry: List[GeometryContent]

    def __init__(self, name: Optional[str] = None, transform: Optional[np.ndarray] = None):
        super().__init__(name, transform)
        self.geometry = []


class AnimationKeyframe(NamedTuple):
    time: timedelta
    transform: np.ndarray


class AnimationContent:
    """
    Source animation: one channel of keyframes per animated bone, keyed by bone name
    """
    name: str
    duration: timedelta
    channels: Dict[str, List[AnimationKeyframe]]

    def __init__(self, name: str = "", duration: timedelta = timedelta(0)):
        self.name = name
        self.duration = duration
        self.channels = {}


class ModelMeshPartContent(NamedTuple):
    geometry: GeometryContent
    material: Optional[MaterialContent]


class ModelMeshContent(NamedTuple):
    name: str
    source: MeshContent
    parts: List[ModelMeshPartContent]


class ModelContent:
    """
    Runtime model produced by the processor. Tag carries custom data, like the skinning data
    """
    root: NodeContent
    meshes: List[ModelMeshContent]
    tag: object = None

    def __init__(self, root: NodeContent, meshes: List[ModelMeshContent]):
        self.root = root
        self.meshes = meshes
        self.tag = None
