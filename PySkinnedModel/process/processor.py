from pathlib import Path
from typing import Dict, List, Optional

from PySkinnedModel.animation import AnimationClip, ClipDefinition, SkinningData
from PySkinnedModel.common_types import InvalidContentError
from PySkinnedModel.model import (NodeContent, MeshContent, MaterialContent, ModelContent, ModelMeshContent,
                                  ModelMeshPartContent)
from PySkinnedModel.process._common import find_skeleton, iterate_nodes
from PySkinnedModel.process.animation import process_animations
from PySkinnedModel.process.flatten import flatten_skeleton, flatten_transforms
from PySkinnedModel.process.material import convert_material
from PySkinnedModel.process.split import read_clip_definitions, split_animation
from PySkinnedModel.process.validate import validate_mesh
from PySkinnedModel.settings import ProcessorContext


class MissingSkeletonError(InvalidContentError):
    pass


class ModelProcessor:
    """
    Packages the meshes of a scene into a model. Subclasses hook into the material conversion
    """

    def process(self, scene: NodeContent, context: ProcessorContext) -> ModelContent:
        converted: Dict[int, Optional[MaterialContent]] = {}
        meshes: List[ModelMeshContent] = []

        for node in iterate_nodes(scene):
            if not isinstance(node, MeshContent):
                continue

            parts = []
            for geometry in node.geometry:
                material = geometry.material
                if material is not None and id(material) not in converted:
                    converted[id(material)] = self.convert_material(material, context)
                parts.append(ModelMeshPartContent(geometry,
                                                  converted[id(material)] if material is not None else None))
            meshes.append(ModelMeshContent(node.name, node, parts))

        context.logger.info(f"Built model with {len(meshes)} meshes and {len(converted)} materials")
        return ModelContent(scene, meshes)

    def convert_material(self, material: MaterialContent, context: ProcessorContext) -> MaterialContent:
        return material


class SkinnedModelProcessor(ModelProcessor):
    """
    Model processor that adds the skeleton and animation clips as SkinningData to the model tag
    """

    def process(self, scene: NodeContent, context: Optional[ProcessorContext] = None) -> ModelContent:
        """
        Converts the scene to a model with embedded animation data
        :param scene: root of the scene, gets modified while processing
        :param context: settings and logger of the current build
        :return: model whose tag is the SkinningData
        """
        context = context or ProcessorContext()
        settings = context.settings

        validate_mesh(scene, None, context.logger)

        skeleton = find_skeleton(scene)
        if skeleton is None:
            raise MissingSkeletonError("Input skeleton not found.")

        # bake everything outside the skeleton so all geometry shares one coordinate system
        flatten_transforms(scene, skeleton)

        bones = flatten_skeleton(skeleton, settings.max_bones)

        bind_pose = [bone.transform for bone in bones]
        inverse_bind_pose = [bone.inverse_bind_pose for bone in bones]
        skeleton_hierarchy = [bone.parent_index for bone in bones]

        animation_clips = process_animations(skeleton.animations, bones)

        if settings.definitions_path is not None:
            definitions = read_clip_definitions(Path(settings.definitions_path))
            animation_clips = self._split_animations(animation_clips, definitions, settings.frame_rate, context)

        model = super().process(scene, context)

        model.tag = SkinningData(animation_clips, bind_pose, inverse_bind_pose, skeleton_hierarchy)
        return model

    @staticmethod
    def _split_animations(animation_clips: Dict[str, AnimationClip], definitions: List[ClipDefinition],
                          frame_rate: int, context: ProcessorContext) -> Dict[str, AnimationClip]:
        split_clips: Dict[str, AnimationClip] = {}
        for name, clip in animation_clips.items():
            clips = split_animation(clip, definitions, frame_rate)
            overwritten = split_clips.keys() & clips.keys()
            if overwritten:
                context.logger.warning(f"Clips {', '.join(sorted(overwritten))} of animation '{name}' "
                                       "replace clips of the same name from an earlier animation.")
            split_clips.update(clips)
        return split_clips

    def convert_material(self, material: MaterialContent, context: ProcessorContext) -> MaterialContent:
        return convert_material(material, context.settings.effect_path)
