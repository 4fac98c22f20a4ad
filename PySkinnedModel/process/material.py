from pathlib import Path

from PySkinnedModel.common_types import InvalidContentError
from PySkinnedModel.model import MaterialContent, BasicMaterialContent, EffectMaterialContent, ExternalReference


class UnsupportedMaterialError(InvalidContentError):
    pass


def convert_material(material: MaterialContent, effect_path: str) -> EffectMaterialContent:
    """
    Replaces a basic material with one that renders through the skinning effect
    :param material: source material, has to be a BasicMaterialContent
    :param effect_path: path to the skinning effect, stored as absolute path
    :return: material referencing the effect, with the texture of the source material
    """
    if not isinstance(material, BasicMaterialContent):
        raise UnsupportedMaterialError("SkinnedModelProcessor only supports BasicMaterialContent, "
                                       f"but input mesh uses {type(material).__name__}.")

    effect_material = EffectMaterialContent(material.name,
                                            ExternalReference(str(Path(effect_path).resolve())))

    if material.texture is not None:
        effect_material.textures['Texture'] = material.texture

    return effect_material
