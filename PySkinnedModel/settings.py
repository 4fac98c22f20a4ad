"""
Configuration of the skinned model processor.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

# Maximum number of bone matrices the skinning shader can upload in a single pass.
# The runtime effect has to use the same value.
MAX_BONES = 59

FRAME_RATE = 24


@dataclass
class ProcessorSettings:
    """Settings shared by all processing steps."""
    max_bones: int = MAX_BONES
    frame_rate: int = FRAME_RATE          # Frames per second of the definitions file
    effect_path: str = "SkinnedModel.fx"  # Effect every material is redirected to
    definitions_path: Optional[str] = "definitions.txt"  # None keeps the unsplit animations


@dataclass
class ProcessorContext:
    """Per build state handed to the processor."""
    settings: ProcessorSettings = field(default_factory=ProcessorSettings)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("PySkinnedModel"))
