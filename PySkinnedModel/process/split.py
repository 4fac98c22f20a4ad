import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Dict, Iterable, List

from PySkinnedModel.animation import AnimationClip, ClipDefinition, Keyframe
from PySkinnedModel.common_types import InvalidContentError
from PySkinnedModel.settings import FRAME_RATE

logger = logging.getLogger(__name__)

# a field is either "double quoted" or runs up to the next whitespace
_TOKEN = re.compile(r'"([^"]*)"|(\S+)')


class ClipDefinitionError(InvalidContentError):
    pass


def frame_to_time(frame_number: int, frame_rate: int = FRAME_RATE) -> timedelta:
    """
    Converts a frame number to a time offset. Partial milliseconds are truncated
    """
    return timedelta(milliseconds=(frame_number * 1000) // frame_rate)


def _parse_frame(text: str, line_number: int) -> int:
    try:
        frame = int(text)
    except ValueError:
        raise ClipDefinitionError(f"Line {line_number}: '{text}' is not a frame number.")
    if frame < 0:
        raise ClipDefinitionError(f"Line {line_number}: frame number {frame} is negative.")
    return frame


def parse_clip_definitions(lines: Iterable[str]) -> List[ClipDefinition]:
    """
    Parses clip definitions, one per line: "<name>" <start frame> <end frame>
    Blank lines are skipped, anything else that doesn't match is an error
    :param lines: text lines of the definitions source
    :return: definitions in source order
    """
    definitions: List[ClipDefinition] = []

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        parts = []
        for match in _TOKEN.finditer(line):
            quoted, plain = match.groups()
            if plain is not None and plain.startswith('"'):
                raise ClipDefinitionError(f"Line {line_number}: unclosed quote in '{line.strip()}'.")
            parts.append(quoted if quoted is not None else plain)

        if len(parts) != 3:
            raise ClipDefinitionError(f"Line {line_number}: expected '\"<name>\" <start frame> <end frame>' "
                                      f"but got {len(parts)} fields.")

        name, start_frame, end_frame = parts
        definitions.append(ClipDefinition(name,
                                          _parse_frame(start_frame, line_number),
                                          _parse_frame(end_frame, line_number)))

    return definitions


def read_clip_definitions(filepath: Path) -> List[ClipDefinition]:
    """
    Reads the clip definitions file at filepath
    """
    filepath = Path(filepath)
    if filepath.is_dir():
        raise IsADirectoryError(filepath)

    if not filepath.exists():
        raise FileNotFoundError(filepath)

    with filepath.open('r', encoding='utf-8') as file_reader:
        logger.info(f"Reading clip definitions from {filepath}")
        return parse_clip_definitions(file_reader)


def extract_animation(root_animation: AnimationClip, start_frame: int, end_frame: int,
                      frame_rate: int = FRAME_RATE) -> AnimationClip:
    """
    Cuts the keyframes between start_frame and end_frame (both inclusive) out of root_animation.
    The keyframes of the new clip are relative to start_frame
    """
    start_time = frame_to_time(start_frame, frame_rate)
    end_time = frame_to_time(end_frame, frame_rate)

    keyframes = [Keyframe(keyframe.bone, keyframe.time - start_time, keyframe.transform)
                 for keyframe in root_animation.keyframes
                 if start_time <= keyframe.time <= end_time]

    return AnimationClip(end_time - start_time, keyframes)


def split_animation(root_animation: AnimationClip, definitions: Iterable[ClipDefinition],
                    frame_rate: int = FRAME_RATE) -> Dict[str, AnimationClip]:
    """
    Splits one long animation into named clips. Ranges may overlap, each clip is cut from
    the timeline of root_animation. A later definition with the same name replaces the earlier one
    :return: clips keyed by definition name
    """
    split_animations: Dict[str, AnimationClip] = {}

    for definition in definitions:
        clip = extract_animation(root_animation, definition.start_frame, definition.end_frame, frame_rate)
        if definition.name in split_animations:
            logger.warning(f"Clip '{definition.name}' is defined more than once, the last definition is used.")
        split_animations[definition.name] = clip
        logger.debug(f"Extracted clip '{definition.name}' with {len(clip)} keyframes")

    return split_animations
