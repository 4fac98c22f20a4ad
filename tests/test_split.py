"""
Tests for the clip definitions parser and for splitting a master clip into named clips.
"""

from datetime import timedelta

import pytest

from PySkinnedModel.animation import AnimationClip, ClipDefinition, Keyframe
from PySkinnedModel.process.split import (frame_to_time, parse_clip_definitions, read_clip_definitions,
                                          extract_animation, split_animation, ClipDefinitionError)

from conftest import ms, translation


@pytest.fixture
def master_clip():
    """Keyframes for two bones every 250ms over two seconds."""
    keyframes = []
    for t in range(0, 2001, 250):
        keyframes.append(Keyframe(0, ms(t), translation(t, 0, 0)))
        keyframes.append(Keyframe(1, ms(t), translation(0, t, 0)))
    return AnimationClip(ms(2000), keyframes)


class TestFrameToTime:

    @pytest.mark.parametrize("frame, milliseconds", [(0, 0), (1, 41), (2, 83), (23, 958), (24, 1000), (48, 2000)])
    def test_truncates(self, frame, milliseconds):
        assert frame_to_time(frame) == timedelta(milliseconds=milliseconds)

    def test_other_frame_rate(self):
        assert frame_to_time(1, frame_rate=30) == ms(33)


class TestParseClipDefinitions:

    def test_quoted_and_plain_names(self):
        definitions = parse_clip_definitions(['"walk" 0 23', 'run 24 47\n'])

        assert definitions == [ClipDefinition("walk", 0, 23), ClipDefinition("run", 24, 47)]

    def test_blank_lines_skipped(self):
        assert parse_clip_definitions(["", "   ", '"idle" 5 5', "\n"]) == [ClipDefinition("idle", 5, 5)]

    def test_quoted_name_with_spaces(self):
        assert parse_clip_definitions(['"jump start" 1 3']) == [ClipDefinition("jump start", 1, 3)]

    def test_apostrophe_in_name(self):
        definitions = parse_clip_definitions(["Bob's 0 10", '"Bob\'s run" 11 20'])

        assert definitions == [ClipDefinition("Bob's", 0, 10), ClipDefinition("Bob's run", 11, 20)]

    def test_start_after_end_allowed(self):
        assert parse_clip_definitions(['"back" 10 2']) == [ClipDefinition("back", 10, 2)]

    @pytest.mark.parametrize("line, message", [
        ('"walk" 0', "got 2 fields"),
        ('"walk" 0 23 47', "got 4 fields"),
        ('"walk" zero 23', "'zero' is not a frame number"),
        ('"walk" -1 23', "negative"),
        ('"walk 0 23', "Line 2: unclosed quote"),
    ])
    def test_malformed_line(self, line, message):
        with pytest.raises(ClipDefinitionError, match=message):
            parse_clip_definitions(['"idle" 0 1', line])

    def test_read_file(self, tmp_path):
        path = tmp_path / "definitions.txt"
        path.write_text('"walk" 0 23\n\n"run" 24 47\n')

        assert read_clip_definitions(path) == [ClipDefinition("walk", 0, 23), ClipDefinition("run", 24, 47)]

    def test_read_file_as_utf8(self, tmp_path):
        path = tmp_path / "definitions.txt"
        path.write_bytes('"Sprung über" 0 12\n'.encode('utf-8'))

        assert read_clip_definitions(path) == [ClipDefinition("Sprung über", 0, 12)]

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_clip_definitions(tmp_path / "missing.txt")

    def test_read_directory(self, tmp_path):
        with pytest.raises(IsADirectoryError):
            read_clip_definitions(tmp_path)


class TestExtractAnimation:

    def test_walk_range(self, master_clip):
        clip = extract_animation(master_clip, 0, 23)

        assert clip.duration == ms(958)
        assert max(keyframe.time for keyframe in clip.keyframes) <= ms(958)
        assert [keyframe.time for keyframe in clip.keyframes] == [ms(t) for t in (0, 0, 250, 250, 500, 500, 750, 750)]

    def test_rebased_to_start(self, master_clip):
        clip = extract_animation(master_clip, 12, 36)

        # frame 12 = 500ms, frame 36 = 1500ms
        assert clip.duration == ms(1000)
        assert clip.keyframes[0].time == ms(0)
        assert clip.keyframes[0].transform[0, 3] == 500
        assert clip.keyframes[-1].time == ms(1000)

    def test_bone_and_transform_preserved(self, master_clip):
        clip = extract_animation(master_clip, 6, 6)

        # frame 6 = 250ms
        assert clip.duration == timedelta(0)
        assert [keyframe.bone for keyframe in clip.keyframes] == [0, 1]
        assert clip.keyframes[1].transform is master_clip.keyframes[3].transform

    def test_identity_split(self, master_clip):
        clip = extract_animation(master_clip, 0, 48)

        assert clip.duration == master_clip.duration
        assert [(k.bone, k.time) for k in clip.keyframes] == [(k.bone, k.time) for k in master_clip.keyframes]

    def test_empty_range(self, master_clip):
        # 1041ms to 1208ms lies between two keyframes
        clip = extract_animation(master_clip, 25, 29)

        assert len(clip.keyframes) == 0
        assert clip.duration == ms(1208) - ms(1041)

    def test_range_past_end(self, master_clip):
        clip = extract_animation(master_clip, 96, 120)

        assert len(clip.keyframes) == 0
        assert clip.duration == ms(1000)


class TestSplitAnimation:

    def test_overlapping_ranges_independent(self, master_clip):
        clips = split_animation(master_clip, [ClipDefinition("first", 0, 24), ClipDefinition("second", 12, 48)])

        assert clips["first"].duration == ms(1000)
        assert clips["second"].duration == ms(1500)
        assert clips["second"].keyframes[0].time == ms(0)
        assert clips["second"].keyframes[0].transform[0, 3] == 500
        assert len(master_clip.keyframes) == 18

    def test_duplicate_name_last_wins(self, master_clip, caplog):
        clips = split_animation(master_clip, [ClipDefinition("walk", 0, 6), ClipDefinition("walk", 24, 48)])

        assert list(clips) == ["walk"]
        assert clips["walk"].keyframes[0].transform[0, 3] == 1000
        assert "defined more than once" in caplog.text

    def test_no_definitions(self, master_clip):
        assert split_animation(master_clip, []) == {}
