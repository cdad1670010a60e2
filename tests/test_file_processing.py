import pytest

from batch_transcoder.domain.codecs import MediaKind
from batch_transcoder.domain.exceptions import PathNotFoundException
from batch_transcoder.services.file_processing_service import ProcessFiles, guess_media_kind

from conftest import make_files


def test_directory_walk_filters_by_extension_case_insensitively(input_dir):
    make_files(input_dir, "a.mp4", "sub/B.MKV", "sub/deeper/c.webm", "notes.txt", "song.flac")
    found = [p.relative_to(input_dir).as_posix() for p in ProcessFiles.for_kind(input_dir, MediaKind.VIDEO)]
    assert found == ["a.mp4", "sub/B.MKV", "sub/deeper/c.webm"]


def test_single_file_is_yielded_regardless_of_extension(input_dir):
    (path,) = make_files(input_dir, "notes.txt")
    assert list(ProcessFiles.for_kind(path, MediaKind.VIDEO)) == [path]


def test_discovery_can_be_restarted(input_dir):
    make_files(input_dir, "a.mp3")
    files = ProcessFiles.for_kind(input_dir, MediaKind.AUDIO)
    assert list(files) == list(files)


def test_missing_input_raises(tmp_path):
    with pytest.raises(PathNotFoundException):
        ProcessFiles.for_kind(tmp_path / "missing", MediaKind.VIDEO)


def test_m4a_is_audio_only(input_dir):
    make_files(input_dir, "voice.m4a")
    assert list(ProcessFiles.for_kind(input_dir, MediaKind.VIDEO)) == []
    assert len(list(ProcessFiles.for_kind(input_dir, MediaKind.AUDIO))) == 1


def test_guess_media_kind(input_dir):
    video, audio, image, other = make_files(input_dir, "a.MOV", "b.m4a", "c.heic", "d.txt")
    assert guess_media_kind(video) is MediaKind.VIDEO
    assert guess_media_kind(audio) is MediaKind.AUDIO
    assert guess_media_kind(image) is MediaKind.IMAGE
    assert guess_media_kind(other) is None
    assert guess_media_kind(input_dir) is None
