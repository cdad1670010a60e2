from datetime import timedelta
from pathlib import Path

from batch_transcoder.utils.format_utils import (
    contains_any_extensions,
    format_timedelta,
    resolve_target_path,
    with_name_suffix,
)


def test_target_path_replicates_nested_structure():
    target = resolve_target_path(Path("/in/a/b/f.mp4"), Path("/in"), Path("/out"), ".mkv")
    assert target == Path("/out/a/b/f.mkv")


def test_target_path_for_file_at_root():
    target = resolve_target_path(Path("/in/f.mp4"), Path("/in"), Path("/out"), ".mkv")
    assert target == Path("/out/f.mkv")


def test_target_path_for_single_file_input_keeps_name():
    target = resolve_target_path(Path("/in/f.mp4"), Path("/in/f.mp4"), Path("/out"), ".mkv")
    assert target == Path("/out/f.mkv")


def test_target_path_with_named_output_file():
    target = resolve_target_path(Path("/in/f.mp4"), Path("/in/f.mp4"), Path("/out/x.mp4"), ".mkv")
    assert target == Path("/out/x.mkv")


def test_with_name_suffix():
    assert with_name_suffix(Path("/out/clip.mp4"), ".silent") == Path("/out/clip.silent.mp4")


def test_contains_any_extensions_is_case_insensitive():
    assert contains_any_extensions(Path("A.MP4"), [".mp4"])
    assert contains_any_extensions(Path("a.mp4"), ["MP4"])
    assert not contains_any_extensions(Path("a.mp4"), [])
    assert not contains_any_extensions(Path("a.txt"), [".mp4"])


def test_format_timedelta():
    assert format_timedelta(timedelta(hours=1, minutes=2, seconds=3)) == "01:02:03"
    assert format_timedelta("not a timedelta") == "00:00:00"
