import asyncio

from batch_transcoder.config.audio import OPUS_LAYOUT_FILTER
from batch_transcoder.domain.codecs import AudioCodec, EncoderPreset
from batch_transcoder.domain.job import EncodingJob
from batch_transcoder.services.audio_encoder import AudioEncoder

from conftest import FakeProbe, make_files


def _encoder(input_root, output_root, probe, engine, **job_kwargs):
    return AudioEncoder(EncodingJob(input_root, output_root, **job_kwargs), probe=probe, engine=engine)


def test_surround_opus_gets_boost_and_layout_filter(input_dir, output_dir, engine):
    make_files(input_dir, "album/track.flac", "album/cover.jpg")
    probe = FakeProbe(channels=6)

    asyncio.run(_encoder(input_dir, output_dir, probe, engine, audio_codec=AudioCodec.OPUS).encode())

    (call,) = engine.calls
    assert call[1] == str(output_dir / "album" / "track.opus")
    assert call[2] == ["-c:a", "libopus", "-b:a", "192000", "-af", OPUS_LAYOUT_FILTER, "-vn"]


def test_extension_follows_codec(input_dir, output_dir, probe, engine):
    make_files(input_dir, "a.wav", "b.m4a")

    asyncio.run(_encoder(input_dir, output_dir, probe, engine, audio_codec=AudioCodec.AAC,
                         preset=EncoderPreset.QUALITY).encode())

    assert sorted(engine.outputs()) == [str(output_dir / "a.aac"), str(output_dir / "b.aac")]
    assert all(flags[flags.index("-b:a") + 1] == "128000" for _, _, flags in engine.calls)


def test_copy_keeps_extension_and_needs_force(input_dir, output_dir, probe, engine):
    make_files(input_dir, "a.mp3")

    asyncio.run(_encoder(input_dir, output_dir, probe, engine).encode())
    assert engine.calls == []

    asyncio.run(_encoder(input_dir, output_dir, probe, engine, force=True).encode())
    (call,) = engine.calls
    assert call[1] == str(output_dir / "a.mp3")
    assert call[2] == ["-c:a", "copy"]
    assert probe.calls == []
