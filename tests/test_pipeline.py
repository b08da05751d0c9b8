"""
End-to-end tests for the pipeline with the external programs faked out.
"""

import os
import subprocess

import pytest
from transvi.config_loader import DEFAULT_CONFIG
from transvi.pipeline import SubtitlePipeline
from transvi.transcriber import ChunkTranscriber
from transvi.exceptions import AudioSplitError, WorkerPoolError


class FakeSplitter:
    """Writes `count` empty segments instead of running ffmpeg."""

    def __init__(self, count=3, error=None):
        self.count = count
        self.error = error
        self.calls = 0

    def split(self, video_filepath, output_audio_dir):
        self.calls += 1
        if self.error:
            raise self.error
        for i in range(1, self.count + 1):
            with open(os.path.join(output_audio_dir, f"part{i:03d}.wav"), "wb") as f:
                f.write(b"RIFF")
        return output_audio_dir


def fake_whisper(fail_on=()):
    """subprocess.run stand-in that writes a one-block fragment per segment."""
    def run(cmd, **kwargs):
        input_path, output_path = cmd[1], cmd[-1]
        name = os.path.basename(input_path)
        if name in fail_on:
            return subprocess.CompletedProcess(cmd, 1)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(f"1\n00:00:02,000 --> 00:00:04,000\n{name}\n\n")
        return subprocess.CompletedProcess(cmd, 0)
    return run


@pytest.fixture
def config(tmp_path):
    config = dict(DEFAULT_CONFIG)
    config.update(
        audio_dir=str(tmp_path / "audio_parts"),
        subtitle_dir=str(tmp_path / "subtitles"),
        merged_output=str(tmp_path / "merged_sub_titles.srt"),
        workers=2,
        show_progress=False,
    )
    return config


class TestSubtitlePipeline:

    def test_full_run(self, config, monkeypatch):
        monkeypatch.setattr("transvi.transcriber.subprocess.run", fake_whisper())
        pipeline = SubtitlePipeline(config, FakeSplitter(count=3), ChunkTranscriber())

        output = pipeline.run("video.mp4")

        with open(output, encoding="utf-8") as f:
            content = f.read()
        assert content == (
            "1\n00:00:02,000 --> 00:00:04,000\npart001.wav\n\n"
            "2\n00:00:32,000 --> 00:00:34,000\npart002.wav\n\n"
            "3\n00:01:02,000 --> 00:01:04,000\npart003.wav\n\n"
        )
        assert not os.path.exists(config["audio_dir"])
        assert not os.path.exists(config["subtitle_dir"])

    def test_failed_segment_aborts_before_merge(self, config, monkeypatch):
        monkeypatch.setattr("transvi.transcriber.subprocess.run",
                            fake_whisper(fail_on={"part003.wav"}))
        pipeline = SubtitlePipeline(config, FakeSplitter(count=5), ChunkTranscriber())

        with pytest.raises(WorkerPoolError) as excinfo:
            pipeline.run("video.mp4")

        assert len(excinfo.value.failures) == 1
        assert excinfo.value.failures[0].item.ordinal == 3
        assert not os.path.exists(config["merged_output"])
        # The other four segments were still transcribed
        assert sorted(os.listdir(config["subtitle_dir"])) == [
            "part001.srt", "part002.srt", "part004.srt", "part005.srt"]

    def test_splitter_failure_is_fatal(self, config, monkeypatch):
        monkeypatch.setattr("transvi.transcriber.subprocess.run", fake_whisper())
        splitter = FakeSplitter(error=AudioSplitError("ffmpeg exploded"))
        pipeline = SubtitlePipeline(config, splitter, ChunkTranscriber())

        with pytest.raises(AudioSplitError):
            pipeline.run("video.mp4")
        assert not os.path.exists(config["merged_output"])

    def test_no_segments_gives_empty_track(self, config, monkeypatch):
        monkeypatch.setattr("transvi.transcriber.subprocess.run", fake_whisper())
        pipeline = SubtitlePipeline(config, FakeSplitter(count=0), ChunkTranscriber())

        output = pipeline.run("video.mp4")

        assert os.path.getsize(output) == 0
