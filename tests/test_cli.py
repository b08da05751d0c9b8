"""
Tests for the command-line handler and configuration loading.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from transvi.cli import CLIHandler
from transvi.config_loader import ConfigLoader, DEFAULT_CONFIG
from transvi.exceptions import ConfigurationError, WorkerPoolError
from transvi.log_setup import setup_logging


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    # setup_logging writes logs/ into the working directory
    monkeypatch.chdir(tmp_path)
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "video.mp4"
    path.write_bytes(b"")
    return str(path)


class RecordingPipeline:
    instances = []

    def __init__(self, config, audio_splitter, transcriber, error=None):
        self.config = config
        self.transcriber = transcriber
        self.error = error
        RecordingPipeline.instances.append(self)

    def run(self, video_path):
        if self.error:
            raise self.error
        return "merged_sub_titles.srt"


@pytest.fixture
def pipeline_stub(monkeypatch):
    RecordingPipeline.instances = []
    monkeypatch.setattr("transvi.cli.SubtitlePipeline", RecordingPipeline)
    return RecordingPipeline


class TestCLIHandler:

    def test_missing_input_exits_1(self, pipeline_stub):
        assert CLIHandler().run([]) == 1
        assert pipeline_stub.instances == []

    def test_nonexistent_input_exits_1(self, pipeline_stub):
        assert CLIHandler().run(["-input", "nope.mp4"]) == 1

    def test_invalid_workers_exits_1(self, video, pipeline_stub):
        assert CLIHandler().run(["-input", video, "-workers", "0"]) == 1

    def test_non_integer_workers_exits_1(self, video):
        with pytest.raises(SystemExit) as excinfo:
            CLIHandler().run(["-input", video, "-workers", "many"])
        assert excinfo.value.code == 1

    def test_success(self, video, pipeline_stub):
        assert CLIHandler().run(["-input", video, "-workers", "3", "-output", "ignored.mp4"]) == 0
        config = pipeline_stub.instances[0].config
        assert config["workers"] == 3
        assert config["merged_output"] == "merged_sub_titles.srt"

    def test_default_workers(self, video, pipeline_stub):
        assert CLIHandler().run(["--input", video, "--no-progress"]) == 0
        config = pipeline_stub.instances[0].config
        assert config["workers"] == 6
        assert config["show_progress"] is False

    def test_pipeline_failure_exits_1(self, video, monkeypatch):
        def failing(*args, **kwargs):
            return RecordingPipeline(*args, error=WorkerPoolError([object()]), **kwargs)
        monkeypatch.setattr("transvi.cli.SubtitlePipeline", failing)
        assert CLIHandler().run(["-input", video]) == 1

    def test_config_file_model(self, video, tmp_path, pipeline_stub):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("whisper_model: small.en\nworkers: 4\n", encoding="utf-8")
        assert CLIHandler().run(["-input", video, "-config", str(cfg)]) == 0
        instance = pipeline_stub.instances[0]
        assert instance.config["workers"] == 4
        assert instance.transcriber.model_name == "small.en"

    def test_string_show_progress_exits_1(self, video, tmp_path, pipeline_stub):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("show_progress: \"false\"\n", encoding="utf-8")
        assert CLIHandler().run(["-input", video, "-config", str(cfg)]) == 1
        assert pipeline_stub.instances == []

    def test_non_integer_workers_in_config_exits_1(self, video, tmp_path, pipeline_stub):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("workers: many\n", encoding="utf-8")
        assert CLIHandler().run(["-input", video, "-config", str(cfg)]) == 1
        assert pipeline_stub.instances == []

    def test_workers_conversion_error_is_chained(self, video):
        handler = CLIHandler()
        args = handler.parser.parse_args(["-input", video])
        config = dict(DEFAULT_CONFIG, workers="many")
        with pytest.raises(ConfigurationError) as excinfo:
            handler._apply_overrides(args, config)
        assert isinstance(excinfo.value.__cause__, ValueError)

    @pytest.mark.parametrize("output", ["subtitles/out.srt", "audio_parts/nested/out.srt"])
    def test_merged_output_inside_work_dir_exits_1(self, video, tmp_path, pipeline_stub, output):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(f"merged_output: {output}\n", encoding="utf-8")
        assert CLIHandler().run(["-input", video, "-config", str(cfg)]) == 1
        assert pipeline_stub.instances == []

    def test_merged_output_beside_work_dir_allowed(self, video, tmp_path, pipeline_stub):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("merged_output: subtitles_out/out.srt\n", encoding="utf-8")
        assert CLIHandler().run(["-input", video, "-config", str(cfg)]) == 0


class TestConfigLoader:

    def test_defaults_without_file(self):
        assert ConfigLoader().load_config(None) == DEFAULT_CONFIG

    def test_file_overrides_defaults(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("workers: 2\nunknown_key: 1\n", encoding="utf-8")
        config = ConfigLoader().load_config(str(cfg))
        assert config["workers"] == 2
        assert "unknown_key" not in config
        assert config["whisper_model"] == "base.en"

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("", encoding="utf-8")
        assert ConfigLoader().load_config(str(cfg)) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("workers: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(str(cfg))

    def test_root_must_be_mapping(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(str(cfg))


class TestSetupLogging:

    def test_file_records_carry_thread_name(self, tmp_path):
        setup_logging(log_dir=str(tmp_path / "logdir"), log_file="run.log")
        logging.getLogger("transvi.test").info("hello from the test")
        content = (tmp_path / "logdir" / "run.log").read_text(encoding="utf-8")
        assert "[MainThread]" in content
        assert "hello from the test" in content

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_logging(log_dir=str(tmp_path / "a"))
        setup_logging(log_dir=str(tmp_path / "b"))
        handlers = logging.getLogger().handlers
        files = [h.baseFilename for h in handlers if isinstance(h, RotatingFileHandler)]
        assert sum(type(h) is logging.StreamHandler for h in handlers) == 1
        assert files == [str(tmp_path / "b" / "transvi.log")]
