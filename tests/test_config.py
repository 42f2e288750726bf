"""Unit tests for configuration defaults and interpreter discovery order."""

from whisper_stitch import config


class TestPythonCandidates:

    def test_defaults(self):
        assert config.python_candidates({}) == ["python3", "python"]

    def test_explicit_interpreter_is_tried_first(self):
        env = {"PYTHON_EXECUTABLE": "/opt/venvs/diarize/bin/python"}
        assert config.python_candidates(env) == [
            "/opt/venvs/diarize/bin/python", "python3", "python",
        ]

    def test_configured_list_blanks_and_duplicates(self):
        env = {
            "PYTHON_EXECUTABLE": "python",
            "DIARIZATION_PYTHON_CANDIDATES": "python3, ,python,/usr/bin/python3,python3",
        }
        assert config.python_candidates(env) == ["python", "python3", "/usr/bin/python3"]

    def test_blank_explicit_interpreter_is_ignored(self):
        env = {"PYTHON_EXECUTABLE": "  ", "DIARIZATION_PYTHON_CANDIDATES": "py"}
        assert config.python_candidates(env) == ["py"]

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("PYTHON_EXECUTABLE", "/custom/python")
        monkeypatch.setenv("DIARIZATION_PYTHON_CANDIDATES", "python3")
        assert config.python_candidates() == ["/custom/python", "python3"]


class TestLimits:

    def test_supported_formats(self):
        assert config.SUPPORTED_OUTPUT_FORMATS == ("txt", "vtt", "srt", "json")

    def test_chunking_ranges(self):
        assert (config.MIN_CHUNK_DURATION_MINUTES, config.MAX_CHUNK_DURATION_MINUTES) == (1, 30)
        assert (config.MIN_OVERLAP_SECONDS, config.MAX_OVERLAP_SECONDS) == (0, 120)
