import json
from pathlib import Path

from yt2md.models import SpeechSegment, SpeechTranscript
from yt2md.writers.json_writer import transcript_json_path, write_speech_transcript
from yt2md.writers.markdown_writer import artifact_path, write_artifact, write_markdown


class TestMarkdownWriter:
    def test_round_trip_is_byte_identical(self, tmp_path):
        markdown = "# Título\n\r\nCode:\n```python\nprint('hi')\n```\n\n— done"
        path = write_markdown("abc123def45", markdown, tmp_path)

        assert path == tmp_path / "abc123def45" / "transcript.md"
        assert path.read_bytes() == markdown.encode("utf-8")

    def test_no_bom_or_trailing_newline_added(self, tmp_path):
        path = write_markdown("abc123def45", "text", tmp_path)
        assert path.read_bytes() == b"text"

    def test_overwrites_existing_file(self, tmp_path):
        write_artifact("vid", "transcript.md", "first version, longer", tmp_path)
        path = write_artifact("vid", "transcript.md", "second", tmp_path)
        assert path.read_text(encoding="utf-8") == "second"

    def test_bytes_written_verbatim(self, tmp_path):
        path = write_artifact("vid", "blob.bin", b"\x00\xff", tmp_path)
        assert path.read_bytes() == b"\x00\xff"

    def test_creates_nested_root(self, tmp_path):
        root = tmp_path / "a" / "b"
        path = write_markdown("vid", "x", root)
        assert path.exists()

    def test_default_root_from_config(self, out_dir):
        assert artifact_path("vid", "transcript.md") == out_dir / "vid" / "transcript.md"


class TestJsonWriter:
    def test_transcript_path_replaces_extension(self):
        assert transcript_json_path(Path("youtube/vid/audio.mp3")) == Path("youtube/vid/audio-transcript.json")
        assert transcript_json_path(Path("clip.webm")) == Path("clip-transcript.json")

    def test_speech_transcript_layout(self, tmp_path):
        transcript = SpeechTranscript(
            audio_file="audio.mp3",
            total_duration=7.0,
            full_transcript="Hello there. General Kenobi.",
            transcribed_at="2025-01-01T00:00:00+00:00",
            segments=[
                SpeechSegment("Hello there.", 0.0, 3.5, 0.9),
                SpeechSegment("General Kenobi.", 3.5, 7.0, 0.7),
            ],
        )
        path = tmp_path / "audio-transcript.json"
        write_speech_transcript(transcript, path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["audio_file"] == "audio.mp3"
        assert data["total_duration"] == 7.0
        assert data["segments"][1] == {"text": "General Kenobi.", "start": 3.5, "end": 7.0, "confidence": 0.7}
        assert data["full_transcript"] == "Hello there. General Kenobi."
        assert data["transcribed_at"].startswith("2025-01-01")
