import json
import logging

import pytest

from yt2md import downloader
from yt2md.downloader import extract_video_id, quiet_logger
from yt2md.errors import DownloadError, InvalidIdentifierError


VIDEO_ID = "dQw4w9WgXcQ"


class TestExtractVideoId:
    @pytest.mark.parametrize("value", [
        f"https://www.youtube.com/watch?v={VIDEO_ID}",
        f"https://www.youtube.com/watch?v={VIDEO_ID}&t=42s",
        f"https://youtu.be/{VIDEO_ID}",
        f"https://youtu.be/{VIDEO_ID}?si=abc",
        f"https://www.youtube.com/embed/{VIDEO_ID}",
        VIDEO_ID,
        f"  {VIDEO_ID}\n",
    ])
    def test_all_forms_resolve_to_same_id(self, value):
        assert extract_video_id(value) == VIDEO_ID

    @pytest.mark.parametrize("value", [
        "",
        None,
        "not a url",
        "https://example.com/watch",
        "dQw4w9WgXc",     # 10 characters
        "dQw4w9WgXcQQ",   # 12 characters
    ])
    def test_malformed_input_rejected(self, value):
        with pytest.raises(InvalidIdentifierError):
            extract_video_id(value)

    def test_invalid_identifier_is_value_error(self):
        with pytest.raises(ValueError):
            extract_video_id("nope")


class TestQuietLogger:
    def test_suppresses_matching_records(self, caplog):
        logger = logging.getLogger("yt2md.test.quiet")
        with caplog.at_level(logging.WARNING, logger=logger.name):
            with quiet_logger(logger, ["noisy"]) as captured:
                logger.warning("noisy parser message")
                logger.warning("real problem")

        assert [r.getMessage() for r in caplog.records] == ["real problem"]
        assert captured.suppressed == ["noisy parser message"]

    def test_filter_removed_after_failure(self):
        logger = logging.getLogger("yt2md.test.quiet.failure")
        with pytest.raises(RuntimeError):
            with quiet_logger(logger, ["noisy"]):
                assert len(logger.filters) == 1
                raise RuntimeError("boom")
        assert logger.filters == []


class FakeYoutubeDL:
    """Writes a fake audio file instead of talking to YouTube."""

    error = None

    def __init__(self, opts):
        self.opts = opts

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def extract_info(self, url, download):
        if self.error:
            raise self.error
        path = self.opts['outtmpl'].replace('%(ext)s', 'webm')
        with open(path, 'wb') as f:
            f.write(b"\x00" * 2048)
        for hook in self.opts['progress_hooks']:
            hook({'status': 'downloading', 'downloaded_bytes': 2048, 'total_bytes': 2048})
            hook({'status': 'finished', 'filename': path})
        return {'ext': 'webm', 'path': path}

    def prepare_filename(self, info):
        return info['path']


class TestDownloadAudio:
    def test_writes_audio_and_metadata(self, out_dir, monkeypatch):
        monkeypatch.setattr(downloader.yt_dlp, "YoutubeDL", FakeYoutubeDL)

        audio_path, metadata = downloader.download_audio(f"https://youtu.be/{VIDEO_ID}")

        assert audio_path == out_dir / VIDEO_ID / "audio.webm"
        saved = json.loads((out_dir / VIDEO_ID / "metadata.json").read_text(encoding="utf-8"))
        assert saved == metadata
        assert saved["video_id"] == VIDEO_ID
        assert saved["url"] == f"https://www.youtube.com/watch?v={VIDEO_ID}"
        assert saved["file_size_bytes"] == 2048
        assert "T" in saved["downloaded_at"]

    def test_download_failure_wrapped(self, out_dir, monkeypatch):
        class Failing(FakeYoutubeDL):
            error = downloader.yt_dlp.utils.DownloadError("HTTP Error 403: Forbidden")

        monkeypatch.setattr(downloader.yt_dlp, "YoutubeDL", Failing)
        with pytest.raises(DownloadError, match="403"):
            downloader.download_audio(VIDEO_ID)
        assert downloader.ytdlp_logger.filters == []
