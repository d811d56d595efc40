"""YouTube video ID resolution and audio download using yt-dlp."""

import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import yt_dlp
from tqdm import tqdm

from yt2md.config import Config
from yt2md.errors import DownloadError, InvalidIdentifierError
from yt2md.writers.json_writer import write_metadata


# Tried in order; the first match wins
VIDEO_ID_PATTERNS = [
    re.compile(r'(?:youtube\.com\/watch\?v=|youtu\.be\/|youtube\.com\/embed\/)([^&\n?#]+)'),
    re.compile(r'^([a-zA-Z0-9_-]{11})$'),
]

# yt-dlp messages that are noise for a single audio download
NOISY_MESSAGES = (
    'nsig extraction failed',
    'Some web client https formats have been skipped',
    'Some formats may be missing',
    'Falling back to generic n function search',
)

ytdlp_logger = logging.getLogger("yt2md.yt_dlp")


def extract_video_id(value: str) -> str:
    """Extract video ID from various YouTube URL formats or a bare ID."""
    value = (value or '').strip()
    if value:
        for pattern in VIDEO_ID_PATTERNS:
            match = pattern.search(value)
            if match:
                return match.group(1)

    raise InvalidIdentifierError(f"Invalid YouTube URL format: {value!r}")


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def get_output_dir(video_id: str, out_dir: Optional[Path] = None) -> Path:
    """Directory holding every artifact for a video."""
    return Path(out_dir or Config.OUT_DIR) / video_id


class _MessageFilter(logging.Filter):
    """Drops records containing any of the given fragments and keeps them for inspection."""

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = tuple(patterns)
        self.suppressed: list[str] = []

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if any(p in message for p in self.patterns):
            self.suppressed.append(message)
            return False
        return True


@contextmanager
def quiet_logger(logger: logging.Logger, patterns: Iterable[str] = NOISY_MESSAGES) -> Iterator[_MessageFilter]:
    """Suppress matching records on `logger` for the duration of the block."""
    message_filter = _MessageFilter(patterns)
    logger.addFilter(message_filter)
    try:
        yield message_filter
    finally:
        logger.removeFilter(message_filter)


def download_audio(value: str, out_dir: Optional[Path] = None) -> Tuple[Path, dict]:
    """
    Download the best audio stream for a video.

    Args:
        value: YouTube URL or bare video ID
        out_dir: Output root (defaults to Config.OUT_DIR)

    Returns:
        Tuple of (audio_path, metadata_dict)
    """
    video_id = extract_video_id(value)
    url = watch_url(video_id)
    output_dir = get_output_dir(video_id, out_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"📹 Downloading audio for: {video_id}")
    print(f"🔗 URL: {url}")

    pbar = None

    def progress_hook(d):
        """Mirror yt-dlp byte progress onto a tqdm bar."""
        nonlocal pbar
        if d.get('status') == 'downloading':
            if pbar is None:
                total = d.get('total_bytes') or d.get('total_bytes_estimate')
                pbar = tqdm(total=total, unit='B', unit_scale=True, desc="Downloading", ncols=80, leave=False)
            pbar.n = d.get('downloaded_bytes') or 0
            pbar.refresh()
        elif d.get('status') == 'finished' and pbar is not None:
            pbar.close()

    ydl_opts = {
        'format': 'bestaudio/best',
        'outtmpl': str(output_dir / 'audio.%(ext)s'),
        'quiet': True,
        'noprogress': True,
        'noplaylist': True,
        'logger': ytdlp_logger,
        'progress_hooks': [progress_hook],
        # Retry options for better reliability
        'retries': 10,
        'fragment_retries': 10,
    }

    try:
        with quiet_logger(ytdlp_logger), yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=True)
            audio_path = Path(ydl.prepare_filename(info))
    except yt_dlp.utils.DownloadError as e:
        raise DownloadError(f"Download failed: {e}") from e
    finally:
        if pbar is not None:
            pbar.close()

    if not audio_path.exists():
        raise DownloadError("Audio file was not downloaded successfully")

    metadata = {
        'video_id': video_id,
        'url': url,
        'downloaded_at': datetime.now(timezone.utc).isoformat(),
        'file_size_bytes': audio_path.stat().st_size,
    }
    write_metadata(metadata, output_dir / "metadata.json")

    print(f"✓ Audio downloaded: {audio_path} ({metadata['file_size_bytes'] / (1024 * 1024):.2f} MB)")
    return audio_path, metadata
