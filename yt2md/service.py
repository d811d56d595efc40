"""Framework-independent handler for transcript requests from the web UI."""

from pathlib import Path
from typing import Optional

from yt2md.captions import fetch_captions
from yt2md.config import Config
from yt2md.downloader import extract_video_id
from yt2md.errors import ConfigurationError, InvalidIdentifierError, TranscriptError
from yt2md.formatter import format_document
from yt2md.normalizer import build_document
from yt2md.writers.markdown_writer import write_markdown


def handle_transcript_request(
    payload: dict,
    out_dir: Optional[Path] = None,
    caption_api=None,
    llm_client=None
) -> tuple[int, dict]:
    """
    Turn a `{"url": ...}` request into (status_code, json_body).

    400 for missing or unrecognised URLs, 500 for configuration and
    processing failures, 200 with output path and stats on success.
    """
    url = (payload or {}).get('url')
    if not url:
        return 400, {'error': 'YouTube URL is required'}

    try:
        video_id = extract_video_id(url)
    except InvalidIdentifierError:
        return 400, {'error': 'Invalid YouTube URL format'}

    if llm_client is None:
        try:
            Config.validate_formatter()
        except ConfigurationError as e:
            return 500, {'error': str(e)}

    try:
        print(f"[{video_id}] Step 1/2: Fetching transcript from YouTube...")
        segments = fetch_captions(video_id, api=caption_api)

        print(f"[{video_id}] Step 2/2: Formatting transcript...")
        document = build_document(video_id, url, segments, timestamped=False)
        markdown = format_document(document, client=llm_client)
        write_markdown(video_id, markdown, out_dir)
    except (TranscriptError, OSError) as e:
        print(f"✗ [{video_id}] Error processing YouTube transcript: {e}")
        return 500, {'error': str(e) or 'Failed to process YouTube video'}
    except Exception as e:
        print(f"✗ [{video_id}] Unexpected error processing YouTube transcript: {e!r}")
        return 500, {'error': str(e) or 'Failed to process YouTube video'}

    return 200, {
        'success': True,
        'videoId': video_id,
        'outputPath': f"{video_id}/transcript.md",
        'stats': {
            'markdownLength': len(markdown),
            'estimatedWords': round(len(markdown) / 5),
        },
    }
