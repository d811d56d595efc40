"""Pipelines: captions to markdown, and audio to a speech transcript."""

from pathlib import Path
from typing import Optional

from yt2md.captions import fetch_captions
from yt2md.downloader import download_audio, extract_video_id
from yt2md.errors import NoCaptionsAvailableError
from yt2md.formatter import format_document
from yt2md.normalizer import build_document, format_timestamp
from yt2md.speech import SpeechClient, transcribe_audio_file
from yt2md.writers.json_writer import transcript_json_path, write_speech_transcript
from yt2md.writers.markdown_writer import write_file, write_markdown


def markdown_from_url(
    url: str,
    out_dir: Optional[Path] = None,
    output_path: Optional[Path] = None,
    timestamped: bool = True,
    caption_api=None,
    llm_client=None
) -> tuple[Path, str]:
    """
    Fetch captions for a video, format them as markdown and save the result.

    Returns:
        Tuple of (markdown_path, markdown)
    """
    video_id = extract_video_id(url)
    print(f"📹 Video ID: {video_id}")
    print(f"🔗 URL: {url}")

    print("\n📥 Step 1: Downloading transcript from YouTube...")
    segments = fetch_captions(video_id, api=caption_api)

    print("📝 Step 2: Processing transcript segments...")
    document = build_document(video_id, url, segments, timestamped=timestamped)
    print(f"✓ Processed {document.segment_count} segments")
    print(f"⏱️  Total duration: {format_timestamp(document.total_duration)}")

    print("🤖 Step 3: Formatting transcript as markdown...")
    markdown = format_document(document, client=llm_client)

    print("💾 Step 4: Saving markdown transcript...")
    if output_path:
        path = write_file(Path(output_path), markdown)
    else:
        path = write_markdown(video_id, markdown, out_dir)
    print(f"✓ Saved to: {path}")
    return path, markdown


def transcribe_to_json(audio_path: Path, client: Optional[SpeechClient] = None) -> Path:
    """Transcribe a local audio file and write {stem}-transcript.json beside it."""
    audio_path = Path(audio_path)
    transcript = transcribe_audio_file(audio_path, client)
    output_path = transcript_json_path(audio_path)
    write_speech_transcript(transcript, output_path)
    print(f"💾 Saved transcript to: {output_path}")
    return output_path


def process_video(url: str, out_dir: Optional[Path] = None) -> Path:
    """Markdown from captions, falling back to audio transcription when none exist."""
    try:
        path, _ = markdown_from_url(url, out_dir=out_dir)
        return path
    except NoCaptionsAvailableError as e:
        print(f"⚠ {e}")
        print("Falling back to audio transcription...")

    audio_path, _ = download_audio(url, out_dir=out_dir)
    return transcribe_to_json(audio_path)
