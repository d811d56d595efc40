"""Writer for JSON artifacts."""

import json
from dataclasses import asdict
from pathlib import Path
from yt2md.models import SpeechTranscript


def write_metadata(metadata: dict, output_path: Path) -> None:
    """Write download metadata to JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(metadata, f, indent=2, ensure_ascii=False)


def transcript_json_path(audio_path: Path) -> Path:
    """`audio.mp3` -> `audio-transcript.json` next to it."""
    return audio_path.with_name(f"{audio_path.stem}-transcript.json")


def write_speech_transcript(transcript: SpeechTranscript, output_path: Path) -> None:
    """Write a speech transcript to JSON file."""
    data = {
        'audio_file': transcript.audio_file,
        'total_duration': transcript.total_duration,
        'segments': [asdict(segment) for segment in transcript.segments],
        'full_transcript': transcript.full_transcript,
        'transcribed_at': transcript.transcribed_at,
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
