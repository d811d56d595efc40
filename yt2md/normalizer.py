"""Caption segment normalization and transcript assembly."""

from typing import Sequence

from yt2md.errors import MalformedSegmentError
from yt2md.models import CaptionSegment, NormalizedSegment, TranscriptDocument


def format_timestamp(seconds: float) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour up."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def normalize_segments(segments: Sequence[CaptionSegment]) -> list[NormalizedSegment]:
    """
    Convert millisecond caption timings into seconds.

    Raises:
        MalformedSegmentError: a segment lacks its offset or duration.
    """
    normalized = []
    for index, segment in enumerate(segments):
        if segment is None or segment.offset_ms is None or segment.duration_ms is None:
            raise MalformedSegmentError(index, segment)
        normalized.append(NormalizedSegment(
            text=segment.text or '',
            timestamp=segment.offset_ms / 1000,
            duration=segment.duration_ms / 1000,
        ))
    return normalized


def total_duration(segments: Sequence[NormalizedSegment]) -> float:
    """Last segment's start plus its duration; input order is trusted."""
    if not segments:
        return 0.0
    last = segments[-1]
    return last.timestamp + last.duration


def build_document(
    video_id: str,
    url: str,
    segments: Sequence[CaptionSegment],
    timestamped: bool = True
) -> TranscriptDocument:
    """
    Assemble caption segments into a single transcript document.

    With `timestamped`, each segment becomes a `[M:SS] text` line; otherwise
    the segment texts are joined with single spaces.
    """
    normalized = normalize_segments(segments)

    if timestamped:
        text = '\n'.join(f"[{format_timestamp(s.timestamp)}] {s.text}" for s in normalized)
    else:
        text = ' '.join(s.text for s in normalized)

    return TranscriptDocument(
        video_id=video_id,
        url=url,
        total_duration=total_duration(normalized),
        segment_count=len(normalized),
        text=text,
        timestamped=timestamped,
    )
