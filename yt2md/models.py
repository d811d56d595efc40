"""Data models for captions, transcripts and speech segments."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CaptionSegment:
    """A raw caption snippet as supplied by the caption service."""
    text: str
    offset_ms: Optional[int]    # Start time in milliseconds
    duration_ms: Optional[int]  # Duration in milliseconds
    
    @classmethod
    def from_raw(cls, item: dict) -> "CaptionSegment":
        """Build from a `{text, offset, duration}` mapping; missing timings stay None."""
        return cls(
            text=item.get('text') or '',
            offset_ms=item.get('offset'),
            duration_ms=item.get('duration'),
        )


@dataclass
class NormalizedSegment:
    """A caption snippet with timing in seconds."""
    text: str
    timestamp: float  # Start time in seconds
    duration: float   # Duration in seconds


@dataclass
class TranscriptDocument:
    """Assembled transcript handed to the formatter."""
    video_id: str
    url: str
    total_duration: float
    segment_count: int
    text: str
    timestamped: bool = True


@dataclass
class SpeechSegment:
    """A recognised span of speech. `start` is the previous segment's `end`."""
    text: str
    start: float
    end: float
    confidence: float = 0.0


@dataclass
class SpeechTranscript:
    """Result of transcribing one audio file."""
    audio_file: str
    total_duration: float
    full_transcript: str
    transcribed_at: str
    segments: list[SpeechSegment] = field(default_factory=list)
    
    @property
    def average_confidence(self) -> float:
        if not self.segments:
            return 0.0
        return sum(s.confidence for s in self.segments) / len(self.segments)
