"""Caption retrieval using youtube-transcript-api with language fallback."""

from typing import Optional, Sequence

from youtube_transcript_api import YouTubeTranscriptApi

from yt2md.errors import MalformedSegmentError, NoCaptionsAvailableError
from yt2md.models import CaptionSegment
from yt2md.normalizer import normalize_segments


# None means "let the service pick" (first listed track)
CAPTION_LANGUAGES: tuple[Optional[str], ...] = ('en', 'en-US', 'en-GB', None)
MIN_CAPTION_CHARS = 50


def _to_ms(seconds) -> Optional[int]:
    return None if seconds is None else round(seconds * 1000)


def _to_segments(fetched) -> list[CaptionSegment]:
    """Convert fetched snippets (seconds) into CaptionSegments (milliseconds)."""
    return [
        CaptionSegment.from_raw({
            'text': getattr(snippet, 'text', None),
            'offset': _to_ms(getattr(snippet, 'start', None)),
            'duration': _to_ms(getattr(snippet, 'duration', None)),
        })
        for snippet in fetched
    ]


def _fetch_language(api, video_id: str, language: Optional[str]):
    if language:
        return api.fetch(video_id, languages=[language])

    for transcript in api.list(video_id):
        return transcript.fetch()
    raise NoCaptionsAvailableError("No caption tracks listed for this video")


def joined_text(segments: Sequence[CaptionSegment]) -> str:
    return ' '.join(segment.text for segment in segments)


def fetch_captions(
    video_id: str,
    languages: Sequence[Optional[str]] = CAPTION_LANGUAGES,
    api=None
) -> list[CaptionSegment]:
    """
    Fetch caption segments, trying each language in order.

    A candidate is accepted once it yields segments whose space-joined text is
    longer than MIN_CAPTION_CHARS. Any other failure moves on to the next
    candidate.

    Raises:
        MalformedSegmentError: a fetched snippet lacks its start or duration;
            the remaining candidates are not tried.
        NoCaptionsAvailableError: every candidate failed; the message carries
            the last candidate's error.
    """
    api = api or YouTubeTranscriptApi()
    last_error: Optional[Exception] = None

    for language in languages:
        label = language or 'default'
        print(f"[{video_id}] Trying language: {label}")
        try:
            segments = _to_segments(_fetch_language(api, video_id, language))
            if not segments:
                raise NoCaptionsAvailableError("Transcript is empty")
            normalize_segments(segments)

            text = joined_text(segments)
            if len(text.strip()) < MIN_CAPTION_CHARS:
                raise NoCaptionsAvailableError("Transcript is too short")

            print(
                f"✓ [{video_id}] Fetched transcript with language: {label} "
                f"({len(segments)} segments, {len(text)} characters)"
            )
            return segments

        except MalformedSegmentError:
            raise
        except Exception as e:
            last_error = e
            print(f"⚠ [{video_id}] Failed with language {label}: {e}")

    raise NoCaptionsAvailableError(
        "Failed to fetch transcript. The video may not have captions available. "
        f"Last error: {last_error or 'Unknown error'}"
    )
