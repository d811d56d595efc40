"""Transcript formatting into structured markdown with an LLM."""

import time
from openai import OpenAI
from openai import APIError, APIStatusError, RateLimitError, APIConnectionError

from yt2md.config import Config
from yt2md.errors import (
    ContentTooLargeError,
    DegenerateResponseError,
    EmptyResponseError,
    UpstreamServiceError,
)
from yt2md.models import TranscriptDocument
from yt2md.normalizer import format_timestamp


MAX_INPUT_CHARS = 200_000
MIN_MARKDOWN_CHARS = 100
CONTINUATION_MARKER = '\n[... transcript continues ...]'

# Upstream error fragments meaning the prompt is over the model's input limit
TOO_LARGE_PHRASES = (
    'token count exceeds',
    'maximum number of tokens',
    'context length',
)

FORMATTING_PROMPT = """You are a content formatter. Convert this YouTube video transcript into a well-structured markdown document.

Video URL: {url}
Video ID: {video_id}
Total Duration: {duration}
Number of segments: {segment_count}

TRANSCRIPT{label}:
{transcript}

Requirements:
1. Create a clear markdown structure:
   - Use # for main title (infer from transcript content)
   - Use ## for major sections/topics (group related segments)
   - Use ### for subtopics
   - Preserve natural flow and meaning

2. Formatting guidelines:
   - Remove redundant timestamp markers, but keep key timestamps [MM:SS] at section breaks when available
   - If code is discussed, format it in code blocks with appropriate language tags
   - Use markdown formatting for emphasis, lists, code, etc.
   - Group related content into logical sections

3. Quality:
   - Remove filler words ("um", "uh") if they don't affect meaning
   - Fix obvious transcription errors
   - Preserve technical terminology and code examples
   - Keep all important technical content

Return ONLY the markdown content, no additional commentary or explanations."""


def truncate_transcript(text: str, limit: int = MAX_INPUT_CHARS) -> str:
    """Keep the first `limit` characters, marking the cut when one happens."""
    if len(text) <= limit:
        return text
    return text[:limit] + CONTINUATION_MARKER


def build_prompt(document: TranscriptDocument) -> str:
    return FORMATTING_PROMPT.format(
        url=document.url,
        video_id=document.video_id,
        duration=format_timestamp(document.total_duration),
        segment_count=document.segment_count,
        label=' (with timestamps)' if document.timestamped else '',
        transcript=truncate_transcript(document.text),
    )


def extract_markdown(response) -> str:
    """
    Return the first non-empty completion, stripped.

    Raises:
        EmptyResponseError: no choice carries text.
        DegenerateResponseError: the text is shorter than MIN_MARKDOWN_CHARS.
    """
    text = next(
        (c.message.content for c in (response.choices or []) if c.message and c.message.content),
        None
    )
    if not text:
        raise EmptyResponseError("No text response from the formatting model")

    markdown = text.strip()
    if len(markdown) < MIN_MARKDOWN_CHARS:
        raise DegenerateResponseError(
            f"Received empty or very short markdown ({len(markdown)} characters)"
        )
    return markdown


def _is_too_large(error: APIError) -> bool:
    message = str(error).lower()
    return any(phrase in message for phrase in TOO_LARGE_PHRASES)


def format_document(document: TranscriptDocument, client=None) -> str:
    """
    Format a transcript document as markdown.

    Args:
        document: Assembled transcript
        client: OpenAI-compatible client (built from Config when omitted)

    Returns:
        Markdown text, at least MIN_MARKDOWN_CHARS long
    """
    if client is None:
        Config.validate_formatter()
        client = OpenAI(
            api_key=Config.GOOGLE_API_KEY,
            base_url=Config.FORMAT_BASE_URL,
            timeout=300.0  # 5 minute timeout
        )

    prompt = build_prompt(document)

    for attempt in range(Config.MAX_RETRIES + 1):
        try:
            if attempt > 0:
                print(f"Formatting transcript (attempt {attempt + 1}/{Config.MAX_RETRIES + 1})...")
            else:
                print(f"Formatting transcript with {Config.FORMAT_MODEL}...")

            started = time.time()
            response = client.chat.completions.create(
                model=Config.FORMAT_MODEL,
                messages=[{"role": "user", "content": prompt}],
                temperature=Config.FORMAT_TEMPERATURE,
                max_tokens=Config.FORMAT_MAX_TOKENS,
            )
            print(f"✓ Received formatted markdown ({time.time() - started:.1f}s)")
            return extract_markdown(response)

        except (RateLimitError, APIConnectionError) as e:
            if attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt
                print(f"⚠ {type(e).__name__}. Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue
            raise UpstreamServiceError(f"Formatting service unavailable: {e}") from e

        except APIError as e:
            if _is_too_large(e):
                raise ContentTooLargeError(f"Video is too long for direct processing: {e}") from e

            status_code = e.status_code if isinstance(e, APIStatusError) else None
            if status_code and 500 <= status_code < 600 and attempt < Config.MAX_RETRIES:
                wait_time = 2 ** attempt
                print(f"⚠ Server error ({status_code}). Waiting {wait_time} seconds before retry...")
                time.sleep(wait_time)
                continue

            raise UpstreamServiceError(f"Formatting API error: {e}", status_code=status_code) from e
