"""Google Cloud Speech-to-Text v2 batch transcription over REST."""

import base64
import json
import mimetypes
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import httpx

from yt2md.auth import get_access_token
from yt2md.config import Config
from yt2md.errors import (
    OperationCancelledError,
    OperationTimeoutError,
    UnparseableResponseError,
    UpstreamServiceError,
)
from yt2md.models import SpeechSegment, SpeechTranscript


SPEECH_API = "https://speech.googleapis.com/v2"
STORAGE_API = "https://storage.googleapis.com/storage/v1"
STORAGE_UPLOAD_API = "https://storage.googleapis.com/upload/storage/v1"

# The inline recognize endpoint rejects larger payloads
INLINE_LIMIT_BYTES = 10 * 1024 * 1024
HEARTBEAT_EVERY = 4

RECOGNITION_CONFIG = {
    'autoDecodingConfig': {},
    'languageCodes': ['en-US'],
    'model': 'long',
    'features': {
        'enableAutomaticPunctuation': True,
    },
}


def uses_inline_upload(size_bytes: int) -> bool:
    return size_bytes <= INLINE_LIMIT_BYTES


class SpeechClient:
    """Thin REST client for Speech-to-Text v2 and Cloud Storage."""

    def __init__(self, project_id: str, access_token: str, http: Optional[httpx.Client] = None):
        self.project_id = project_id
        self.http = http or httpx.Client(timeout=300.0)
        self.http.headers['Authorization'] = f"Bearer {access_token}"

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "SpeechClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def bucket_name(self) -> str:
        return f"{self.project_id}-speech-transcripts"

    @property
    def recognizer(self) -> str:
        return f"{SPEECH_API}/projects/{self.project_id}/locations/global/recognizers/_"

    def _request(self, method: str, url: str, allow: tuple = (), **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamServiceError(f"{method} {url} failed: {e}") from e
        if response.is_error and response.status_code not in allow:
            raise UpstreamServiceError(
                f"{method} {url} failed: {response.status_code} {response.reason_phrase}\n{response.text}",
                status_code=response.status_code,
            )
        return response

    def ensure_bucket(self) -> None:
        """Create the transcripts bucket if it does not exist yet."""
        response = self._request('GET', f"{STORAGE_API}/b/{self.bucket_name}", allow=(404,))
        if response.status_code != 404:
            return

        print(f"📦 Creating bucket: {self.bucket_name}")
        self._request(
            'POST',
            f"{STORAGE_API}/b",
            params={'project': self.project_id},
            json={'name': self.bucket_name, 'location': 'US', 'storageClass': 'STANDARD'},
        )

    def upload(self, audio_path: Path) -> str:
        """Upload the file to the transcripts bucket and return its gs:// URI."""
        object_name = f"transcripts/{int(time.time() * 1000)}-{audio_path.name}"
        uri = f"gs://{self.bucket_name}/{object_name}"
        print(f"📦 Uploading to GCS: {uri}")

        self.ensure_bucket()
        content_type = mimetypes.guess_type(audio_path.name)[0] or 'audio/mpeg'
        self._request(
            'POST',
            f"{STORAGE_UPLOAD_API}/b/{self.bucket_name}/o",
            params={'uploadType': 'media', 'name': object_name},
            headers={'Content-Type': content_type},
            content=audio_path.read_bytes(),
        )
        print("✓ Uploaded to GCS")
        return uri

    def recognize_inline(self, audio_path: Path) -> dict:
        content = base64.b64encode(audio_path.read_bytes()).decode('ascii')
        response = self._request(
            'POST',
            f"{self.recognizer}:recognize",
            json={'config': RECOGNITION_CONFIG, 'content': content},
        )
        return response.json()

    def submit_batch(self, uri: str) -> str:
        """Start a batch recognition job and return the operation name."""
        response = self._request(
            'POST',
            f"{self.recognizer}:batchRecognize",
            json={
                'config': RECOGNITION_CONFIG,
                'files': [{'uri': uri}],
                'recognitionOutputConfig': {'inlineResponseConfig': {}},
            },
        )
        return response.json()['name']

    def get_operation(self, name: str) -> dict:
        return self._request('GET', f"{SPEECH_API}/{name}").json()


def _dump(data, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def wait_for_operation(
    client: SpeechClient,
    name: str,
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    debug_dir: Optional[Path] = None,
    sleep: Optional[Callable[[float], None]] = None,
    clock: Callable[[], float] = time.monotonic,
) -> dict:
    """
    Poll a long-running operation until it reports done.

    Args:
        poll_interval: Seconds between polls (Config.POLL_INTERVAL)
        timeout: Deadline in seconds, 0 for none (Config.OPERATION_TIMEOUT)
        cancel: Event that aborts the wait when set
        debug_dir: Where the finished operation is saved as debug-operation.json
        sleep: Wait function; defaults to waiting on `cancel`

    Raises:
        OperationTimeoutError, OperationCancelledError, UpstreamServiceError
    """
    poll_interval = Config.POLL_INTERVAL if poll_interval is None else poll_interval
    timeout = Config.OPERATION_TIMEOUT if timeout is None else timeout
    cancel = cancel or threading.Event()
    sleep = sleep or cancel.wait
    deadline = clock() + timeout if timeout else None

    print(f"🔄 Operation started: {name}")
    print("⏳ Waiting for batch operation to complete...")

    polls = 0
    while True:
        sleep(poll_interval)
        if cancel.is_set():
            raise OperationCancelledError(f"Cancelled while waiting for {name}")
        polls += 1

        if polls % HEARTBEAT_EVERY == 0:
            print(f"💓 Polling... ({polls * poll_interval / 60:.1f} min elapsed)")

        operation = client.get_operation(name)
        if operation.get('done'):
            if debug_dir is not None:
                _dump(operation, debug_dir / "debug-operation.json")
            if operation.get('error'):
                raise UpstreamServiceError(f"Batch recognition failed: {json.dumps(operation['error'])}")
            print("✓ Batch operation complete!")
            return operation

        if deadline is not None and clock() >= deadline:
            raise OperationTimeoutError(
                f"Operation {name} did not complete within {timeout:.0f} seconds"
            )


def operation_payload(operation: dict) -> dict:
    return operation.get('response') or operation.get('result') or operation


def _keyed(uri):
    return lambda results: results.get(uri)


def _first(results):
    return next(iter(results.values()), None)


def _direct(file_result):
    return (file_result.get('transcript') or {}).get('results')


def _inline(file_result):
    return ((file_result.get('inlineResult') or {}).get('transcript') or {}).get('results')


def extract_batch_results(payload: dict, uri: str, debug_dir: Optional[Path] = None) -> list:
    """
    Locate the per-result list inside a batch response.

    Known shapes are tried in order; when none applies the raw payload is
    saved to debug-api-response.json and UnparseableResponseError raised.
    """
    results = payload.get('results') if isinstance(payload, dict) else None
    if isinstance(results, dict):
        for select in (_keyed(uri), _first):
            file_result = select(results)
            if not isinstance(file_result, dict):
                continue
            for extract in (_direct, _inline):
                found = extract(file_result)
                if found is not None:
                    return found

    debug_path = _dump(payload, Path(debug_dir or Config.OUT_DIR) / "debug-api-response.json")
    raise UnparseableResponseError(
        f"Could not parse batch response. Saved to {debug_path}", debug_path=debug_path
    )


def parse_offset(value) -> float:
    """Parse "9.250s" or {"seconds": ..., "nanos": ...} into float seconds."""
    if not value:
        return 0.0
    if isinstance(value, str):
        return float(value.rstrip('s') or 0)
    return float(value.get('seconds', 0) or 0) + float(value.get('nanos', 0) or 0) / 1e9


def build_segments(results: list) -> tuple[list[SpeechSegment], str]:
    """
    Turn recognizer results into a gapless segment timeline.

    Each segment starts where the previous one ended; results without
    alternatives are skipped.
    """
    segments = []
    texts = []
    last_end = 0.0

    for result in results:
        alternatives = result.get('alternatives') or []
        if not alternatives:
            continue
        alternative = alternatives[0]

        text = alternative.get('transcript', '')
        end = parse_offset(result.get('resultEndOffset'))
        segments.append(SpeechSegment(
            text=text,
            start=last_end,
            end=end,
            confidence=alternative.get('confidence', 0.0),
        ))
        texts.append(text)
        last_end = end

    return segments, ' '.join(texts).strip()


def format_duration(seconds: float) -> str:
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}h {m}m {s}s"
    return f"{m}m {s}s"


def transcribe_audio_file(
    audio_path: Path,
    client: Optional[SpeechClient] = None,
    cancel: Optional[threading.Event] = None,
    **wait_options
) -> SpeechTranscript:
    """
    Transcribe a local audio file.

    Files up to INLINE_LIMIT_BYTES are sent inline; larger files are uploaded
    to Cloud Storage and recognised with a batch operation. Without a client,
    one is built from Config after an OAuth sign-in and closed afterwards; a
    caller-supplied client is left open.
    """
    audio_path = Path(audio_path)
    if client is not None:
        return _transcribe(audio_path, client, cancel, wait_options)

    Config.validate_speech()
    with SpeechClient(Config.GOOGLE_CLOUD_PROJECT, get_access_token()) as client:
        return _transcribe(audio_path, client, cancel, wait_options)


def _transcribe(
    audio_path: Path,
    client: SpeechClient,
    cancel: Optional[threading.Event],
    wait_options: dict
) -> SpeechTranscript:
    debug_dir = audio_path.parent
    print(f"🎙️  Transcribing: {audio_path}")

    size_bytes = audio_path.stat().st_size
    print(f"📊 File size: {size_bytes / (1024 * 1024):.2f} MB")

    if uses_inline_upload(size_bytes):
        print("✓ File size OK for direct upload")
        results = client.recognize_inline(audio_path).get('results') or []
    else:
        print("📦 File too large for inline upload, using GCS...")
        uri = client.upload(audio_path)
        name = client.submit_batch(uri)
        operation = wait_for_operation(client, name, cancel=cancel, debug_dir=debug_dir, **wait_options)
        results = extract_batch_results(operation_payload(operation), uri, debug_dir)

    segments, full_transcript = build_segments(results)
    transcript = SpeechTranscript(
        audio_file=str(audio_path),
        total_duration=segments[-1].end if segments else 0.0,
        segments=segments,
        full_transcript=full_transcript,
        transcribed_at=datetime.now(timezone.utc).isoformat(),
    )

    print(f"✓ Transcribed {len(segments)} segments")
    print(f"⏱️  Duration: {format_duration(transcript.total_duration)}")
    print(f"📊 Average confidence: {transcript.average_confidence * 100:.1f}%")
    return transcript
