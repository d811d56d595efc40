"""Writer for per-video artifacts such as transcript.md."""

from pathlib import Path
from typing import Optional, Union

from yt2md.config import Config


def artifact_path(video_id: str, name: str, root: Optional[Path] = None) -> Path:
    """Deterministic location: {root}/{video_id}/{name}."""
    return Path(root or Config.OUT_DIR) / video_id / name


def write_artifact(
    video_id: str,
    name: str,
    content: Union[str, bytes],
    root: Optional[Path] = None
) -> Path:
    """
    Write content verbatim, creating directories and overwriting any existing file.

    Strings are encoded as UTF-8 without a BOM; no newline translation is applied.
    """
    output_path = artifact_path(video_id, name, root)
    return write_file(output_path, content)


def write_file(output_path: Path, content: Union[str, bytes]) -> Path:
    data = content.encode('utf-8') if isinstance(content, str) else content
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'wb') as f:
        f.write(data)
    return output_path


def write_markdown(video_id: str, markdown: str, root: Optional[Path] = None) -> Path:
    """Write formatted markdown to {root}/{video_id}/transcript.md."""
    return write_artifact(video_id, "transcript.md", markdown, root)
