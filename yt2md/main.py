"""Command-line entry point for YouTube transcript conversion."""

import argparse
import sys
from pathlib import Path
from yt2md.config import Config
from yt2md.downloader import download_audio
from yt2md.errors import TranscriptError
from yt2md.pipeline import markdown_from_url, process_video, transcribe_to_json


def _print_summary(path: Path, markdown: str) -> None:
    print()
    print("=" * 60)
    print("📊 Transcript Statistics:")
    print(f"   - Length: {len(markdown)} characters")
    print(f"   - Estimated words: ~{round(len(markdown) / 5)}")
    print("   - Preview (first 300 chars):")
    print("   " + markdown[:300].replace("\n", "\n   ") + "...")
    print("=" * 60)
    print("✓ Success! Transcript converted to markdown.")
    print(f"Review the markdown: {path}")


def cmd_markdown(args) -> None:
    path, markdown = markdown_from_url(args.url, output_path=args.output)
    _print_summary(path, markdown)


def cmd_download(args) -> None:
    audio_path, _ = download_audio(args.video)
    print(f"✓ Download complete! Next: yt2md transcribe {audio_path}")


def cmd_transcribe(args) -> None:
    transcribe_to_json(Path(args.audio))


def cmd_run(args) -> None:
    path = process_video(args.url)
    print(f"✓ All files saved to: {path.parent}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt2md",
        description="Convert YouTube videos into structured markdown transcripts."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("markdown", help="Format a video's captions as markdown")
    p.add_argument("url", help="YouTube URL or video ID")
    p.add_argument("output", nargs="?", type=Path, help=f"Output file (default: {Config.OUT_DIR}/<id>/transcript.md)")
    p.set_defaults(func=cmd_markdown)

    p = sub.add_parser("download", help="Download a video's audio track")
    p.add_argument("video", help="YouTube URL or video ID")
    p.set_defaults(func=cmd_download)

    p = sub.add_parser("transcribe", help="Transcribe a local audio file with Speech-to-Text")
    p.add_argument("audio", help="Path to the audio file")
    p.set_defaults(func=cmd_transcribe)

    p = sub.add_parser("run", help="Captions to markdown, falling back to audio transcription")
    p.add_argument("url", help="YouTube URL or video ID")
    p.set_defaults(func=cmd_run)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except (TranscriptError, ValueError) as e:
        print(f"\n✗ Failed: {e}", file=sys.stderr)
        hint = getattr(e, 'hint', None)
        if hint:
            print(f"💡 Tip: {hint}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
