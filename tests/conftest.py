from types import SimpleNamespace

import pytest

from yt2md.config import Config


LONG_MARKDOWN = "# Title\n\n## Section [0:00]\n\n" + "Useful sentence about the topic. " * 10


class FakeTranscript:
    def __init__(self, snippets):
        self.snippets = snippets

    def fetch(self):
        return self.snippets


class FakeCaptionApi:
    """Stands in for YouTubeTranscriptApi; `by_language` maps code -> snippets or exception."""

    def __init__(self, by_language=None, listed=None):
        self.by_language = by_language or {}
        self.listed = listed or []
        self.calls = []

    def fetch(self, video_id, languages):
        language = languages[0]
        self.calls.append(language)
        result = self.by_language.get(language, RuntimeError(f"No transcript for {language}"))
        if isinstance(result, Exception):
            raise result
        return result

    def list(self, video_id):
        self.calls.append(None)
        return [FakeTranscript(s) for s in self.listed]


class FakeCompletions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def completion(*contents):
    return SimpleNamespace(choices=[
        SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents
    ])


def snippets(*items):
    """(text, start_seconds, duration_seconds) tuples -> snippet objects."""
    return [SimpleNamespace(text=t, start=s, duration=d) for t, s, d in items]


@pytest.fixture
def fake_llm():
    def build(*outcomes):
        return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(outcomes)))
    return build


@pytest.fixture
def caption_api():
    return FakeCaptionApi


@pytest.fixture
def out_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "OUT_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def english_snippets():
    return snippets(
        ("Welcome back to the channel, today we look at", 0.0, 2.5),
        ("how Python generators work under the hood.", 2.5, 3.0),
    )


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def make_snippets():
    return snippets


@pytest.fixture
def long_markdown():
    return LONG_MARKDOWN
