"""Streamlit page for converting YouTube videos into markdown transcripts."""

import streamlit as st
from pathlib import Path

from yt2md.config import Config
from yt2md.service import handle_transcript_request


# Page configuration
st.set_page_config(
    page_title="YouTube Transcript to Markdown",
    page_icon="🎥",
    layout="wide"
)


def load_streamlit_secrets():
    """Load secrets from Streamlit Cloud into Config."""
    try:
        if not st.secrets:
            return
        if 'GOOGLE_API_KEY' in st.secrets:
            Config.GOOGLE_API_KEY = st.secrets['GOOGLE_API_KEY']
        if 'FORMAT_MODEL' in st.secrets:
            Config.FORMAT_MODEL = st.secrets['FORMAT_MODEL']
        if 'OUT_DIR' in st.secrets:
            Config.OUT_DIR = Path(st.secrets['OUT_DIR']).resolve()
    except (FileNotFoundError, KeyError):
        # No secrets file - .env values stay in effect
        pass

load_streamlit_secrets()

# Initialize session state
if 'result' not in st.session_state:
    st.session_state.result = None
if 'error' not in st.session_state:
    st.session_state.error = None

st.title("🎥 YouTube Transcript to Markdown")
st.write(
    "Fetches the video's captions and formats them into a structured markdown "
    "document saved under the output directory."
)

youtube_url = st.text_input(
    "YouTube URL",
    placeholder="https://www.youtube.com/watch?v=...",
)

if st.button("Convert to Markdown", type="primary", disabled=not youtube_url.strip()):
    st.session_state.result = None
    st.session_state.error = None
    with st.spinner("Fetching transcript and formatting with Gemini... this can take a minute."):
        status, body = handle_transcript_request({'url': youtube_url.strip()})
    if status == 200:
        st.session_state.result = body
    else:
        st.session_state.error = body.get('error', 'An error occurred')

if st.session_state.error:
    st.error(st.session_state.error)

result = st.session_state.result
if result:
    st.success("✓ Transcript converted to markdown")
    col1, col2, col3 = st.columns(3)
    col1.metric("Video ID", result['videoId'])
    col2.metric("Characters", result['stats']['markdownLength'])
    col3.metric("Estimated words", result['stats']['estimatedWords'])
    st.write(f"Saved to: `{Config.OUT_DIR / result['outputPath']}`")

    markdown_path = Config.OUT_DIR / result['outputPath']
    if markdown_path.exists():
        markdown = markdown_path.read_text(encoding='utf-8')
        st.download_button(
            "Download transcript.md",
            data=markdown,
            file_name=f"{result['videoId']}-transcript.md",
            mime="text/markdown",
        )
        with st.expander("Preview", expanded=True):
            st.markdown(markdown)
