"""OAuth2 authorization-code flow for the Speech-to-Text path."""

from google_auth_oauthlib.flow import InstalledAppFlow

from yt2md.config import Config
from yt2md.errors import AuthenticationError


SCOPES = [
    'https://www.googleapis.com/auth/cloud-platform',
    'https://www.googleapis.com/auth/cloud-speech',
]


def _client_config() -> dict:
    return {
        'installed': {
            'client_id': Config.GOOGLE_OAUTH2_CLIENT_ID,
            'client_secret': Config.GOOGLE_OAUTH2_CLIENT_SECRET,
            'auth_uri': 'https://accounts.google.com/o/oauth2/auth',
            'token_uri': 'https://oauth2.googleapis.com/token',
            'redirect_uris': ['http://localhost'],
        }
    }


def get_access_token() -> str:
    """
    Run the browser sign-in against a local redirect listener and return an access token.

    Blocks until the redirect arrives or Config.OAUTH_TIMEOUT seconds pass.
    """
    Config.validate_speech()
    flow = InstalledAppFlow.from_client_config(_client_config(), scopes=SCOPES)

    print("🔐 OAuth2 Authentication Required")
    print("⏳ Waiting for authentication in the browser...")
    try:
        credentials = flow.run_local_server(
            port=Config.OAUTH_PORT,
            open_browser=True,
            timeout_seconds=Config.OAUTH_TIMEOUT,
            access_type='offline',
            success_message='Authentication successful! You can close this window.',
        )
    except Exception as e:
        raise AuthenticationError(f"Failed to get token: {e}") from e

    if not credentials or not credentials.token:
        raise AuthenticationError("No access token received")

    print("✓ Authentication successful")
    return credentials.token
