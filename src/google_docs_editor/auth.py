"""
Authentication and client sessions for Google Docs Editor.

Supports two authentication methods:
1. Service account authentication (SERVICE_ACCOUNT_PATH) - For automated environments
2. OAuth2 loopback flow (default) - User authorizes via browser; the token is
   saved and refreshed on later runs
"""

from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google.oauth2.service_account import Credentials as ServiceAccountCredentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from google_docs_editor import config
from google_docs_editor.utils import log

# Scopes required for editing Google Docs
SCOPES = ["https://www.googleapis.com/auth/documents"]


class AuthenticationError(Exception):
    """Credentials could not be obtained."""


def _authorize_with_service_account(service_account_path: str) -> ServiceAccountCredentials:
    path = Path(service_account_path)
    if not path.exists():
        raise AuthenticationError(
            f"Service account key file not found at path: {service_account_path}"
        )

    try:
        credentials = ServiceAccountCredentials.from_service_account_file(
            str(path), scopes=SCOPES
        )
    except ValueError as e:
        log(f"Error loading service account key: {e}")
        raise AuthenticationError(
            "Failed to authorize using the service account. "
            "Ensure the key file is valid and the path is correct."
        ) from e

    log("Service Account authentication successful!")
    return credentials


def _load_saved_credentials(token_path: Path) -> Credentials | None:
    """
    Load saved OAuth credentials, refreshing them if expired.

    Returns:
        Credentials if found and usable, None otherwise
    """
    if not token_path.exists():
        return None

    try:
        credentials = Credentials.from_authorized_user_file(str(token_path), SCOPES)
    except ValueError as e:
        log(f"Error loading saved credentials: {e}")
        return None

    if credentials.valid:
        return credentials
    if credentials.expired and credentials.refresh_token:
        log("Saved token expired, refreshing...")
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            log(f"Error refreshing saved credentials: {e}")
            return None
        _save_credentials(credentials, token_path)
        return credentials
    return None


def _save_credentials(credentials: Credentials, token_path: Path) -> None:
    try:
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(credentials.to_json())
        log(f"Token stored to {token_path}")
    except OSError as e:
        log(f"Error saving credentials: {e}")


def _authenticate(credentials_path: Path, token_path: Path, port: int) -> Credentials:
    """Run the OAuth2 loopback flow and save the resulting token."""
    if not credentials_path.exists():
        raise AuthenticationError(f"Credentials file not found at {credentials_path}")

    log(f"Using loopback OAuth flow with redirect URI: http://localhost:{port}")
    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=SCOPES)
    credentials = flow.run_local_server(
        port=port,
        open_browser=False,
        authorization_prompt_message="Authorize this app by visiting this URL in your browser:\n{url}",
        access_type="offline",
    )

    if credentials.refresh_token:
        _save_credentials(credentials, token_path)
    else:
        log("Did not receive refresh token. Token might expire.")
    log("Authentication successful!")
    return credentials


def authorize(
    service_account_path: str | None = None,
    credentials_dir: Path | None = None,
    oauth_port: int | None = None,
) -> Credentials | ServiceAccountCredentials:
    """
    Authorize with Google APIs.

    Checks for a service account first, then a saved token, then falls back to
    the interactive OAuth2 flow. Arguments default to the values in config.

    Returns:
        Valid credentials for Google API access

    Raises:
        AuthenticationError: If no credentials can be obtained
    """
    service_account_path = service_account_path or config.SERVICE_ACCOUNT_PATH
    if service_account_path:
        log("Service account path detected. Attempting service account authentication...")
        return _authorize_with_service_account(service_account_path)

    if credentials_dir is None:
        token_path, credentials_path = config.TOKEN_PATH, config.CREDENTIALS_PATH
    else:
        token_path = credentials_dir / "token.json"
        credentials_path = credentials_dir / "credentials.json"

    log("No service account path detected. Falling back to standard OAuth 2.0 flow...")
    credentials = _load_saved_credentials(token_path)
    if credentials:
        log("Using saved credentials.")
        return credentials

    log("Starting authentication flow...")
    return _authenticate(
        credentials_path, token_path, oauth_port if oauth_port is not None else config.OAUTH_PORT
    )


class DocsSession:
    """
    An authenticated handle on the Google Docs API.

    Credentials and the client are created on first use. Pass either
    ready-made credentials or nothing, in which case authorize() runs.
    """

    def __init__(self, credentials=None, docs=None):
        self._credentials = credentials
        self._docs = docs

    @property
    def credentials(self):
        if self._credentials is None:
            log("Attempting to authorize Google API client...")
            self._credentials = authorize()
            log("Google API client authorized successfully.")
        return self._credentials

    @property
    def docs(self):
        """The Google Docs API client resource."""
        if self._docs is None:
            self._docs = build("docs", "v1", credentials=self.credentials)
        return self._docs
