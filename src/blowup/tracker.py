"""
Tracker list updater.

Downloads the community tracker list from GitHub only when it changed since
the last recorded update. Update times are kept one per line in a local
checkpoint file.
"""
import base64
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional, Tuple
import httpx

from .config import Settings
from .errors import TrackerError
from .logging import get_logger


GITHUB_API = "https://api.github.com";
TIME_FMT = "%Y-%m-%d %H:%M:%S %z";


class TrackerFetcher:
    """
    Fetches ``file_name`` from the GitHub repository ``owner/repo``.

    The Last-Modified header of the GitHub contents API response is
    compared with the newest checkpoint record; the list is written to
    ``output`` and a record appended only when the remote copy is newer.
    """

    def __init__(
        self,
        owner: str = "ngosang",
        repo: str = "trackerslist",
        file_name: str = "trackers_all.txt",
        output: Path = Path( "tracker_all.txt" ),
        checkpoint: Path = Path( "update_record" ),
        timeout: float = 30.0,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.logger = get_logger();
        self.owner = owner;
        self.repo = repo;
        self.file_name = file_name;
        self.output = Path( output );
        self.checkpoint = Path( checkpoint );
        self.timeout = timeout;
        self.token = token;
        self.transport = transport;

    @classmethod
    def from_settings( cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None ) -> "TrackerFetcher":
        return cls(
            owner=settings.tracker_owner,
            repo=settings.tracker_repo,
            file_name=settings.tracker_file,
            output=settings.tracker_output,
            checkpoint=settings.checkpoint_file,
            timeout=settings.http_timeout,
            token=settings.github_token,
            transport=transport
        );

    @property
    def request_path( self ) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{self.file_name}";

    def read_checkpoint( self ) -> Optional[datetime]:
        """
        Newest update time from the checkpoint file.

        Returns:
            The last non-empty record, or None if the file is missing or the
            record cannot be parsed
        """
        if not self.checkpoint.is_file():
            return None;

        try:
            lines = self.checkpoint.read_text( encoding="utf-8" ).splitlines();
        except OSError as e:
            self.logger.warning( f"Could not read checkpoint {self.checkpoint}: {e}" );
            return None;

        records = [ line.strip() for line in lines if line.strip() ];
        if not records:
            return None;

        try:
            return datetime.strptime( records[-1], TIME_FMT );
        except ValueError as e:
            self.logger.warning( f"Invalid checkpoint record '{records[-1]}': {e}" );
            return None;

    def append_checkpoint( self, modified: datetime ):
        with open( self.checkpoint, "a", encoding="utf-8" ) as f:
            f.write( f"{modified.astimezone().strftime( TIME_FMT )}\n" );

    def _headers( self ) -> dict:
        headers = { "Accept": "application/vnd.github+json" };
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}";
        return headers;

    def fetch( self ) -> Tuple[datetime, str]:
        """
        Download the tracker list.

        Returns:
            (last modified time, decoded file content)

        Raises:
            TrackerError: network failure, non-200 status, missing or
                invalid Last-Modified header, or an unexpected body
        """
        try:
            with httpx.Client( base_url=GITHUB_API, timeout=self.timeout, transport=self.transport ) as client:
                response = client.get( self.request_path, headers=self._headers() );
        except httpx.TimeoutException:
            raise TrackerError( f"Tracker request timed out after {self.timeout} seconds" );
        except httpx.RequestError as e:
            raise TrackerError( f"Network error while fetching tracker list: {e}" );

        if response.status_code != 200:
            raise TrackerError( f"GitHub API error (status {response.status_code}): {response.text[:200]}" );

        last_modified = response.headers.get( "last-modified" );
        if not last_modified:
            raise TrackerError( "Response has no Last-Modified header" );
        try:
            modified = parsedate_to_datetime( last_modified );
            if modified.tzinfo is None:
                modified = modified.replace( tzinfo=timezone.utc );
        except ( TypeError, ValueError ) as e:
            raise TrackerError( f"Invalid Last-Modified header '{last_modified}': {e}" );

        try:
            body = response.json();
            content = base64.b64decode( body["content"] ).decode( "utf-8" );
        except ( ValueError, KeyError, TypeError ) as e:
            raise TrackerError( f"Unexpected response body: {e}" );

        return modified, content;

    def update( self ) -> bool:
        """
        Write the tracker list if the remote copy is newer than the checkpoint.

        Returns:
            True if the list was written, False if already up to date
        """
        modified, content = self.fetch();
        last_update = self.read_checkpoint();

        if last_update is None:
            self.logger.info( "No previous tracker update recorded" );
        elif modified <= last_update:
            self.logger.info( f"Tracker list is up to date (last modified {modified.astimezone().strftime( TIME_FMT )})" );
            return False;

        self.output.write_text( content, encoding="utf-8" );
        self.append_checkpoint( modified );
        self.logger.info( f"Saved {len( content.splitlines() )} tracker lines to {self.output}" );
        return True;
