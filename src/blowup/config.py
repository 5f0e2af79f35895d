"""
Runtime settings loaded from a .env file and the process environment.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from .errors import ConfigError


@dataclass
class Settings:
    ffmpeg_dir: Optional[Path] = None;          # where to look for ffmpeg/ffprobe, PATH if unset
    log_dir: Path = Path( "logs" );
    tracker_owner: str = "ngosang";
    tracker_repo: str = "trackerslist";
    tracker_file: str = "trackers_all.txt";
    tracker_output: Path = Path( "tracker_all.txt" );
    checkpoint_file: Path = Path( "update_record" );
    http_timeout: float = 30.0;
    github_token: Optional[str] = None;


def _optional_path( value: Optional[str] ) -> Optional[Path]:
    return Path( value ).expanduser() if value else None;


def load_settings( env_file: Path = Path( ".env" ) ) -> Settings:
    """
    Build Settings from ``env_file`` (when present) and the environment.
    
    Variables already set in the environment win over the .env file.
    
    Raises:
        ConfigError: a numeric variable does not parse or is not positive
    """
    if env_file.exists():
        load_dotenv( env_file );
    
    defaults = Settings();
    
    timeout_raw = os.getenv( "BLOWUP_HTTP_TIMEOUT" );
    http_timeout = defaults.http_timeout;
    if timeout_raw:
        try:
            http_timeout = float( timeout_raw );
        except ValueError:
            raise ConfigError( f"BLOWUP_HTTP_TIMEOUT must be a number, got: {timeout_raw}" );
        if http_timeout <= 0:
            raise ConfigError( "BLOWUP_HTTP_TIMEOUT must be positive" );
    
    return Settings(
        ffmpeg_dir=_optional_path( os.getenv( "BLOWUP_FFMPEG_DIR" ) ),
        log_dir=_optional_path( os.getenv( "BLOWUP_LOG_DIR" ) ) or defaults.log_dir,
        tracker_owner=os.getenv( "BLOWUP_TRACKER_OWNER", defaults.tracker_owner ),
        tracker_repo=os.getenv( "BLOWUP_TRACKER_REPO", defaults.tracker_repo ),
        tracker_file=os.getenv( "BLOWUP_TRACKER_FILE", defaults.tracker_file ),
        tracker_output=_optional_path( os.getenv( "BLOWUP_TRACKER_OUTPUT" ) ) or defaults.tracker_output,
        checkpoint_file=_optional_path( os.getenv( "BLOWUP_CHECKPOINT_FILE" ) ) or defaults.checkpoint_file,
        http_timeout=http_timeout,
        github_token=os.getenv( "GITHUB_TOKEN" ) or None
    );
