"""
Logging for blowup: Rich console output plus a rotating log file.
"""
import os
import logging
import shutil
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler


LOG_SIZE_LIMIT = 5 * 1024 * 1024;  # 5MB
LOG_BACKUP_COUNT = 5;


class BlowupLogger:
    """
    Application logger with startup rotation and Rich display.
    
    - Log file over 5MB on startup is moved aside with a timestamped name
    - Rich console output, INFO by default and DEBUG with --debug
    - File output always at DEBUG, rotated at 5MB
    """
    
    def __init__( self, name: str = "blowup", debug: bool = False, log_dir: Optional[Path] = None ):
        self.name = name;
        self.debug_enabled = debug;
        self.console = Console( stderr=True );
        
        self.logs_dir = Path( log_dir ) if log_dir else Path( os.getenv( "BLOWUP_LOG_DIR", "logs" ) );
        self.logs_dir.mkdir( parents=True, exist_ok=True );
        
        self.log_file = self.logs_dir / f"{name}.log";
        
        self._check_and_rotate_on_startup();
        self.logger = self._setup_logger();
    
    def _check_and_rotate_on_startup( self ):
        """Move the log file aside if it is already over the size limit."""
        if self.log_file.exists():
            file_size = self.log_file.stat().st_size;
            if file_size > LOG_SIZE_LIMIT:
                timestamp = datetime.now().isoformat().replace( ":", "-" );
                backup_name = self.logs_dir / f"{self.name}.{timestamp}.log";
                
                shutil.move( str( self.log_file ), str( backup_name ) );
                self.console.print( f"Rotated log file to {backup_name}" );
    
    def _setup_logger( self ):
        """Attach the Rich console handler and the rotating file handler."""
        logger = logging.getLogger( self.name );
        logger.setLevel( logging.DEBUG );
        logger.propagate = False;
        
        for handler in logger.handlers:
            handler.close();
        logger.handlers.clear();
        
        console_handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=self.debug_enabled
        );
        console_handler.setLevel( logging.DEBUG if self.debug_enabled else logging.INFO );
        console_handler.setFormatter( logging.Formatter( "%(message)s" ) );
        logger.addHandler( console_handler );
        
        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=LOG_SIZE_LIMIT,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8"
        );
        file_handler.setLevel( logging.DEBUG );
        file_handler.setFormatter( logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ) );
        logger.addHandler( file_handler );
        
        return logger;
    
    def debug( self, message, **kwargs ):
        self.logger.debug( message, **kwargs );
    
    def info( self, message, **kwargs ):
        self.logger.info( message, **kwargs );
    
    def warning( self, message, **kwargs ):
        self.logger.warning( message, **kwargs );
    
    def error( self, message, **kwargs ):
        self.logger.error( message, **kwargs );
    
    def critical( self, message, **kwargs ):
        self.logger.critical( message, **kwargs );


# Global logger instance
_logger = None;


def get_logger( debug: bool = False ) -> BlowupLogger:
    """Get the global logger, creating it on first use."""
    global _logger;
    if _logger is None:
        _logger = BlowupLogger( debug=debug );
    return _logger;


def setup_logging( debug: bool = False, log_dir: Optional[Path] = None ) -> BlowupLogger:
    """(Re)configure the global logger for this run."""
    global _logger;
    _logger = BlowupLogger( debug=debug, log_dir=log_dir );
    return _logger;
