"""
Base command infrastructure for the addresses CLI.
Provides common functionality and utilities for all commands.
"""

import functools
import click
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .config import Config
from ..association import OwnerAssociation, OwnerRef
from ..db.session import SessionManager
from ..db.store import AddressStore
from ..processors.error_tracker import ErrorTracker
from ..validation import AddressValidator

class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()
        self._store: Optional[AddressStore] = None

        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")

    @property
    def store(self) -> AddressStore:
        """Get or create the address store."""
        if self._store is None:
            if self.debug:
                self.logger.debug(f"Creating new engine for {self.config.database_url}")
            session_manager = SessionManager(self.config.database_url)
            self._store = AddressStore(session_manager, self.config.schema)
        return self._store

    def association(self, owner_type: str, owner_id: int) -> OwnerAssociation:
        """Address association for the given owner."""
        validator = AddressValidator(self.config.schema.rules)
        return OwnerAssociation(OwnerRef(owner_type, owner_id), self.store, validator)

    @abstractmethod
    def execute(self) -> None:
        """Execute the command. Must be implemented by subclasses."""

    def validate(self) -> bool:
        """Validate command configuration and requirements.

        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        try:
            return self.config.validate()
        except ValueError as e:
            self.logger.error(f"Invalid configuration: {e}")
            return False

class FileInputCommand(BaseCommand):
    """Base class for commands that process input files."""

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = input_file
        self.output_file = output_file

    def validate(self) -> bool:
        """Validate input file exists and is readable."""
        if not super().validate():
            return False

        if not self.input_file.exists():
            self.logger.error(f"Input file not found: {self.input_file}")
            return False

        if not self.input_file.is_file():
            self.logger.error(f"Input path is not a file: {self.input_file}")
            return False

        return True

def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    @functools.wraps(f)
    def wrapper(self, *args, **kwargs):
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")
                start = time.time()

            result = f(self, *args, **kwargs)

            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")

            return result

        except click.exceptions.Exit:
            raise
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {
                    'command': self.__class__.__name__,
                    'error': str(e)
                }
            )
            click.secho(f"Error: {str(e)}", fg='red', err=True)
            if self.debug:
                self.logger.debug(f"Command failed with error: {str(e)}", exc_info=True)
            raise click.Abort()
    return wrapper
