"""
Configuration validator for startup checks.

Validates configuration settings early to provide clear error messages
before the application attempts to use invalid paths or settings.
"""
import logging
import os
from typing import List

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Configuration validation failed"""
    pass


class ConfigValidator:
    """Validates configuration settings on startup"""

    def __init__(self, config):
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> None:
        """Validate all configuration settings

        Raises:
            ConfigValidationError: If validation fails
        """
        self._validate_standards_dir()
        self._validate_search_settings()

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
            raise ConfigValidationError(error_msg)

    def _validate_standards_dir(self) -> None:
        """Validate standards directory path, creating it when missing"""
        standards_dir = self.config.paths.standards_dir

        if not standards_dir.exists():
            self._create_directory(standards_dir)
            return

        if not standards_dir.is_dir():
            self.errors.append(
                f"Standards path is not a directory: {standards_dir}\n"
                f"    Update STANDARDS_DIR to point to a directory"
            )
            return

        if not os.access(standards_dir, os.R_OK):
            self.errors.append(
                f"Standards directory is not readable: {standards_dir}\n"
                f"    Fix with: chmod +r {standards_dir}"
            )

        if not os.access(standards_dir, os.W_OK):
            self.errors.append(
                f"Standards directory is not writable: {standards_dir}\n"
                f"    Fix with: chmod +w {standards_dir}"
            )

    def _create_directory(self, standards_dir) -> None:
        try:
            standards_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created standards directory: %s", standards_dir)
        except PermissionError:
            self.errors.append(
                f"Cannot create standards directory (permission denied): {standards_dir}\n"
                f"    Fix with: mkdir -p {standards_dir} or update STANDARDS_DIR"
            )
        except OSError as e:
            self.errors.append(
                f"Cannot create standards directory: {standards_dir}\n"
                f"    Error: {e}"
            )

    def _validate_search_settings(self) -> None:
        """Check snippet settings are positive"""
        search = self.config.search
        if search.context_length < 2:
            self.errors.append(f"SEARCH_CONTEXT_LENGTH must be at least 2 (got {search.context_length})")
        if search.max_contexts < 1:
            self.errors.append(f"SEARCH_MAX_CONTEXTS must be at least 1 (got {search.max_contexts})")
