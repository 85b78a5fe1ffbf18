"""File filtering policy for the storage root scan

Following Sandi Metz principles:
- Single Responsibility: Only handles file exclusion logic
- Tell, Don't Ask: Policy makes decisions, doesn't expose internals
"""
from pathlib import Path


class FileFilterPolicy:
    """Determines which files under the storage root are not standards

    Paths are judged relative to the storage root, so a root that itself
    lives under a hidden directory is still scanned.
    """

    EXCLUDED_DIRS = {
        '.git', '.svn', '.hg',  # Version control
        'node_modules', '__pycache__', '.pytest_cache',  # Dependencies & cache
        '.venv', 'venv',  # Virtual environments
        '.idea', '.vscode',  # IDE directories
    }

    TEMP_SUFFIXES = ('.tmp', '.swp', '~')

    def should_exclude(self, relative: Path) -> bool:
        """Determine if file should be excluded"""
        return (
            self._is_in_excluded_directory(relative) or
            self._is_temp_file(relative)
        )

    def _is_in_excluded_directory(self, relative: Path) -> bool:
        """Check if any part of path is excluded or hidden"""
        return any(self._is_excluded_part(part) for part in relative.parts)

    def _is_excluded_part(self, part: str) -> bool:
        if part in self.EXCLUDED_DIRS:
            return True
        return part.startswith('.') and part != '..'

    def _is_temp_file(self, relative: Path) -> bool:
        """Check if file is an editor or atomic-write leftover"""
        return relative.name.endswith(self.TEMP_SUFFIXES)
