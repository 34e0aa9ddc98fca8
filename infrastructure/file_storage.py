# infrastructure/file_storage.py
import asyncio
import logging
import os
from pathlib import Path
from typing import Union

from config import settings
from core.interfaces import IFileStorage

logger = logging.getLogger(settings.LOGGER_NAME)


class LocalFileStorage(IFileStorage):
    """Concrete implementation for storing files on the local disk."""

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)
        # Create the directory if it doesn't exist
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create upload directory at {self.base_path}: {e}")
            raise

    def _relative(self, file_path: Path) -> str:
        # Stored paths look like "uploads/slip-1-2.png" so clients can fetch them
        return f"{self.base_path.name}/{file_path.name}"

    async def save(self, content: bytes, filename: str) -> str:
        """Saves a file to the configured upload directory."""
        file_path = self.base_path / Path(filename).name
        try:
            await asyncio.to_thread(file_path.write_bytes, content)
        except OSError as e:
            logger.error(f"Failed to save file to {file_path}: {e}")
            raise
        logger.info(f"Successfully saved file to {file_path}")
        return self._relative(file_path)

    async def delete(self, filename: str) -> bool:
        """Deletes a file from the upload directory."""
        file_path = self.base_path / Path(filename).name
        try:
            if file_path.exists():
                await asyncio.to_thread(os.unlink, file_path)
                logger.info(f"Successfully deleted file: {file_path}")
                return True
            logger.warning(f"Attempted to delete non-existent file: {file_path}")
            return False
        except OSError as e:
            logger.error(f"Error deleting file {filename}: {e}")
            return False
