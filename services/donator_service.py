# services/donator_service.py
import logging
from typing import List, Optional, Tuple

from fastapi import UploadFile

from config import settings
from core.domain import Donator
from core.errors import NotFoundError, ValidationError
from core.interfaces import IDonatorRepository, IFileStorage
from utils.common import (
    generate_slip_filename,
    validate_image_signature,
    validate_image_upload,
)

logger = logging.getLogger(settings.LOGGER_NAME)


class DonatorService:
    def __init__(
        self,
        donator_repo: IDonatorRepository,
        file_storage: IFileStorage,
        max_slip_size: int = 10 * 1024 * 1024,
        allowed_extensions: Optional[List[str]] = None,
    ):
        self.donator_repo = donator_repo
        self.file_storage = file_storage
        self.max_slip_size = max_slip_size
        self.allowed_extensions = allowed_extensions or ["jpg", "jpeg", "png"]

    async def _read_slip(self, slip: Optional[UploadFile]) -> Tuple[bytes, str]:
        """Validate the upload and return (content, extension)."""
        if slip is None or not slip.filename:
            raise ValidationError("Slip image is required")

        extension = validate_image_upload(slip.filename, slip.content_type, self.allowed_extensions)

        # One byte past the limit is enough to know it is too large
        content = await slip.read(self.max_slip_size + 1)
        if len(content) > self.max_slip_size:
            raise ValidationError(
                f"File too large (max {self.max_slip_size // (1024 * 1024)}MB)",
                detail=f"slip '{slip.filename}' exceeds {self.max_slip_size} bytes",
            )
        if not content:
            raise ValidationError("Slip image is required", detail="uploaded file is empty")

        validate_image_signature(content, extension)
        return content, extension

    async def create_donator(
        self,
        name: Optional[str],
        message: Optional[str],
        slip: Optional[UploadFile],
    ) -> Donator:
        content, extension = await self._read_slip(slip)

        filename = generate_slip_filename(extension)
        file_path = await self.file_storage.save(content, filename)
        try:
            donator = await self.donator_repo.create(
                name=(name or "").strip() or "Anonymous",
                message=message or "",
                file_path=file_path,
            )
        except Exception:
            # Do not leave an orphaned slip behind
            if not await self.file_storage.delete(filename):
                logger.warning(f"Could not remove slip {filename} after failed insert")
            raise

        logger.info(f"Donator {donator.id} created with slip {file_path}")
        return donator

    async def list_donators(self) -> List[Donator]:
        return await self.donator_repo.list_all()

    async def list_allowed(self) -> List[Donator]:
        return await self.donator_repo.list_by_allowed(True)

    async def list_unallowed(self) -> List[Donator]:
        return await self.donator_repo.list_by_allowed(False)

    async def _set_allowed(self, donator_id: int, allowed: bool) -> Donator:
        donator = await self.donator_repo.set_allowed(donator_id, allowed)
        if donator is None:
            raise NotFoundError("Donator not found", detail=f"id={donator_id}")
        logger.info(f"Donator {donator_id} {'allowed' if allowed else 'disallowed'}")
        return donator

    async def allow(self, donator_id: int) -> Donator:
        return await self._set_allowed(donator_id, True)

    async def disallow(self, donator_id: int) -> Donator:
        return await self._set_allowed(donator_id, False)

    async def delete(self, donator_id: int) -> None:
        if not await self.donator_repo.delete(donator_id):
            raise NotFoundError("Donator not found", detail=f"id={donator_id}")
        logger.info(f"Donator {donator_id} deleted")
