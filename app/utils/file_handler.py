import os
import logging
from pathlib import Path
from fastapi import UploadFile
import uuid

from app.config.config import Config
from app.utils.exceptions import ValidationError, ProcessingError

logger = logging.getLogger(__name__)


class FileHandler:
    """Simple file upload and cleanup"""

    def __init__(self, upload_dir: Path = None, max_file_size: int = None, allowed_extensions=None):
        self.upload_dir = Path(upload_dir or Config.UPLOAD_DIR)
        self.max_file_size = max_file_size or Config.MAX_UPLOAD_SIZE
        self.allowed_extensions = allowed_extensions or Config.ALLOWED_EXTENSIONS
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save_upload(self, file: UploadFile) -> str:
        """Save uploaded file"""
        # Validate extension
        file_ext = Path(file.filename or "").suffix.lower()
        if file_ext not in self.allowed_extensions:
            allowed = ", ".join(sorted(self.allowed_extensions))
            raise ValidationError(f"Invalid file type. Allowed: {allowed}")

        # Generate unique filename
        unique_filename = f"{uuid.uuid4()}{file_ext}"
        file_path = self.upload_dir / unique_filename

        # Save file
        try:
            with open(file_path, "wb") as buffer:
                total_size = 0
                while chunk := await file.read(8192):
                    total_size += len(chunk)

                    if total_size > self.max_file_size:
                        raise ValidationError(
                            f"File too large. Max: {self.max_file_size // (1024 * 1024)}MB"
                        )

                    buffer.write(chunk)

        except ValidationError:
            self._remove(file_path)
            raise
        except OSError as e:
            self._remove(file_path)
            raise ProcessingError("Processing failed", detail=f"Upload failed: {str(e)}") from e

        logger.info(f"[OK] Saved upload {file.filename} ({total_size} bytes) as {unique_filename}")
        return str(file_path)

    async def cleanup(self, file_path: str):
        """Remove temporary file"""
        self._remove(file_path)

    def _remove(self, file_path) -> None:
        try:
            if os.path.exists(file_path):
                os.remove(file_path)
                logger.info(f"[OK] Cleaned up: {file_path}")
        except OSError as e:
            logger.warning(f"[!] Cleanup warning: {e}")
