from __future__ import annotations

import os
import uuid

from django.core.files.uploadedfile import UploadedFile

from apps.common import get_logger
from .exceptions import FileStorageError, InvalidImageNameError

logger = get_logger(__name__).bind(component="catalog", layer="storage")


def image_extension(filename: str) -> str:
    """Return the extension of ``filename`` including the leading dot."""
    base = os.path.basename(filename or "")
    dot = base.rfind(".")
    if dot == -1 or dot == len(base) - 1:
        raise InvalidImageNameError(filename)
    return base[dot:]


class FileService:
    """Writes uploaded product images to a directory on local disk."""

    def __init__(self):
        self.logger = logger.bind(service="FileService")

    def generate_name(self, original_name: str) -> str:
        return f"{uuid.uuid4()}{image_extension(original_name)}"

    def upload_image(self, path: str, image: UploadedFile) -> str:
        original_name = image.name or ""
        file_name = self.generate_name(original_name)
        file_path = os.path.join(path, file_name)
        self.logger.info(
            "Storing uploaded image",
            original_name=original_name,
            file_name=file_name,
            directory=path,
        )
        try:
            if not os.path.isdir(path):
                # parent directory must already exist
                os.mkdir(path)
            with open(file_path, "xb") as destination:
                for chunk in image.chunks():
                    destination.write(chunk)
        except OSError as exc:
            self.logger.exception(
                "Image upload failed", file_path=file_path, error=str(exc)
            )
            raise FileStorageError(
                "Could not store image",
                details={"image": original_name},
            ) from exc
        self.logger.debug("Image stored", file_path=file_path, size=image.size)
        return file_name
