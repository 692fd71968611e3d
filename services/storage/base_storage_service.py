import base64
import binascii
import re
import uuid
from abc import ABC, abstractmethod
from typing import Tuple

from common.errors import InvalidFormat
from models.enums import AttachmentKind

IMAGE_DATA_URL = re.compile(r'^data:image/(?P<subtype>[a-zA-Z0-9.+-]+);base64,')
PDF_DATA_URL = re.compile(r'^data:application/pdf;base64,')

# MIME subtypes whose usual file extension differs from the subtype itself
IMAGE_EXTENSION_ALIASES = {
    'jpeg': 'jpg',
    'svg+xml': 'svg',
}


class BaseStorageService(ABC):
    """Abstract base class for attachment storage services."""

    def __init__(self, config):
        self.config = config
        self.allowed_image_extensions = {
            ext.lower() for ext in config.get('ALLOWED_IMAGE_EXTENSIONS', ['jpg', 'png'])
        }
        self.max_bytes = config.get('MAX_ATTACHMENT_BYTES')

    @abstractmethod
    def save(self, payload: str, kind: AttachmentKind, folder: str) -> str:
        """
        Store a base64 data URL and return the public URL of the stored file.

        Args:
            payload: Data URL, e.g. ``data:application/pdf;base64,JVBERi0...``
            kind: Which media type the payload must carry
            folder: Folder the file is stored under

        Returns:
            str: Fully qualified URL of the stored file

        Raises:
            InvalidFormat: payload is not a data URL of the expected media type
            StorageFailure: the file could not be written
        """
        pass

    @abstractmethod
    def delete(self, url: str) -> bool:
        """
        Delete a previously stored file.

        Returns:
            bool: True if a file was removed, False if there was nothing to remove

        Raises:
            StorageFailure: the file exists but could not be removed
        """
        pass

    def decode_payload(self, payload: str, kind: AttachmentKind) -> Tuple[bytes, str]:
        """Validate the data URL prefix and return (decoded bytes, file extension)."""
        if not isinstance(payload, str) or not payload:
            raise InvalidFormat(f"Empty {kind.value} payload.")

        if kind == AttachmentKind.IMAGE:
            match = IMAGE_DATA_URL.match(payload)
            if not match:
                raise InvalidFormat("Invalid image format. Expected a data:image/...;base64, payload.")
            subtype = match.group('subtype').lower()
            extension = IMAGE_EXTENSION_ALIASES.get(subtype, subtype)
            if extension not in self.allowed_image_extensions:
                raise InvalidFormat(
                    f"Invalid image type '{subtype}'. Allowed types: {', '.join(sorted(self.allowed_image_extensions))}"
                )
        elif kind == AttachmentKind.PDF:
            match = PDF_DATA_URL.match(payload)
            if not match:
                raise InvalidFormat("Invalid PDF format. Expected a data:application/pdf;base64, payload.")
            extension = 'pdf'
        else:
            raise InvalidFormat(f"Unsupported attachment kind: {kind}")

        body = payload[match.end():]
        try:
            content = base64.b64decode(''.join(body.split()), validate=True)
        except (binascii.Error, ValueError):
            raise InvalidFormat(f"Invalid {kind.value} payload: body is not valid base64.")

        if not content:
            raise InvalidFormat(f"Empty {kind.value} payload.")
        if self.max_bytes and len(content) > self.max_bytes:
            raise InvalidFormat(f"The {kind.value} exceeds the maximum size of {self.max_bytes} bytes.")

        return content, extension

    @staticmethod
    def generate_filename(extension: str) -> str:
        return f"{uuid.uuid4().hex}.{extension}"
