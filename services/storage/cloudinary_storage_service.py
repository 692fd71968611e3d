import logging
import re
import uuid
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader

from common.errors import StorageFailure
from models.enums import AttachmentKind
from .base_storage_service import BaseStorageService

logger = logging.getLogger(__name__)

VERSION_SEGMENT = re.compile(r'^v\d+/')


class CloudinaryStorageService(BaseStorageService):
    """Cloudinary implementation of storage service."""

    def __init__(self, config):
        """
        Initialize Cloudinary storage service.

        Args:
            config: Flask app config object with Cloudinary credentials
        """
        super().__init__(config)
        # Configure Cloudinary (it's safe to call multiple times)
        cloudinary.config(
            cloud_name=config.get('CLOUDINARY_CLOUD_NAME'),
            api_key=config.get('CLOUDINARY_API_KEY'),
            api_secret=config.get('CLOUDINARY_API_SECRET'),
            secure=True
        )

    def save(self, payload: str, kind: AttachmentKind, folder: str) -> str:
        # Validates prefix, encoding and size before anything leaves the process
        self.decode_payload(payload, kind)

        if kind == AttachmentKind.PDF:
            # Raw assets keep their extension in the public id
            resource_type = 'raw'
            public_id = f"{uuid.uuid4().hex}.pdf"
        else:
            resource_type = 'image'
            public_id = uuid.uuid4().hex

        try:
            upload_result = cloudinary.uploader.upload(
                payload,
                folder=folder,
                public_id=public_id,
                resource_type=resource_type,
                overwrite=False
            )
        except Exception as e:
            logger.error(f"Cloudinary {kind.value} upload failed: {str(e)}")
            raise StorageFailure(f"Could not store the {kind.value}.") from e

        url = upload_result.get('secure_url')
        if not url:
            raise StorageFailure(f"Cloudinary returned no URL for the {kind.value}.")
        return url

    def delete(self, url: str) -> bool:
        if not url:
            return False

        located = self.public_id_from_url(url)
        if located is None:
            logger.warning(f"Refusing to delete {url}: not a Cloudinary delivery URL")
            return False
        resource_type, public_id = located

        try:
            result = cloudinary.uploader.destroy(public_id, resource_type=resource_type, invalidate=True)
        except Exception as e:
            logger.error(f"Cloudinary deletion of {public_id} failed: {str(e)}")
            raise StorageFailure("Could not delete the stored file.") from e

        outcome = result.get('result')
        if outcome == 'ok':
            return True
        if outcome == 'not found':
            return False
        raise StorageFailure(f"Cloudinary refused to delete {public_id}: {outcome}")

    @staticmethod
    def public_id_from_url(url):
        """
        Split a delivery URL into (resource_type, public_id).

        https://res.cloudinary.com/<cloud>/image/upload/v17/products/ab12.png
        -> ('image', 'products/ab12')
        """
        path = urlparse(url).path
        if '/upload/' not in path:
            return None
        head, tail = path.split('/upload/', 1)
        resource_type = head.rsplit('/', 1)[-1]
        public_id = VERSION_SEGMENT.sub('', tail)
        if resource_type != 'raw':
            public_id = public_id.rsplit('.', 1)[0]
        return resource_type, public_id
