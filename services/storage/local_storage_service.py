import logging
import os

from common.errors import StorageFailure
from models.enums import AttachmentKind
from .base_storage_service import BaseStorageService

logger = logging.getLogger(__name__)


class LocalStorageService(BaseStorageService):
    """Stores attachments on the local disk, served by the app under /storage."""

    def __init__(self, config):
        super().__init__(config)
        self.root = os.path.abspath(config['UPLOAD_FOLDER'])
        self.base_url = config['PUBLIC_STORAGE_URL'].rstrip('/')

    def save(self, payload: str, kind: AttachmentKind, folder: str) -> str:
        content, extension = self.decode_payload(payload, kind)
        filename = self.generate_filename(extension)
        relative_path = f"{folder.strip('/')}/{filename}"
        path = self._resolve(relative_path)

        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as fh:
                fh.write(content)
        except OSError as e:
            logger.error(f"Failed to write {kind.value} to {path}: {e}")
            raise StorageFailure(f"Could not store the {kind.value}.") from e

        logger.info(f"Stored {kind.value} {relative_path} ({len(content)} bytes)")
        return f"{self.base_url}/{relative_path}"

    def delete(self, url: str) -> bool:
        if not url:
            return False
        if not url.startswith(self.base_url + '/'):
            logger.warning(f"Refusing to delete {url}: not served from {self.base_url}")
            return False

        path = self._resolve(url[len(self.base_url) + 1:])
        if not os.path.isfile(path):
            return False

        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise StorageFailure("Could not delete the stored file.") from e

        logger.info(f"Deleted stored file {path}")
        return True

    def _resolve(self, relative_path: str) -> str:
        path = os.path.abspath(os.path.join(self.root, relative_path))
        if os.path.commonpath([self.root, path]) != self.root:
            raise StorageFailure("Stored file path escapes the upload folder.")
        return path
