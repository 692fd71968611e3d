from .base_storage_service import BaseStorageService
from .cloudinary_storage_service import CloudinaryStorageService
from .local_storage_service import LocalStorageService
from .storage_factory import get_storage_service

__all__ = [
    'BaseStorageService',
    'CloudinaryStorageService',
    'LocalStorageService',
    'get_storage_service'
]
