from flask import current_app
from .cloudinary_storage_service import CloudinaryStorageService
from .local_storage_service import LocalStorageService


def get_storage_service(app_config=None):
    """
    Factory function to get the appropriate storage service instance.

    Args:
        app_config: Flask app config object. If None, uses current_app.config

    Returns:
        BaseStorageService: Instance of the configured storage service

    Raises:
        ValueError: If provider is not supported
    """
    if app_config is None:
        app_config = current_app.config

    provider = app_config.get('STORAGE_PROVIDER', 'local').lower()

    if provider == 'local':
        return LocalStorageService(app_config)
    elif provider == 'cloudinary':
        return CloudinaryStorageService(app_config)
    else:
        raise ValueError(
            f"Unsupported storage provider: {provider}. "
            f"Supported providers: 'local', 'cloudinary'"
        )
