"""Tests for the local and Cloudinary storage providers."""

import base64
from unittest import mock

import pytest

from common.errors import InvalidFormat, StorageFailure
from models.enums import AttachmentKind
from services.storage import (
    CloudinaryStorageService,
    LocalStorageService,
    get_storage_service,
)
from utils import PDF_BYTES, PNG_BYTES, image_data_url, path_for_url, pdf_data_url, stored_files

BASE_URL = 'http://testserver/storage'


@pytest.fixture
def storage_config(storage_root):
    return {
        'STORAGE_PROVIDER': 'local',
        'UPLOAD_FOLDER': str(storage_root),
        'PUBLIC_STORAGE_URL': BASE_URL,
        'ALLOWED_IMAGE_EXTENSIONS': ['jpg', 'jpeg', 'png', 'gif', 'webp', 'svg'],
        'MAX_ATTACHMENT_BYTES': 1024,
        'CLOUDINARY_CLOUD_NAME': 'demo',
        'CLOUDINARY_API_KEY': 'key',
        'CLOUDINARY_API_SECRET': 'secret',
    }


@pytest.fixture
def local_storage(storage_config):
    return LocalStorageService(storage_config)


class TestPayloadDecoding:

    def test_png(self, local_storage):
        content, extension = local_storage.decode_payload(image_data_url(), AttachmentKind.IMAGE)
        assert content == PNG_BYTES
        assert extension == 'png'

    @pytest.mark.parametrize('subtype, extension', [('jpeg', 'jpg'), ('svg+xml', 'svg'), ('WEBP', 'webp')])
    def test_image_subtype_aliases(self, local_storage, subtype, extension):
        _, ext = local_storage.decode_payload(image_data_url(subtype=subtype), AttachmentKind.IMAGE)
        assert ext == extension

    def test_pdf(self, local_storage):
        content, extension = local_storage.decode_payload(pdf_data_url(), AttachmentKind.PDF)
        assert content == PDF_BYTES
        assert extension == 'pdf'

    @pytest.mark.parametrize('payload', [
        'not a data url',
        'data:text/plain;base64,aGVsbG8=',
        'data:image/png,rawbytes',
        '',
    ])
    def test_rejects_non_image_payload(self, local_storage, payload):
        with pytest.raises(InvalidFormat):
            local_storage.decode_payload(payload, AttachmentKind.IMAGE)

    def test_rejects_image_sent_as_pdf(self, local_storage):
        with pytest.raises(InvalidFormat):
            local_storage.decode_payload(image_data_url(), AttachmentKind.PDF)

    def test_rejects_disallowed_image_type(self, local_storage):
        with pytest.raises(InvalidFormat, match='bmp'):
            local_storage.decode_payload(image_data_url(subtype='bmp'), AttachmentKind.IMAGE)

    def test_rejects_invalid_base64(self, local_storage):
        with pytest.raises(InvalidFormat, match='base64'):
            local_storage.decode_payload('data:image/png;base64,@@not-base64@@', AttachmentKind.IMAGE)

    def test_rejects_oversized_payload(self, local_storage):
        payload = 'data:application/pdf;base64,' + base64.b64encode(b'x' * 2048).decode()
        with pytest.raises(InvalidFormat, match='maximum size'):
            local_storage.decode_payload(payload, AttachmentKind.PDF)


class TestLocalStorageService:

    def test_save_writes_file_and_returns_public_url(self, local_storage, storage_root):
        url = local_storage.save(image_data_url(), AttachmentKind.IMAGE, 'products')

        assert url.startswith(f"{BASE_URL}/products/")
        assert url.endswith('.png')
        assert path_for_url(storage_root, url).read_bytes() == PNG_BYTES

    def test_save_generates_unique_names(self, local_storage):
        first = local_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')
        second = local_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')
        assert first != second

    def test_invalid_payload_writes_nothing(self, local_storage, storage_root):
        with pytest.raises(InvalidFormat):
            local_storage.save('garbage', AttachmentKind.IMAGE, 'products')
        assert stored_files(storage_root) == []

    def test_save_failure_raises_storage_failure(self, local_storage):
        with mock.patch('builtins.open', side_effect=PermissionError('read-only')):
            with pytest.raises(StorageFailure):
                local_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')

    def test_delete(self, local_storage, storage_root):
        url = local_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')

        assert local_storage.delete(url) is True
        assert not path_for_url(storage_root, url).exists()
        assert local_storage.delete(url) is False

    @pytest.mark.parametrize('url', [None, '', 'https://elsewhere.example.com/storage/pdf/a.pdf'])
    def test_delete_ignores_foreign_or_empty_urls(self, local_storage, url):
        assert local_storage.delete(url) is False

    def test_delete_refuses_paths_outside_upload_folder(self, local_storage):
        with pytest.raises(StorageFailure):
            local_storage.delete(f"{BASE_URL}/../../etc/passwd")


class TestCloudinaryStorageService:

    @pytest.fixture
    def cloudinary_storage(self, storage_config):
        return CloudinaryStorageService(storage_config)

    def test_save_pdf_as_raw_asset(self, cloudinary_storage):
        secure_url = 'https://res.cloudinary.com/demo/raw/upload/v1/pdf/abc.pdf'
        with mock.patch('cloudinary.uploader.upload', return_value={'secure_url': secure_url}) as upload:
            url = cloudinary_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')

        assert url == secure_url
        _, kwargs = upload.call_args
        assert kwargs['resource_type'] == 'raw'
        assert kwargs['folder'] == 'pdf'
        assert kwargs['public_id'].endswith('.pdf')

    def test_save_image(self, cloudinary_storage):
        secure_url = 'https://res.cloudinary.com/demo/image/upload/v1/products/abc.png'
        with mock.patch('cloudinary.uploader.upload', return_value={'secure_url': secure_url}) as upload:
            assert cloudinary_storage.save(image_data_url(), AttachmentKind.IMAGE, 'products') == secure_url
        assert upload.call_args.kwargs['resource_type'] == 'image'

    def test_save_validates_before_upload(self, cloudinary_storage):
        with mock.patch('cloudinary.uploader.upload') as upload:
            with pytest.raises(InvalidFormat):
                cloudinary_storage.save('garbage', AttachmentKind.IMAGE, 'products')
        upload.assert_not_called()

    def test_upload_error_raises_storage_failure(self, cloudinary_storage):
        with mock.patch('cloudinary.uploader.upload', side_effect=RuntimeError('boom')):
            with pytest.raises(StorageFailure):
                cloudinary_storage.save(pdf_data_url(), AttachmentKind.PDF, 'pdf')

    @pytest.mark.parametrize('url, expected', [
        ('https://res.cloudinary.com/demo/image/upload/v1712/products/ab12.png', ('image', 'products/ab12')),
        ('https://res.cloudinary.com/demo/raw/upload/v3/pdf/cd34.pdf', ('raw', 'pdf/cd34.pdf')),
        ('https://res.cloudinary.com/demo/image/upload/products/ef56.jpg', ('image', 'products/ef56')),
        ('https://example.com/files/a.png', None),
    ])
    def test_public_id_from_url(self, url, expected):
        assert CloudinaryStorageService.public_id_from_url(url) == expected

    @pytest.mark.parametrize('outcome, removed', [('ok', True), ('not found', False)])
    def test_delete(self, cloudinary_storage, outcome, removed):
        url = 'https://res.cloudinary.com/demo/image/upload/v1/products/ab12.png'
        with mock.patch('cloudinary.uploader.destroy', return_value={'result': outcome}) as destroy:
            assert cloudinary_storage.delete(url) is removed
        destroy.assert_called_once_with('products/ab12', resource_type='image', invalidate=True)

    def test_delete_refused_raises_storage_failure(self, cloudinary_storage):
        url = 'https://res.cloudinary.com/demo/raw/upload/v1/pdf/ab12.pdf'
        with mock.patch('cloudinary.uploader.destroy', return_value={'result': 'error'}):
            with pytest.raises(StorageFailure):
                cloudinary_storage.delete(url)


class TestStorageFactory:

    def test_local(self, storage_config):
        assert isinstance(get_storage_service(storage_config), LocalStorageService)

    def test_cloudinary(self, storage_config):
        storage_config['STORAGE_PROVIDER'] = 'Cloudinary'
        assert isinstance(get_storage_service(storage_config), CloudinaryStorageService)

    def test_unknown_provider(self, storage_config):
        storage_config['STORAGE_PROVIDER'] = 'ftp'
        with pytest.raises(ValueError, match='Unsupported storage provider'):
            get_storage_service(storage_config)
