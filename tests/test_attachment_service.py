"""Tests for the image/PDF slot manager."""

from unittest import mock

import pytest

from common.database import db
from common.errors import StorageFailure
from models.enums import AttachmentKind
from models.image import Image
from models.pdf import Pdf
from models.product import Product
from services.attachment_service import REMOVE, AttachmentManager
from services.storage import LocalStorageService
from utils import image_data_url, path_for_url, pdf_data_url, stored_files


@pytest.fixture
def manager(app):
    return AttachmentManager(LocalStorageService(app.config))


@pytest.fixture
def product(catalog):
    product = Product(
        name='Rake',
        characteristics='steel',
        benefits='sturdy',
        compatibility='garden',
        price=12,
        category_id=2,
    )
    product.set_stock(3)
    db.session.add(product)
    db.session.flush()
    return product


class TestImageSlot:

    def test_ensure_image_slot_is_idempotent(self, manager, product):
        first = manager.ensure_image_slot(product)
        second = manager.ensure_image_slot(product)

        assert first.id == second.id
        assert first.url is None
        assert Image.query.count() == 1

    def test_replace_queues_old_file_until_flush(self, manager, product, storage_root):
        manager.sync(product, AttachmentKind.IMAGE, image_data_url())
        db.session.commit()
        old_url = manager.image_for(product).url
        manager.flush_deletes()

        manager.sync(product, AttachmentKind.IMAGE, image_data_url(subtype='jpeg'))
        db.session.commit()
        new_url = manager.image_for(product).url

        assert manager.pending_deletes == [old_url]
        assert path_for_url(storage_root, old_url).exists()

        assert manager.flush_deletes() == 1
        assert not path_for_url(storage_root, old_url).exists()
        assert path_for_url(storage_root, new_url).exists()
        assert Image.query.count() == 1

    def test_remove_clears_url_but_keeps_slot(self, manager, product, storage_root):
        manager.sync(product, AttachmentKind.IMAGE, image_data_url())
        db.session.commit()
        manager.flush_deletes()

        image = manager.sync(product, AttachmentKind.IMAGE, REMOVE)
        db.session.commit()
        manager.flush_deletes()

        assert image.url is None
        assert Image.query.count() == 1
        assert stored_files(storage_root) == []


class TestPdfSlot:

    def test_create_links_product(self, manager, product):
        pdf = manager.sync(product, AttachmentKind.PDF, pdf_data_url())
        db.session.commit()

        assert product.pdf_id == pdf.id
        assert pdf.url.endswith('.pdf')

    def test_replace_updates_row_in_place(self, manager, product):
        first = manager.sync(product, AttachmentKind.PDF, pdf_data_url())
        db.session.commit()
        manager.flush_deletes()

        second = manager.sync(product, AttachmentKind.PDF, pdf_data_url(b'%PDF-1.7 v2'))
        db.session.commit()

        assert second.id == first.id
        assert Pdf.query.count() == 1
        assert len(manager.pending_deletes) == 1

    def test_remove_deletes_row_and_unlinks(self, manager, product, storage_root):
        manager.sync(product, AttachmentKind.PDF, pdf_data_url())
        db.session.commit()
        manager.flush_deletes()

        assert manager.sync(product, AttachmentKind.PDF, REMOVE) is None
        db.session.commit()
        manager.flush_deletes()

        assert product.pdf_id is None
        assert Pdf.query.count() == 0
        assert stored_files(storage_root) == []

    def test_remove_without_pdf_is_noop(self, manager, product):
        assert manager.sync(product, AttachmentKind.PDF, REMOVE) is None
        assert manager.pending_deletes == []


class TestFileSideEffects:

    def test_discard_removes_written_files_and_forgets_pending(self, manager, product, storage_root):
        manager.sync(product, AttachmentKind.IMAGE, image_data_url())
        manager.sync(product, AttachmentKind.PDF, pdf_data_url())
        manager.pending_deletes.append('http://testserver/storage/products/keep.png')
        assert len(stored_files(storage_root)) == 2

        db.session.rollback()
        manager.discard()

        assert stored_files(storage_root) == []
        assert manager.pending_deletes == []

    def test_purge_removes_queued_files_of_deleted_rows(self, manager, product, storage_root):
        manager.sync(product, AttachmentKind.IMAGE, image_data_url())
        manager.sync(product, AttachmentKind.PDF, pdf_data_url())
        db.session.commit()
        manager.flush_deletes()

        manager.remove_all(product)

        assert manager.purge() == 2
        assert manager.pending_deletes == []
        assert stored_files(storage_root) == []

    def test_purge_propagates_storage_failure(self, app):
        storage = mock.Mock()
        storage.delete.side_effect = StorageFailure('disk')
        manager = AttachmentManager(storage)
        manager.pending_deletes = ['http://testserver/storage/a.png']

        with pytest.raises(StorageFailure):
            manager.purge()
        assert manager.pending_deletes == ['http://testserver/storage/a.png']

    def test_flush_deletes_continues_after_failure(self, app):
        storage = mock.Mock()
        storage.delete.side_effect = [StorageFailure('disk'), True]
        manager = AttachmentManager(storage)
        manager.pending_deletes = ['http://testserver/storage/a.png', 'http://testserver/storage/b.png']

        assert manager.flush_deletes() == 1
        assert storage.delete.call_count == 2
        assert manager.pending_deletes == []
