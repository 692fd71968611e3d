"""
Image and PDF slots of a product.

Database rows are changed inside the caller's session; file side effects are
tracked so they can follow the transaction outcome:

* files written during the operation are removed again by ``discard()``
  when the transaction rolls back;
* files superseded by a replacement are only removed by
  ``flush_deletes()`` once the transaction has committed;
* files of deleted rows are removed by ``purge()`` before the commit, so a
  storage error rolls the delete back.
"""
import logging
from datetime import datetime, timezone

from common.database import db
from models.enums import AttachmentKind, ImageOwnerType
from models.image import Image
from models.pdf import Pdf

logger = logging.getLogger(__name__)

# Marker for "the caller asked to remove the attachment"
REMOVE = None


class AttachmentManager:
    def __init__(self, storage, image_folder='products', pdf_folder='pdf'):
        self.storage = storage
        self.folders = {
            AttachmentKind.IMAGE: image_folder,
            AttachmentKind.PDF: pdf_folder,
        }
        self.written_urls = []
        self.pending_deletes = []

    # --- slot lookup -------------------------------------------------------

    @staticmethod
    def image_for(product):
        if product.id is None:
            return None
        return Image.for_owner(ImageOwnerType.PRODUCT, product.id)

    @staticmethod
    def pdf_for(product):
        if product.pdf_id is None:
            return None
        return db.session.get(Pdf, product.pdf_id)

    def ensure_image_slot(self, product):
        """Every product owns exactly one image row, even before it has an image."""
        image = self.image_for(product)
        if image is None:
            image = Image(imageable_type=ImageOwnerType.PRODUCT, imageable_id=product.id, url=None)
            db.session.add(image)
            db.session.flush()
        return image

    # --- lifecycle ---------------------------------------------------------

    def sync(self, product, kind, payload):
        """
        Apply a requested image/pdf change to the product.

        payload is a base64 data URL to store, or REMOVE (None) to drop the
        current attachment. The product must already be flushed.
        """
        if kind == AttachmentKind.IMAGE:
            return self._sync_image(product, payload)
        return self._sync_pdf(product, payload)

    def _sync_image(self, product, payload):
        image = self.image_for(product)

        if payload is REMOVE:
            if image is not None and image.url:
                self.pending_deletes.append(image.url)
                image.url = None
            return image

        url = self._store(payload, AttachmentKind.IMAGE)
        if image is None:
            image = Image(imageable_type=ImageOwnerType.PRODUCT, imageable_id=product.id, url=url)
            db.session.add(image)
        else:
            if image.url:
                self.pending_deletes.append(image.url)
            image.url = url
        db.session.flush()
        return image

    def _sync_pdf(self, product, payload):
        pdf = self.pdf_for(product)

        if payload is REMOVE:
            if pdf is not None:
                if pdf.url:
                    self.pending_deletes.append(pdf.url)
                product.pdf_id = None
                db.session.flush()
                db.session.delete(pdf)
            return None

        url = self._store(payload, AttachmentKind.PDF)
        if pdf is None:
            pdf = Pdf(url=url)
            db.session.add(pdf)
            db.session.flush()
            product.pdf_id = pdf.id
        else:
            if pdf.url:
                self.pending_deletes.append(pdf.url)
            pdf.url = url
            pdf.uploaded_at = datetime.now(timezone.utc)
        db.session.flush()
        return pdf

    def remove_all(self, product):
        """Drop both slots of a product that is about to be deleted."""
        image = self.image_for(product)
        if image is not None:
            if image.url:
                self.pending_deletes.append(image.url)
            db.session.delete(image)

        pdf = self.pdf_for(product)
        if pdf is not None:
            if pdf.url:
                self.pending_deletes.append(pdf.url)
            product.pdf_id = None
            db.session.flush()
            db.session.delete(pdf)
        return pdf

    def remove_pdf(self, pdf):
        if pdf.url:
            self.pending_deletes.append(pdf.url)
        db.session.delete(pdf)

    # --- file side effects -------------------------------------------------

    def _store(self, payload, kind):
        url = self.storage.save(payload, kind, self.folders[kind])
        self.written_urls.append(url)
        return url

    def purge(self):
        """
        Remove queued files right away, inside the transaction.

        Used when the owning rows are deleted: a storage error propagates so
        the caller can roll the rows back. A missing file is not an error.
        """
        removed = 0
        while self.pending_deletes:
            if self.storage.delete(self.pending_deletes[0]):
                removed += 1
            self.pending_deletes.pop(0)
        return removed

    def flush_deletes(self):
        """Remove superseded files. Call after the transaction has committed."""
        removed = 0
        while self.pending_deletes:
            url = self.pending_deletes.pop(0)
            try:
                if self.storage.delete(url):
                    removed += 1
            except Exception as e:
                # The rows are already gone; leave the file for operator cleanup
                logger.error(f"Could not delete superseded file {url}: {e}")
        self.written_urls = []
        return removed

    def discard(self):
        """Remove files written by a transaction that was rolled back."""
        while self.written_urls:
            url = self.written_urls.pop()
            try:
                self.storage.delete(url)
            except Exception as e:
                logger.error(f"Could not delete orphaned file {url} after rollback: {e}")
        self.pending_deletes = []
