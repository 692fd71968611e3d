import logging

from flask import current_app, url_for
from sqlalchemy.exc import IntegrityError

from common.database import db
from common.errors import CategoryMismatch, ProductExists, ProductNotFound, ValidationFailed
from common.field_codec import encode_list
from models.category import Category
from models.enums import AttachmentKind
from models.pdf import Pdf
from models.product import Product
from models.subcategory import Subcategory
from services.attachment_service import AttachmentManager
from services.storage import get_storage_service

logger = logging.getLogger(__name__)

# Plain columns copied as-is on create/update
PRODUCT_FIELDS = ('name', 'characteristics', 'description', 'compatibility', 'price', 'category_id')
ATTACHMENT_KINDS = (('image', AttachmentKind.IMAGE), ('pdf', AttachmentKind.PDF))


class ProductController:
    @staticmethod
    def _attachment_manager():
        config = current_app.config
        return AttachmentManager(
            get_storage_service(config),
            image_folder=config.get('IMAGE_FOLDER', 'products'),
            pdf_folder=config.get('PDF_FOLDER', 'pdf')
        )

    @staticmethod
    def _require_category(category_id):
        category = db.session.get(Category, category_id)
        if not category:
            raise ValidationFailed(
                f"Category with ID {category_id} not found.",
                errors={'category_id': [f"Category with ID {category_id} does not exist."]}
            )
        return category

    @staticmethod
    def _check_category_consistency(category_id, subcategories):
        category_ids = {sub.category_id for sub in subcategories}
        if len(category_ids) > 1 or (category_ids and category_ids.pop() != category_id):
            raise CategoryMismatch()

    @staticmethod
    def _load_subcategories(category_id, subcategory_ids):
        """Resolve de-duplicated ids and check they belong to category_id; links read back ordered by id."""
        ids = list(dict.fromkeys(subcategory_ids))
        if not ids:
            raise ValidationFailed(errors={'subcategory_id': ["At least one subcategory is required."]})

        found = {sub.id: sub for sub in Subcategory.query.filter(Subcategory.id.in_(ids)).all()}
        missing = [sid for sid in ids if sid not in found]
        if missing:
            raise ValidationFailed(
                "Some subcategories do not exist.",
                errors={'subcategory_id': [f"Subcategory with ID {sid} does not exist." for sid in missing]}
            )

        subcategories = [found[sid] for sid in ids]
        ProductController._check_category_consistency(category_id, subcategories)
        return subcategories

    @staticmethod
    def _encode_benefits(benefits):
        try:
            return encode_list(benefits)
        except ValueError as e:
            raise ValidationFailed(str(e), errors={'benefits': [str(e)]})

    @staticmethod
    def _changes(data):
        """Keep only the keys that carry a value; blank strings count as not sent."""
        changes = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if value == '':
                    continue
            if value is None and key not in ('image', 'pdf'):
                continue
            changes[key] = value
        return changes

    # --- write side --------------------------------------------------------

    @staticmethod
    def create(data):
        if Product.query.filter_by(name=data['name']).first():
            raise ProductExists(data['name'])

        category = ProductController._require_category(data['category_id'])
        subcategories = ProductController._load_subcategories(category.id, data['subcategory_id'])
        benefits = ProductController._encode_benefits(data['benefits'])

        attachments = ProductController._attachment_manager()
        try:
            product = Product(
                name=data['name'],
                characteristics=data['characteristics'],
                description=data.get('description'),
                benefits=benefits,
                compatibility=data['compatibility'],
                price=data['price'],
                category_id=category.id
            )
            product.set_stock(data['stock'])
            product.subcategories = subcategories
            db.session.add(product)
            db.session.flush()

            if data.get('image'):
                attachments.sync(product, AttachmentKind.IMAGE, data['image'])
            else:
                attachments.ensure_image_slot(product)
            if data.get('pdf'):
                attachments.sync(product, AttachmentKind.PDF, data['pdf'])

            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            attachments.discard()
            logger.warning(f"Integrity error creating product '{data['name']}': {e}")
            raise ProductExists(data['name']) from e
        except Exception as e:
            db.session.rollback()
            attachments.discard()
            logger.error(f"Error creating product '{data['name']}': {e}")
            raise

        attachments.flush_deletes()
        logger.info(f"Created product {product.id} ('{product.name}')")
        return product

    @staticmethod
    def update(product_id, data):
        product = db.session.get(Product, product_id)
        if not product:
            raise ProductNotFound(product_id)

        changes = ProductController._changes(data)

        if 'name' in changes and changes['name'] != product.name:
            duplicate = Product.query.filter(Product.id != product.id, Product.name == changes['name']).first()
            if duplicate:
                raise ProductExists(changes['name'])

        category_id = changes.get('category_id', product.category_id)
        if 'category_id' in changes:
            ProductController._require_category(category_id)

        subcategories = None
        if 'subcategory_id' in changes:
            subcategories = ProductController._load_subcategories(category_id, changes['subcategory_id'])
        elif 'category_id' in changes:
            ProductController._check_category_consistency(category_id, product.subcategories)

        benefits = None
        if 'benefits' in changes:
            benefits = ProductController._encode_benefits(changes['benefits'])

        attachments = ProductController._attachment_manager()
        try:
            for field in PRODUCT_FIELDS:
                if field in changes:
                    setattr(product, field, changes[field])
            if benefits is not None:
                product.benefits = benefits
            if 'stock' in changes:
                product.set_stock(changes['stock'])
            if subcategories is not None:
                product.subcategories = subcategories
            db.session.flush()

            for key, kind in ATTACHMENT_KINDS:
                if key in changes:
                    attachments.sync(product, kind, changes[key])

            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            attachments.discard()
            if 'name' in changes:
                logger.warning(f"Integrity error updating product {product_id}: {e}")
                raise ProductExists(changes['name']) from e
            logger.error(f"Integrity error updating product {product_id}: {e}")
            raise
        except Exception as e:
            db.session.rollback()
            attachments.discard()
            logger.error(f"Error updating product {product_id}: {e}")
            raise

        attachments.flush_deletes()
        logger.info(f"Updated product {product_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return product

    @staticmethod
    def delete(product_id):
        product = db.session.get(Product, product_id)
        attachments = ProductController._attachment_manager()

        if product is None:
            # Dangling PDF rows (no product points at them) share this endpoint
            pdf = db.session.get(Pdf, product_id)
            if pdf is None or Product.query.filter_by(pdf_id=pdf.id).first() is not None:
                raise ProductNotFound(product_id)
        else:
            pdf = None

        try:
            if product is not None:
                attachments.remove_all(product)
                db.session.delete(product)
            else:
                logger.info(f"Removing dangling PDF {pdf.id}")
                attachments.remove_pdf(pdf)
            db.session.flush()
            # Files go before the commit; a storage error keeps the rows
            removed = attachments.purge()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            attachments.discard()
            logger.error(f"Error deleting product {product_id}: {e}")
            raise

        logger.info(f"Deleted product {product_id} ({removed} stored files removed)")
        return product_id

    # --- read side ---------------------------------------------------------

    @staticmethod
    def get(product_id):
        return db.session.get(Product, product_id)

    @staticmethod
    def list_products(args, authenticated=False):
        """Paginated product listing; anonymous callers only see active products."""
        config = current_app.config
        page = max(args.get('page', 1, type=int) or 1, 1)
        default_limit = config.get('PRODUCTS_PER_PAGE', 10)
        limit = args.get('limit', default_limit, type=int) or default_limit
        limit = min(max(limit, 1), config.get('MAX_PRODUCTS_PER_PAGE', 50))

        name = (args.get('product') or '').strip()
        subcategory = (args.get('subcategory') or '').strip()
        category = (args.get('category') or '').strip()

        query = Product.query
        if name:
            query = query.filter(Product.name.ilike(f"%{name}%"))
        if subcategory:
            query = query.filter(Product.subcategories.any(Subcategory.name == subcategory))
        if category:
            query = query.filter(
                Product.subcategories.any(Subcategory.category.has(Category.name == category))
            )
        if not authenticated:
            query = query.filter(Product.status.is_(True))

        pagination = query.order_by(Product.id).paginate(page=page, per_page=limit, error_out=False)

        def page_url(number):
            params = {k: v for k, v in args.items() if k != 'page'}
            return url_for('product.get_products', page=number, _external=True, **params)

        return {
            'data': [product.serialize() for product in pagination.items],
            'current_page': pagination.page,
            'total': pagination.total,
            'last_page': max(pagination.pages, 1),
            'next_page': page_url(pagination.next_num) if pagination.has_next else None,
            'prev_page': page_url(pagination.prev_num) if pagination.has_prev else None,
        }
