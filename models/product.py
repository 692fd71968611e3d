# models/product.py
from sqlalchemy import and_
from sqlalchemy.orm import foreign

from common.database import db, BaseModel
from common.field_codec import decode_list
from models.enums import ImageOwnerType
from models.image import Image
from models.subcategory import product_subcategory

NO_CATEGORY_NAME = 'No category'


class Product(BaseModel):
    __tablename__ = 'products'

    id              = db.Column(db.Integer, primary_key=True)
    name            = db.Column(db.String(256), unique=True, nullable=False)
    characteristics = db.Column(db.Text, nullable=False)
    description     = db.Column(db.Text, nullable=True)
    benefits        = db.Column(db.Text, nullable=False)  # packed with common.field_codec
    compatibility   = db.Column(db.Text, nullable=False)
    price           = db.Column(db.Numeric(8, 2), nullable=False)
    stock           = db.Column(db.Integer, nullable=False, default=0)
    status          = db.Column(db.Boolean, nullable=False, default=False)
    category_id     = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)
    pdf_id          = db.Column(db.Integer, db.ForeignKey('pdfs.id'), nullable=True, unique=True)

    category      = db.relationship('Category', backref='products')
    pdf           = db.relationship('Pdf', foreign_keys=[pdf_id])
    subcategories = db.relationship(
        'Subcategory',
        secondary=product_subcategory,
        back_populates='products',
        order_by='Subcategory.id'
    )
    # Read side of the image slot; rows are written through AttachmentManager
    image = db.relationship(
        Image,
        primaryjoin=lambda: and_(
            Image.imageable_type == ImageOwnerType.PRODUCT,
            foreign(Image.imageable_id) == Product.id
        ),
        uselist=False,
        viewonly=True
    )

    def set_stock(self, stock):
        """Stock drives visibility: a product is active iff it has units left."""
        self.stock = stock
        self.status = stock != 0

    @property
    def benefits_list(self):
        return decode_list(self.benefits)

    @property
    def subcategory_ids(self):
        return [sub.id for sub in self.subcategories]

    def category_summary(self):
        category = None
        if self.subcategories:
            category = self.subcategories[0].category
        if category is None:
            category = self.category

        return {
            "id": category.id if category else None,
            "name": category.name if category else NO_CATEGORY_NAME,
            "sub_categories": [sub.serialize() for sub in self.subcategories],
        }

    def serialize(self):
        return {
            "id": self.id,
            "name": self.name,
            "characteristics": self.characteristics,
            "description": self.description,
            "benefits": self.benefits_list,
            "compatibility": self.compatibility,
            "price": float(self.price) if self.price is not None else None,
            "stock": self.stock,
            "status": bool(self.status),
            "category": self.category_summary(),
            "image": {
                "id": self.image.id if self.image else None,
                "url": self.image.url if self.image else None,
            },
            "pdf": self.pdf.serialize() if self.pdf else None,
            "selected_subcategory_ids": self.subcategory_ids,
        }
