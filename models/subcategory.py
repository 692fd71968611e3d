from common.database import db, BaseModel

# Many-to-many link between products and the subcategories they are listed under
product_subcategory = db.Table(
    'product_subcategory',
    db.Column('product_id', db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
    db.Column('subcategory_id', db.Integer, db.ForeignKey('subcategories.id', ondelete='CASCADE'), primary_key=True),
)


class Subcategory(BaseModel):
    __tablename__ = 'subcategories'
    __table_args__ = (
        db.UniqueConstraint('category_id', 'name', name='uq_subcategories_category_name'),
    )

    id          = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name        = db.Column(db.String(100), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False, index=True)

    category = db.relationship('Category', back_populates='subcategories')
    products = db.relationship('Product', secondary=product_subcategory, back_populates='subcategories')

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
        }
