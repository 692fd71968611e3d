from common.database import db, BaseModel

class Category(BaseModel):
    __tablename__ = 'categories'

    id   = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False, unique=True)

    subcategories = db.relationship(
        'Subcategory',
        back_populates='category',
        cascade='all, delete-orphan',
        order_by='Subcategory.id'
    )

    def serialize(self, include_subcategories=False):
        """Return object data in easily serializable format"""
        data = {
            'id': self.id,
            'name': self.name,
        }
        if include_subcategories:
            data['sub_categories'] = [sub.serialize() for sub in self.subcategories]
        return data
