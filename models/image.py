from common.database import db, BaseModel
from models.enums import ImageOwnerType


class Image(BaseModel):
    """Image slot attached to one owner row (owner kind + owner id)."""
    __tablename__ = 'images'
    __table_args__ = (
        db.UniqueConstraint('imageable_type', 'imageable_id', name='uq_images_owner'),
    )

    id             = db.Column(db.Integer, primary_key=True)
    url            = db.Column(db.String(512), nullable=True)
    imageable_type = db.Column(db.Enum(ImageOwnerType), nullable=False, default=ImageOwnerType.PRODUCT)
    imageable_id   = db.Column(db.Integer, nullable=False, index=True)

    @classmethod
    def for_owner(cls, owner_type, owner_id):
        return cls.query.filter_by(imageable_type=owner_type, imageable_id=owner_id).first()

    def serialize(self):
        return {
            "id": self.id,
            "url": self.url,
        }
