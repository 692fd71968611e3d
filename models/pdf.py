from datetime import datetime, timezone
from common.database import db, BaseModel


class Pdf(BaseModel):
    __tablename__ = 'pdfs'

    id          = db.Column(db.Integer, primary_key=True)
    url         = db.Column(db.String(512), nullable=True)
    uploaded_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    def serialize(self):
        return {
            "id": self.id,
            "url": self.url,
        }
