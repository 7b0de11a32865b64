# dietbuddy/models/blog.py
from datetime import datetime
from .. import db


class Blog(db.Model):
    __tablename__ = "blogs"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    summary = db.Column(db.String(500), nullable=False)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(100), nullable=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    image_url = db.Column(db.String(255))
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "author": self.author,
            "tags": self.tags or [],
            "imageUrl": self.image_url,
            "featured": bool(self.is_featured),
            "date": self.created_at.isoformat() if self.created_at else None,
        }
