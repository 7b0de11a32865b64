# dietbuddy/models/social.py
from datetime import datetime
from .. import db


# -----------------------------
# Posts
# -----------------------------
class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    author = db.relationship("User", backref="posts")
    comments = db.relationship(
        "PostComment",
        back_populates="post",
        order_by="PostComment.id",
        cascade="all, delete-orphan",
    )
    likes = db.relationship(
        "PostLike",
        back_populates="post",
        order_by="PostLike.id",
        cascade="all, delete-orphan",
    )

    def liked_by(self):
        return [like.user_id for like in self.likes]

    def to_dict(self):
        return {
            "id": self.id,
            "user": _author_dict(self.author),
            "content": self.content,
            "images": self.images or [],
            "likes": self.liked_by(),
            "comments": [c.to_dict() for c in self.comments],
            "date": self.created_at.isoformat() if self.created_at else None,
        }


# -----------------------------
# Comments & likes
# -----------------------------
class PostComment(db.Model):
    __tablename__ = "post_comments"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("posts.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    parent_comment_id = db.Column(db.Integer, db.ForeignKey("post_comments.id"))
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    post = db.relationship("Post", back_populates="comments")
    author = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "user": _author_dict(self.author),
            "content": self.content,
            "parentCommentId": self.parent_comment_id,
            "date": self.created_at.isoformat() if self.created_at else None,
        }


class PostLike(db.Model):
    __tablename__ = "post_likes"
    __table_args__ = (db.UniqueConstraint("post_id", "user_id", name="uq_post_like"),)

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("posts.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    post = db.relationship("Post", back_populates="likes")


# -----------------------------
# Progress photos
# -----------------------------
class ProgressPhoto(db.Model):
    __tablename__ = "progress_photos"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    image_url = db.Column(db.String(500), nullable=False)
    caption = db.Column(db.String(255), nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    likes = db.relationship(
        "PhotoLike",
        back_populates="photo",
        order_by="PhotoLike.id",
        cascade="all, delete-orphan",
    )

    def liked_by(self):
        return [like.user_id for like in self.likes]

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "imageUrl": self.image_url,
            "caption": self.caption,
            "likes": self.liked_by(),
            "date": self.created_at.isoformat() if self.created_at else None,
        }


class PhotoLike(db.Model):
    __tablename__ = "photo_likes"
    __table_args__ = (db.UniqueConstraint("photo_id", "user_id", name="uq_photo_like"),)

    id = db.Column(db.Integer, primary_key=True)
    photo_id = db.Column(db.Integer, db.ForeignKey("progress_photos.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    photo = db.relationship("ProgressPhoto", back_populates="likes")


def _author_dict(user):
    if user is None:
        return None
    return {"id": user.id, "name": user.name}
