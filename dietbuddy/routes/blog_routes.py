# dietbuddy/routes/blog_routes.py

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import admin_required
from ..data_source import live_store_required
from ..errors import ValidationError
from ..models.blog import Blog

blogs_bp = Blueprint("blogs", __name__)

REQUIRED_FIELDS = ("title", "summary", "content", "author")
PAGE_SIZE = 10
FEATURED_SIZE = 5


def _newest():
    return Blog.query.order_by(Blog.created_at.desc(), Blog.id.desc())


def _apply_fields(blog: Blog, data: Dict[str, Any]) -> None:
    for key in REQUIRED_FIELDS:
        if key in data:
            if not data[key]:
                raise ValidationError(f"{key} cannot be empty")
            setattr(blog, key, data[key])
    if "imageUrl" in data:
        blog.image_url = data["imageUrl"]
    if "featured" in data:
        blog.is_featured = bool(data["featured"])
    if "tags" in data:
        if not isinstance(data["tags"], list):
            raise ValidationError("tags must be a list")
        blog.tags = [str(t) for t in data["tags"]]


# ------------------------------
# Public reads
# ------------------------------
@blogs_bp.route("", methods=["GET"])
@live_store_required
def list_blogs():
    return jsonify([b.to_dict() for b in _newest().limit(PAGE_SIZE).all()]), 200


@blogs_bp.route("/featured", methods=["GET"])
@live_store_required
def featured_blogs():
    blogs = _newest().filter(Blog.is_featured.is_(True)).limit(FEATURED_SIZE).all()
    return jsonify([b.to_dict() for b in blogs]), 200


@blogs_bp.route("/tag/<tag>", methods=["GET"])
@live_store_required
def blogs_by_tag(tag: str):
    # tags live in a JSON column, so the match happens here rather than in SQL
    matches = [b for b in _newest().all() if tag in (b.tags or [])]
    return jsonify([b.to_dict() for b in matches[:PAGE_SIZE]]), 200


@blogs_bp.route("/<int:blog_id>", methods=["GET"])
@live_store_required
def get_blog(blog_id: int):
    blog = Blog.query.get(blog_id)
    if not blog:
        return jsonify({"message": "Blog not found"}), 404
    return jsonify(blog.to_dict()), 200


# ------------------------------
# Admin mutations
# ------------------------------
@blogs_bp.route("", methods=["POST"])
@jwt_required()
@live_store_required
@admin_required
def create_blog():
    data = request.get_json(silent=True) or {}
    if any(not data.get(f) for f in REQUIRED_FIELDS):
        return jsonify({"message": "Please include title, summary, content, and author"}), 400

    blog = Blog(tags=[], is_featured=False)
    _apply_fields(blog, data)
    db.session.add(blog)
    db.session.commit()
    current_app.logger.info(f"[blogs] created id={blog.id}")

    return jsonify(blog.to_dict()), 201


@blogs_bp.route("/<int:blog_id>", methods=["PUT"])
@jwt_required()
@live_store_required
@admin_required
def update_blog(blog_id: int):
    blog = Blog.query.get(blog_id)
    if not blog:
        return jsonify({"message": "Blog not found"}), 404

    _apply_fields(blog, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(blog.to_dict()), 200


@blogs_bp.route("/<int:blog_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
@admin_required
def delete_blog(blog_id: int):
    blog = Blog.query.get(blog_id)
    if not blog:
        return jsonify({"message": "Blog not found"}), 404

    db.session.delete(blog)
    db.session.commit()
    return jsonify({"message": "Blog removed"}), 200
