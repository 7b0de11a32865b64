# dietbuddy/routes/progress_photo_routes.py

from datetime import date

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import current_user_id
from ..data_source import live_store_required
from ..models.social import PhotoLike, ProgressPhoto

photos_bp = Blueprint("progress_photos", __name__)


@photos_bp.route("", methods=["GET"])
@jwt_required()
@live_store_required
def list_photos():
    photos = (
        ProgressPhoto.query.filter_by(user_id=current_user_id())
        .order_by(ProgressPhoto.created_at.desc(), ProgressPhoto.id.desc())
        .all()
    )
    return jsonify([p.to_dict() for p in photos]), 200


@photos_bp.route("", methods=["POST"])
@jwt_required()
@live_store_required
def add_photo():
    data = request.get_json(silent=True) or {}
    image_url = data.get("imageUrl")
    if not isinstance(image_url, str) or not image_url.strip():
        return jsonify({"message": "Image URL is required"}), 400

    caption = data.get("caption") or f"Progress photo from {date.today().isoformat()}"
    photo = ProgressPhoto(user_id=current_user_id(), image_url=image_url.strip(), caption=str(caption))
    db.session.add(photo)
    db.session.commit()
    return jsonify(photo.to_dict()), 201


@photos_bp.route("/<int:photo_id>/like", methods=["PUT"])
@jwt_required()
@live_store_required
def toggle_like(photo_id: int):
    user_id = current_user_id()
    photo = ProgressPhoto.query.get(photo_id)
    if not photo:
        return jsonify({"message": "Photo not found"}), 404

    existing = next((like for like in photo.likes if like.user_id == user_id), None)
    if existing is not None:
        photo.likes.remove(existing)
    else:
        photo.likes.append(PhotoLike(user_id=user_id))
    db.session.commit()

    return jsonify({"likes": photo.liked_by()}), 200


@photos_bp.route("/<int:photo_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
def delete_photo(photo_id: int):
    photo = ProgressPhoto.query.get(photo_id)
    if not photo:
        return jsonify({"message": "Photo not found"}), 404

    if photo.user_id != current_user_id():
        return jsonify({"message": "Not authorized to delete this photo"}), 401

    db.session.delete(photo)
    db.session.commit()
    return jsonify({"message": "Photo removed"}), 200
