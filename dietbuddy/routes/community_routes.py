# dietbuddy/routes/community_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db, rewards
from ..auth import current_user_id
from ..data_source import live_store_required
from ..models.social import Post, PostComment, PostLike

community_bp = Blueprint("community", __name__)

POST_COINS = 5
COMMENT_COINS = 2


def _content(data) -> str:
    content = data.get("content")
    return content.strip() if isinstance(content, str) else ""


@community_bp.route("/posts", methods=["GET"])
@live_store_required
def list_posts():
    posts = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
    return jsonify([p.to_dict() for p in posts]), 200


@community_bp.route("/posts/<int:post_id>", methods=["GET"])
@jwt_required()
@live_store_required
def get_post(post_id: int):
    post = Post.query.get(post_id)
    if not post:
        return jsonify({"message": "Post not found"}), 404
    return jsonify(post.to_dict()), 200


@community_bp.route("/posts", methods=["POST"])
@jwt_required()
@live_store_required
def create_post():
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}
    content = _content(data)
    if not content:
        return jsonify({"message": "Post content is required"}), 400

    images = data.get("images") or []
    if not isinstance(images, list):
        return jsonify({"message": "images must be a list"}), 400

    post = Post(user_id=user_id, content=content, images=[str(i) for i in images])
    db.session.add(post)
    db.session.commit()
    current_app.logger.info(f"[community] post id={post.id} by user_id={user_id}")

    rewards.award_best_effort(user_id, "post", POST_COINS, f"Earned {POST_COINS} coins for posting")
    return jsonify(post.to_dict()), 201


@community_bp.route("/posts/<int:post_id>/like", methods=["PUT"])
@jwt_required()
@live_store_required
def toggle_like(post_id: int):
    user_id = current_user_id()
    post = Post.query.get(post_id)
    if not post:
        return jsonify({"message": "Post not found"}), 404

    existing = next((like for like in post.likes if like.user_id == user_id), None)
    if existing is not None:
        post.likes.remove(existing)
    else:
        post.likes.append(PostLike(user_id=user_id))
    db.session.commit()

    return jsonify({"likes": post.liked_by()}), 200


@community_bp.route("/posts/<int:post_id>/comment", methods=["POST"])
@jwt_required()
@live_store_required
def add_comment(post_id: int):
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}
    content = _content(data)
    if not content:
        return jsonify({"message": "Comment content is required"}), 400

    post = Post.query.get(post_id)
    if not post:
        return jsonify({"message": "Post not found"}), 404

    parent_id = data.get("parentCommentId")
    if parent_id is not None:
        parent = PostComment.query.get(parent_id)
        if not parent or parent.post_id != post.id:
            return jsonify({"message": "Parent comment not found"}), 404

    post.comments.append(PostComment(user_id=user_id, content=content, parent_comment_id=parent_id))
    db.session.commit()

    rewards.award_best_effort(user_id, "comment", COMMENT_COINS, f"Earned {COMMENT_COINS} coins for commenting")
    return jsonify(post.to_dict()), 201


@community_bp.route("/posts/<int:post_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
def delete_post(post_id: int):
    post = Post.query.get(post_id)
    if not post:
        return jsonify({"message": "Post not found"}), 404

    if post.user_id != current_user_id():
        return jsonify({"message": "Not authorized to delete this post"}), 401

    db.session.delete(post)
    db.session.commit()
    return jsonify({"message": "Post removed"}), 200
