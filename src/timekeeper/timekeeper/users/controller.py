from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, send_file, send_from_directory, session

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    error_response,
    json_body,
    login_required,
    to_int,
)
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        identifier = data.get("email") or data.get("username") or ""
        s_user = container.auth_service.authenticate(identifier, data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        user = container.user_service.get_user(s_user.user_id)
        return jsonify({"success": True, "message": "Login successful", "user": user.public_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get_user(current_user_id())
        return jsonify({"success": True, "user": user.public_dict()})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_user():
        data = json_body()
        user = container.registration_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            face_image=data.get("faceImage", ""),
            profile_picture=data.get("profilePicture"),
        )
        return jsonify({"success": True, "message": "User registered successfully", "user": user.public_dict()}), 201

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        users = container.user_service.list_users()
        return jsonify({"success": True, "users": [u.public_dict() for u in users]})

    @app.route("/api/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = json_body()
        user = container.user_service.create_user(
            current_role=current_role(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
        )
        return jsonify({"success": True, "message": "User created successfully", "user": user.public_dict()}), 201

    @app.route("/api/users", methods=["PUT"], endpoint="edit_user")
    @admin_required
    def edit_user():
        data = json_body()
        if not data.get("id"):
            return error_response("User ID is required", 400)
        user = container.user_service.update_user(
            current_role=current_role(),
            user_id=to_int(data["id"], "id"),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password"),
        )
        return jsonify({"success": True, "message": "User updated successfully", "user": user.public_dict()})

    @app.route("/api/users", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user():
        user_id = request.args.get("id") or json_body().get("id")
        if not user_id:
            return error_response("User ID is required", 400)
        container.user_service.delete_user(current_role=current_role(), user_id=to_int(user_id, "id"))
        return jsonify({"success": True, "message": "User deleted successfully"})

    @app.route("/api/users/profile", methods=["POST"], endpoint="update_profile_picture")
    @admin_required
    def update_profile_picture():
        user_id = request.form.get("userId")
        if not user_id:
            return error_response("User ID is required", 400)

        upload = request.files.get("file")
        remove = request.form.get("remove") == "true"
        if not remove and upload is None:
            return error_response("No file provided", 400)

        user = container.profile_service.update(
            current_role=current_role(),
            user_id=to_int(user_id, "userId"),
            remove=remove,
            filename=upload.filename if upload else "",
            content_type=upload.mimetype if upload else "",
            data=upload.read() if upload else None,
        )
        return jsonify({"success": True, "profileURL": user.profile_url, "user": user.public_dict()})

    @app.route("/api/users/<int:user_id>/qr", methods=["GET"], endpoint="user_qr_image")
    @login_required
    def user_qr_image(user_id: int):
        if current_role() != Role.ADMIN and user_id != current_user_id():
            return error_response("Forbidden", 403)
        buf = container.scan_service.user_qr_png(user_id)
        return send_file(buf, mimetype="image/png")

    @app.route("/user-profile/<path:filename>", methods=["GET"], endpoint="profile_picture")
    def profile_picture(filename: str):
        return send_from_directory(container.profile_store.root, filename)
