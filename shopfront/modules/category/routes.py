from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for
from sqlalchemy import func

from shopfront.app.extensions import db
from shopfront.app.models import Category
from shopfront.app.common.auth import admin_required, current_admin

bp = Blueprint("category", __name__)


def _name_taken(name: str, exclude_id: int | None = None) -> bool:
    q = Category.query.filter(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    return db.session.query(q.exists()).scalar()


@bp.get("/")
@admin_required
def list_categories():
    categories = Category.query.order_by(Category.name.asc()).all()
    return render_template("admin/categories.html", admin=current_admin(), categories=categories)


@bp.post("/")
@admin_required
def create_category():
    name = (request.form.get("name") or "").strip()
    description = (request.form.get("description") or "").strip() or None

    if not name:
        flash("Category name is required.", "error")
    elif _name_taken(name):
        flash(f"Category '{name}' already exists.", "error")
    else:
        db.session.add(Category(name=name, description=description))
        db.session.commit()
        flash("Category added.", "success")
    return redirect(url_for("category.list_categories"))


@bp.post("/<int:category_id>/edit")
@admin_required
def edit_category(category_id: int):
    category = db.get_or_404(Category, category_id)
    name = (request.form.get("name") or "").strip()
    description = (request.form.get("description") or "").strip() or None

    if not name:
        flash("Category name is required.", "error")
    elif _name_taken(name, exclude_id=category.id):
        flash(f"Category '{name}' already exists.", "error")
    else:
        category.name = name
        category.description = description
        db.session.commit()
        flash("Category updated.", "success")
    return redirect(url_for("category.list_categories"))


@bp.post("/<int:category_id>/toggle")
@admin_required
def toggle_category(category_id: int):
    category = db.get_or_404(Category, category_id)
    category.is_listed = not category.is_listed
    db.session.commit()
    flash(f"Category {'listed' if category.is_listed else 'unlisted'}.", "success")
    return redirect(url_for("category.list_categories"))
