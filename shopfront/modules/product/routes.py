from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Category, Product
from shopfront.app.common.auth import admin_required, current_admin
from shopfront.app.common.validation import to_cents, to_int

bp = Blueprint("product", __name__)


def validate_form(form) -> tuple[dict | None, str | None]:
    """Returns (cleaned_fields, error_message)."""
    name = (form.get("name") or "").strip()
    if not name:
        return None, "Product name is required."

    price_cents = to_cents(form.get("price"))
    if price_cents is None or price_cents <= 0:
        return None, "Price must be a positive amount."

    stock = to_int(form.get("stock"), default=-1)
    if stock < 0:
        return None, "Stock must be zero or more."

    category_id = to_int(form.get("category_id"))
    if category_id is None or not db.session.get(Category, category_id):
        return None, "Choose an existing category."

    return {
        "name": name,
        "description": (form.get("description") or "").strip() or None,
        "price_cents": price_cents,
        "stock": stock,
        "image_url": (form.get("image_url") or "").strip() or None,
        "category_id": category_id,
    }, None


@bp.get("/")
@admin_required
def list_products():
    products = Product.query.order_by(Product.id.desc()).all()
    return render_template("admin/products.html", admin=current_admin(), products=products)


@bp.get("/new")
@admin_required
def new_product():
    categories = Category.query.order_by(Category.name.asc()).all()
    return render_template("admin/product_form.html", admin=current_admin(), product=None, categories=categories)


@bp.post("/")
@admin_required
def create_product():
    fields, err = validate_form(request.form)
    if err:
        flash(err, "error")
        return redirect(url_for("product.new_product"))

    product = Product(**fields)
    db.session.add(product)
    db.session.commit()
    flash("Product added.", "success")
    return redirect(url_for("product.list_products"))


@bp.get("/<int:product_id>/edit")
@admin_required
def edit_product(product_id: int):
    product = db.get_or_404(Product, product_id)
    categories = Category.query.order_by(Category.name.asc()).all()
    return render_template("admin/product_form.html", admin=current_admin(), product=product, categories=categories)


@bp.post("/<int:product_id>/edit")
@admin_required
def update_product(product_id: int):
    product = db.get_or_404(Product, product_id)
    fields, err = validate_form(request.form)
    if err:
        flash(err, "error")
        return redirect(url_for("product.edit_product", product_id=product.id))

    for key, value in fields.items():
        setattr(product, key, value)
    db.session.commit()
    flash("Product updated.", "success")
    return redirect(url_for("product.list_products"))


@bp.post("/<int:product_id>/toggle")
@admin_required
def toggle_product(product_id: int):
    product = db.get_or_404(Product, product_id)
    product.is_listed = not product.is_listed
    db.session.commit()
    flash(f"Product {'listed' if product.is_listed else 'unlisted'}.", "success")
    return redirect(url_for("product.list_products"))
