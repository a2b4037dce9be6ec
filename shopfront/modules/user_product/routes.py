from __future__ import annotations

from flask import Blueprint, abort, current_app, render_template, request
from sqlalchemy import or_

from shopfront.app.extensions import db
from shopfront.app.models import Category, Product
from shopfront.app.common.auth import current_user
from shopfront.app.common.lookups import item_counts
from shopfront.app.common.validation import to_int
from shopfront.modules.user.routes import visible_products

bp = Blueprint("user_product", __name__)

SORTS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "price_asc": (Product.price_cents.asc(), Product.id.asc()),
    "price_desc": (Product.price_cents.desc(), Product.id.asc()),
}


@bp.get("/")
def list_products():
    search = (request.args.get("q") or "").strip()
    category_id = to_int(request.args.get("category"))
    sort = (request.args.get("sort") or "newest").strip()
    page = max(1, to_int(request.args.get("page"), default=1))

    q = visible_products()
    if search:
        like = f"%{search}%"
        q = q.filter(or_(Product.name.ilike(like), Product.description.ilike(like)))
    if category_id is not None:
        q = q.filter(Product.category_id == category_id)
    q = q.order_by(*SORTS.get(sort, SORTS["newest"]))

    pagination = q.paginate(page=page, per_page=current_app.config["PER_PAGE"], error_out=False)
    categories = Category.query.filter_by(is_listed=True).order_by(Category.name.asc()).all()

    user = current_user()
    count, wishcount = item_counts(user)
    return render_template(
        "user/products.html",
        user=user,
        count=count,
        wishcount=wishcount,
        products=pagination.items,
        pagination=pagination,
        categories=categories,
        search=search,
        category_id=category_id,
        sort=sort,
    )


@bp.get("/<int:product_id>")
def product_detail(product_id: int):
    product = db.session.get(Product, product_id)
    if not product or not product.is_visible:
        abort(404)

    user = current_user()
    count, wishcount = item_counts(user)
    return render_template("user/product_detail.html", user=user, count=count, wishcount=wishcount, product=product)
