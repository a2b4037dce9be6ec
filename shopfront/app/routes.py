from flask import Flask

from shopfront.modules.user.routes import bp as user_bp
from shopfront.modules.admin.routes import bp as admin_bp
from shopfront.modules.category.routes import bp as category_bp
from shopfront.modules.product.routes import bp as product_bp
from shopfront.modules.order_status.routes import bp as order_status_bp
from shopfront.modules.coupon.routes import bp as coupon_bp
from shopfront.modules.profile.routes import bp as profile_bp
from shopfront.modules.user_product.routes import bp as user_product_bp
from shopfront.modules.cart.routes import bp as cart_bp
from shopfront.modules.wishlist.routes import bp as wishlist_bp
from shopfront.modules.order.routes import bp as order_bp

# Mount table: prefix -> router
ROUTERS = (
    ("/", user_bp),
    ("/admin", admin_bp),
    ("/admin/category", category_bp),
    ("/admin/product", product_bp),
    ("/admin/orders", order_status_bp),
    ("/admin/coupon", coupon_bp),
    ("/profile", profile_bp),
    ("/products", user_product_bp),
    ("/cart", cart_bp),
    ("/wishlist", wishlist_bp),
    ("/orders", order_bp),
)


def register_routers(app: Flask) -> None:
    for prefix, bp in ROUTERS:
        app.register_blueprint(bp, url_prefix=None if prefix == "/" else prefix)
