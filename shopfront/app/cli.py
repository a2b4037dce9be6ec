from __future__ import annotations

import click
from flask import Blueprint
from werkzeug.security import generate_password_hash

from shopfront.app.extensions import db
from shopfront.app.models import Admin, Category, Product, User

cli_bp = Blueprint("cli", __name__, cli_group=None)


@cli_bp.cli.command("init-db")
def init_db() -> None:
    """Create tables."""
    db.create_all()
    print("DB initialized (tables created).")


@cli_bp.cli.command("seed")
def seed_data() -> None:
    """Seed minimal dev data.

    Safe to run multiple times; it will no-op if data exists.
    """
    db.create_all()

    if not Admin.query.filter_by(email="admin@example.com").first():
        db.session.add(Admin(email="admin@example.com", password_hash=generate_password_hash("Admin123!")))

    if not User.query.filter_by(email="user@example.com").first():
        db.session.add(
            User(
                name="Demo User",
                email="user@example.com",
                phone="555-0100",
                password_hash=generate_password_hash("Password123!"),
            )
        )

    if Product.query.count() == 0:
        shoes = Category(name="Shoes", description="Everyday footwear.")
        bags = Category(name="Bags", description="Totes and backpacks.")
        db.session.add_all([shoes, bags])
        db.session.add_all([
            Product(name="Canvas Sneaker", description="Low-top canvas sneaker.", price_cents=4999, stock=40, category=shoes),
            Product(name="Trail Runner", description="Grippy trail running shoe.", price_cents=8999, stock=25, category=shoes),
            Product(name="Daily Tote", description="Cotton tote with inner pocket.", price_cents=2499, stock=60, category=bags),
            Product(name="Commuter Backpack", description="Padded 15 inch laptop sleeve.", price_cents=6999, stock=30, category=bags),
        ])

    db.session.commit()
    print("Seed complete. Admin: admin@example.com / Admin123!  User: user@example.com / Password123!")


@cli_bp.cli.command("create-admin")
@click.argument("email")
@click.argument("password")
def create_admin(email: str, password: str) -> None:
    """Create a back-office account."""
    email = email.strip().lower()
    if Admin.query.filter_by(email=email).first():
        raise click.ClickException(f"Admin {email} already exists")
    db.session.add(Admin(email=email, password_hash=generate_password_hash(password)))
    db.session.commit()
    print(f"Admin {email} created.")
