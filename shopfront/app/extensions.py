from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_mail import Mail

# Singletons (initialized in app factory)
db = SQLAlchemy()
migrate = Migrate()
mail = Mail()
