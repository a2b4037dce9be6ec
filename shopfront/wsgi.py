"""WSGI entrypoint: ``gunicorn shopfront.wsgi:app`` or ``flask --app shopfront.wsgi run``."""

from shopfront.app.factory import create_app

app = create_app()


def main() -> None:
    app.run(host=app.config["APP_HOST"], port=app.config["APP_PORT"])


if __name__ == "__main__":
    main()
