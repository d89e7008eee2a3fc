"""
Development runner: `python -m api [dev|prod|test]`.

Production deployments serve `api:create_app()` from a WSGI server instead.
"""
import logging
import os
import sys

from . import create_app

logger = logging.getLogger("api")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    app = create_app(argv[0] if argv else None)

    host = os.getenv("FLASK_RUN_HOST", "127.0.0.1")
    port = int(os.getenv("FLASK_RUN_PORT", "8000"))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", False))).lower() in ("1", "true", "yes")

    logger.info("Serving %s on %s:%d (zones loaded: %d)",
                app.config["APP_ENV"], host, port, len(app.extensions["zone_index"].all_zones()))
    try:
        app.run(host=host, port=port, debug=debug)
    finally:
        app.extensions["geocoder"].close()


if __name__ == "__main__":
    main()
