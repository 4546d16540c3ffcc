import logging
import sys

from app.constants import APP_PORT, DEBUG_MODE


def configure_logging():
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if DEBUG_MODE else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )


configure_logging()

from app.controller import create_app  # noqa: E402

app = create_app()

if __name__ == '__main__':
    logging.getLogger(__name__).info(f"Webhook server started on port {APP_PORT}")
    app.run(host='0.0.0.0', port=APP_PORT, debug=DEBUG_MODE, use_reloader=False, threaded=True)
