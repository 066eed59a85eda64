"""Development entrypoint.

Runs Flask's threaded dev server on PORT (default 3000).
"""

from lottery import create_app
from lottery.logging_config import install_exception_hooks

app = create_app()


if __name__ == "__main__":
    install_exception_hooks()
    app.run(host="127.0.0.1", port=int(app.config["PORT"]), debug=False, threaded=True)
