import os

from backend.app import create_app


# Expose a module-level `app` for WSGI servers (gunicorn expects `app:app`).
app = create_app()


if __name__ == "__main__":
    # Local development only: run the built-in server.
    # Do not run this in production; gunicorn will import `app` directly.
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "1") == "1")
