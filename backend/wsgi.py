try:
    from backend.krakel.server import create_app
except ImportError:  # pragma: no cover
    from krakel.server import create_app

app, socketio = create_app()
