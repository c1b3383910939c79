import os

# Dev entry point: debug (and strict invariant checks) on unless overridden
os.environ.setdefault('FLASK_DEBUG', '1')

from lota import create_app, socketio

app = create_app()
 
if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, debug=app.debug)
