import os

from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    port = int(os.environ.get('PORT', '8080'))
    socketio.run(app, host=os.environ.get('HOST', '127.0.0.1'), port=port,
                 debug=os.environ.get('FLASK_DEBUG') == '1')
