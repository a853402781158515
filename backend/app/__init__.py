from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # In-memory game engine, one per app so tests get isolated state
    from app.gateway import SocketIOGateway
    from app.services.games import BackgroundScheduler, GameController, Matchmaker, SessionRegistry
    gateway = SocketIOGateway(socketio, flask_app.config['SOCKETIO_NAMESPACE'])
    controller = GameController(
        SessionRegistry(),
        gateway,
        BackgroundScheduler(socketio),
        flask_app.config,
        logger=flask_app.logger,
    )
    flask_app.extensions['games'] = controller
    flask_app.extensions['matchmaker'] = Matchmaker(controller, gateway, logger=flask_app.logger)

    from app.main import main
    flask_app.register_blueprint(main)

    # Register Socket.IO event handlers
    from app.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app.config['SOCKETIO_NAMESPACE'])

    return flask_app
