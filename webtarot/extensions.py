"""Flask extensions and database setup."""
from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO

# SQLAlchemy instance
db = SQLAlchemy()

# Rate limiter - storage comes from RATELIMIT_STORAGE_URI (Redis in deployments)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"],
    strategy="fixed-window",
)

# WebSocket server for interpretation notifications
socketio = SocketIO()
