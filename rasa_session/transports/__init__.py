"""Duplex connections the session manager runs over."""

from .i_connection import EventHandler, IConnection
from .socketio_connection import SocketIOConnection

__all__ = ["EventHandler", "IConnection", "SocketIOConnection"]
