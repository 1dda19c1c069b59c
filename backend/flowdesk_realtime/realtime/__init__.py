"""
Real-time module for Socket.IO based fan-out.
"""
from flowdesk_realtime.realtime.socket import sio

__all__ = ["sio"]
