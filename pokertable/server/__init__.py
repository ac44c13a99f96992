"""
PokerTable Server - FastAPI HTTP surface for a single table
"""

from pokertable.server.app import app, create_app

__all__ = ["app", "create_app"]
