"""
HTTP surface of the ICPC scoreboard: the Flask API and its client.
"""

from .client import ScoreboardClient
from .server import create_app, run_api

__all__ = ["ScoreboardClient", "create_app", "run_api"]
