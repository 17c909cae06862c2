from __future__ import annotations

from flask import Blueprint

bp = Blueprint("maze_hunter", __name__)

# Handlers attach themselves to bp at import time.
from . import api  # noqa: E402,F401

__all__ = ["bp"]
