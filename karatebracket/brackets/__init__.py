"""Brackets blueprint."""

from flask import Blueprint

bp = Blueprint("brackets", __name__, url_prefix="/brackets")

from . import routes  # noqa: E402, F401
from .models import Bracket, BracketMatch, CompetitorRef, Round  # noqa: E402
from .services import BracketService  # noqa: E402

__all__ = ["Bracket", "BracketMatch", "BracketService", "CompetitorRef", "Round", "routes"]
