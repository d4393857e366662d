"""babel-magma - evaluate Magma source blocks in sessions or remotely."""

from .expand import expand_body
from .framework import BabelHost
from .types import HLINE, ExecutionRequest, Symbol

__version__ = "0.1.0"

__all__ = ["HLINE", "BabelHost", "ExecutionRequest", "Symbol", "expand_body"]
