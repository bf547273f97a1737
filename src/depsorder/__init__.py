"""deps-order - run commands over a Cargo dependency graph in leaf-first order."""

from .cli import app
from .config import OrderConfig
from .constants import VERSION

__version__ = VERSION
__all__ = ["app", "OrderConfig"]
