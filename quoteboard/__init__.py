"""Terminal stock quote dashboard."""
from .config import VERSION

__version__ = VERSION
