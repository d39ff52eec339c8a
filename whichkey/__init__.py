"""whichkey - key-sequence completion and disclosure for modal editors."""

from .config import WhichKeyConfig
from .host import FeedResult, KeySequenceHost
from .service import RemapSignal, WhichKeyService

__version__ = "0.1.0"

__all__ = [
    "FeedResult",
    "KeySequenceHost",
    "RemapSignal",
    "WhichKeyConfig",
    "WhichKeyService",
]
