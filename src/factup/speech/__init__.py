"""Reading facts aloud."""

from .speaker import Speaker, select_voice

__all__ = ["Speaker", "select_voice"]
