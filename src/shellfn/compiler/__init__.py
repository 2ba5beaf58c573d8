"""shellfn Compiler - validates items and renders them to shell text."""

from shellfn.compiler.renderer import Renderer
from shellfn.compiler.script import Script

__all__ = ["Renderer", "Script"]
