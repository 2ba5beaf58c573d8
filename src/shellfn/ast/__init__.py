"""Source grammar: item model and parser."""

from shellfn.ast.parser import Parser
from shellfn.ast.spec import Description, FnSignature, Item, ItemArg

__all__ = ["Parser", "Description", "FnSignature", "Item", "ItemArg"]
