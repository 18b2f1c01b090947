"""specweave: contract integrity analysis and implementation resolution."""

from specweave.fix import FixDispatcher, generate_fix_links
from specweave.utils import LocalFileSystem
from specweave.workspace import ImplementationResolver, IntegrityAnalyzer, InventoryBuilder

__all__ = [
    "FixDispatcher",
    "ImplementationResolver",
    "IntegrityAnalyzer",
    "InventoryBuilder",
    "LocalFileSystem",
    "generate_fix_links",
]
