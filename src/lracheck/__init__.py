"""lracheck - Static checker for LRA participant annotations.

lracheck validates that classes implementing a long-running-action participant
use the Compensate, Complete, AfterLRA, Forget, Status and Leave callback
markers according to their structural rules.
"""

__version__ = "0.1.0"
__author__ = "lracheck contributors"
__description__ = "Static checker for LRA participant callback annotations"

from lracheck.config import LraCheckConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "LraCheckConfig",
]
