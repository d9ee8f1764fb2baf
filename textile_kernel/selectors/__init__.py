"""Read-only selectors."""

from textile_kernel.selectors.base import BaseSelector
from textile_kernel.selectors.snapshot_selector import SnapshotSelector

__all__ = ["BaseSelector", "SnapshotSelector"]
