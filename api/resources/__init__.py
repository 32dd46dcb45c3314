"""
Per-table resource registrations.
"""

from .registry import RESOURCES, mount_resources

__all__ = ["RESOURCES", "mount_resources"]
