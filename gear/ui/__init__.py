"""UI package."""

from .gear_widget import GearWidget

__all__ = ["GearWidget"]
