"""Recipe Utils - Grammar-driven parsing of recipe ingredient lines."""

__version__ = "0.1.0"
__author__ = "Kurt Thorn"
__email__ = "kurt.thorn@gmail.com"

from . import dictionary, exceptions, ingredients

__all__ = ["dictionary", "exceptions", "ingredients"]
