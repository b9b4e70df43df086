"""Translation collaborator boundary."""

from docflux.translate.base import Translator, truncate_for_vendor
from docflux.translate.mymemory import MyMemoryTranslator

__all__ = [
    "MyMemoryTranslator",
    "Translator",
    "truncate_for_vendor",
]
