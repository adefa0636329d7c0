"""Editors and translators: moving a Codebase between project spaces.

``translator_graph_report`` lives in ``codebase_migrator.translation.graph``
and needs the optional ``graph`` extra (networkx).
"""

from codebase_migrator.translation.editors import Editor
from codebase_migrator.translation.translators import (
    Translator,
    TranslatorGraph,
    TranslatorPath,
    TranslatorStep,
)

__all__ = [
    "Editor",
    "Translator",
    "TranslatorGraph",
    "TranslatorPath",
    "TranslatorStep",
]
