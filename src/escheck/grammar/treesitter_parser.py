"""Tree-sitter parser wrapper for the JavaScript grammar.

The compiled grammar is loaded once per process. Parsers are cheap and hold
mutable state, so a fresh one is created for every parse; concurrent
evaluations never share a parser.

Usage:
    tree = parse_javascript(source_bytes)
    tree.root_node.has_error
"""

from __future__ import annotations

from threading import Lock
from typing import TYPE_CHECKING, Any, Optional

import tree_sitter
import tree_sitter_javascript

from ..exceptions import GrammarUnavailableError

if TYPE_CHECKING:
    from tree_sitter import Tree

_language: Optional[Any] = None
_language_lock = Lock()


def get_javascript_language() -> Any:
    """Return the shared tree-sitter Language for JavaScript.

    Raises:
        GrammarUnavailableError: If the compiled grammar cannot be loaded
            (typically an ABI mismatch between tree-sitter and the grammar)
    """
    global _language
    if _language is not None:
        return _language

    with _language_lock:
        if _language is None:
            try:
                # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
                _language = tree_sitter.Language(tree_sitter_javascript.language())
            except (TypeError, ValueError) as e:
                raise GrammarUnavailableError(str(e)) from e
    return _language


def parse_javascript(code: bytes) -> Tree:
    """Parse JavaScript source bytes into a syntax tree.

    Tree-sitter never rejects input: faults show up as ERROR and MISSING
    nodes inside the returned tree.
    """
    parser = tree_sitter.Parser(get_javascript_language())
    return parser.parse(code)
