"""GrammarEvaluator: judges prepared source text against an EcmaProfile.

Evaluation is a single pre-order walk of the tree-sitter syntax tree. Two
kinds of fault are collected:

1. Structural faults - ERROR and MISSING nodes, i.e. text the grammar cannot
   parse at all.
2. Version gates - well-formed constructs that need a higher grammar level
   than the profile allows (see features.py), module-only syntax in a
   script, or statements their context forbids (a top-level return,
   `with` in strict code).

Only the first fault in document order is reported. Pre-order visits nodes
by non-decreasing start offset, so the walk stops as soon as no later node
can start before the best fault found so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..logging_config import get_logger
from ..profiles import EcmaProfile
from .features import NEVER, Context, Feature, blocking_feature, child_context, root_context
from .models import CONFORMANT, ConformanceResult, NonConformant
from .treesitter_parser import parse_javascript

if TYPE_CHECKING:
    from tree_sitter import Node

logger = get_logger(__name__)

# Longest excerpt copied into a diagnostic
MAX_EXCERPT_CHARS = 80


@dataclass(frozen=True)
class _Fault:
    node: Node
    description: str
    required_level: Optional[int] = None


def evaluate(prepared_text: str, profile: EcmaProfile) -> ConformanceResult:
    """Decide whether ``prepared_text`` conforms to ``profile``.

    Args:
        prepared_text: Source after prepare_source()
        profile: Resolved grammar configuration

    Returns:
        CONFORMANT, or NonConformant describing the first fault
    """
    source = prepared_text.encode("utf-8")
    tree = parse_javascript(source)
    fault = _first_fault(tree.root_node, profile)
    if fault is None:
        return CONFORMANT

    line, column = _position(source, fault.node)
    return NonConformant(
        line=line,
        column=column,
        code=_excerpt(source, fault.node),
        message=f"{fault.description} ({line}:{column})",
        required_level=fault.required_level,
    )


def _first_fault(root: Node, profile: EcmaProfile) -> Optional[_Fault]:
    best: Optional[_Fault] = None
    stack: list[tuple[Node, Context]] = [(root, root_context(root, profile.module_mode))]

    while stack:
        node, context = stack.pop()
        if best is not None and node.start_byte >= best.node.start_byte:
            break

        fault = _node_fault(node, context, profile)
        if fault is not None:
            best = fault
            # Nothing inside this node can start before it
            continue

        inner = child_context(node, context)
        stack.extend((child, inner) for child in reversed(node.children))

    if best is not None:
        logger.debug(f"First fault at byte {best.node.start_byte}: {best.description}")
    return best


def _node_fault(node: Node, context: Context, profile: EcmaProfile) -> Optional[_Fault]:
    if node.is_missing:
        return _Fault(node, f"Missing {node.type}")
    if node.is_error:
        return _Fault(node, "Unexpected token")

    feature = blocking_feature(node, context, profile.grammar_level)
    if feature is None:
        return None
    return _Fault(node, _describe(feature, profile), _required_level(feature))


def _describe(feature: Feature, profile: EcmaProfile) -> str:
    if feature.message is not None:
        return feature.message
    return f"'{feature.name}' is not supported by {profile.name}"


def _required_level(feature: Feature) -> Optional[int]:
    return None if feature.level >= NEVER else feature.level


def _position(source: bytes, node: Node) -> tuple[int, int]:
    """1-based line and 0-based character column of a node's start.

    Tree-sitter columns count bytes; they are converted to characters so
    positions match what an editor shows.
    """
    row, byte_column = node.start_point
    line_start = node.start_byte - byte_column
    prefix = source[line_start : node.start_byte]
    return row + 1, len(prefix.decode("utf-8", errors="replace"))


def _excerpt(source: bytes, node: Node) -> str:
    """First line of the node's text, or of the source line for empty nodes."""
    text = source[node.start_byte : node.end_byte]
    if not text.strip():
        line_end = source.find(b"\n", node.start_byte)
        text = source[node.start_byte : line_end if line_end != -1 else len(source)]
    first_line = text.decode("utf-8", errors="replace").splitlines()[0] if text else ""
    return first_line.rstrip()[:MAX_EXCERPT_CHARS]
