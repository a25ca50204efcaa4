"""Syntax feature table: which grammar level admits which construct.

The JavaScript grammar always parses the newest syntax, and it is lenient
about context. Version conformance and context rules are decided here:
every node is mapped to the features it uses, and each feature carries the
minimum grammar level that allows it. Rules that no version allows (a
``return`` at top level, ``with`` in strict code) use the NEVER level.

Adding a newly standardized construct:
  1. If presence of a node type alone implies it, add it to NODE_FEATURES.
  2. Otherwise add a checker to _CHECKERS keyed by node type.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from tree_sitter import Node

# Level for syntax that no ECMAScript version accepts
NEVER = 10_000


class Scope(Enum):
    """Function context a node is evaluated in (for ``await``)."""

    TOP = "top"
    ASYNC = "async"
    SYNC = "sync"


@dataclass(frozen=True)
class Context:
    """What the position of a node allows.

    The evaluator derives a child's context from its parent's with
    child_context(): functions reset jump targets, classes turn on strict
    mode, loops and labels add jump targets.
    """

    module_mode: bool = False
    strict: bool = False
    scope: Scope = Scope.TOP
    in_function: bool = False
    new_target: bool = False
    super_property: bool = False
    breakable: bool = False
    in_loop: bool = False
    labels: frozenset[str] = frozenset()
    loop_labels: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Feature:
    """A syntax construct and the lowest grammar level that admits it.

    ``message`` overrides the generated description for faults that do not
    depend on the version (script/module grammar mismatches, misplaced
    statements, non-ECMAScript syntax).
    """

    name: str
    level: int
    message: Optional[str] = None


# ── Features implied by the node type alone ────────────────────────

NODE_FEATURES: dict[str, Feature] = {
    # ES2015
    "arrow_function": Feature("arrow function", 6),
    "class_declaration": Feature("class", 6),
    "class": Feature("class", 6),
    "template_string": Feature("template literal", 6),
    "generator_function_declaration": Feature("generator function", 6),
    "generator_function": Feature("generator function", 6),
    "object_pattern": Feature("destructuring", 6),
    "array_pattern": Feature("destructuring", 6),
    "assignment_pattern": Feature("default value", 6),
    "shorthand_property_identifier": Feature("shorthand property", 6),
    "computed_property_name": Feature("computed property name", 6),
    # ES2020
    "optional_chain": Feature("optional chaining", 11),
    "namespace_export": Feature("export * as namespace", 11),
    # ES2022
    "field_definition": Feature("class field", 13),
    "class_static_block": Feature("class static block", 13),
    "private_property_identifier": Feature("private name", 13),
    # Not ECMAScript at all
    "jsx_element": Feature("JSX", NEVER, "JSX is not ECMAScript syntax"),
    "jsx_self_closing_element": Feature("JSX", NEVER, "JSX is not ECMAScript syntax"),
    "decorator": Feature("decorator", NEVER, "Decorators are not ECMAScript syntax"),
    "hash_bang_line": Feature("hashbang", NEVER, "Unexpected character '#'"),
}

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

LOOP_TYPES = frozenset({"for_statement", "for_in_statement", "while_statement", "do_statement"})

# Words that ES3 refuses as property names (a.class, {default: 1})
RESERVED_WORDS = frozenset(
    "break case catch class const continue debugger default delete do else enum "
    "export extends false finally for function if import in instanceof new null "
    "return super switch this throw true try typeof var void while with".split()
)

# Minimum level per regular expression flag
REGEX_FLAG_LEVELS = {"g": 3, "i": 3, "m": 3, "y": 6, "u": 6, "s": 9, "d": 13, "v": 15}

BINARY_OPERATOR_FEATURES = {
    "**": Feature("exponentiation operator", 7),
    "??": Feature("nullish coalescing", 11),
}

ASSIGNMENT_OPERATOR_FEATURES = {
    "**=": Feature("exponentiation assignment", 7),
    "&&=": Feature("logical assignment", 12),
    "||=": Feature("logical assignment", 12),
    "??=": Feature("logical assignment", 12),
}

_MODULE_SYNTAX = Feature(
    "import/export",
    NEVER,
    "'import' and 'export' may appear only with 'sourceType: module'",
)
_AWAIT_OUTSIDE_ASYNC = Feature(
    "await", NEVER, "Cannot use keyword 'await' outside an async function"
)


# ── Helpers ────────────────────────────────────────────────────────


def node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _tokens(node: Node) -> list[str]:
    """Types of the anonymous (keyword/punctuation) children."""
    return [child.type for child in node.children if not child.is_named]


def _has_trailing_comma(node: Node, closer: str) -> bool:
    children = node.children
    return len(children) >= 2 and children[-1].type == closer and children[-2].type == ","


def _label(node: Node) -> Optional[Node]:
    label = node.child_by_field_name("label")
    if label is not None:
        return label
    for child in node.named_children:
        if child.type == "statement_identifier":
            return child
    return None


def is_async(node: Node) -> bool:
    return "async" in _tokens(node)


def is_generator(node: Node) -> bool:
    return node.type.startswith("generator_") or "*" in _tokens(node)


def function_scope(node: Node) -> Scope:
    """Scope that the body of a function-like node introduces."""
    return Scope.ASYNC if is_async(node) else Scope.SYNC


def has_use_strict(body: Node) -> bool:
    """Whether the directive prologue of a program or function body holds 'use strict'."""
    for child in body.named_children:
        if child.type in ("comment", "hash_bang_line"):
            continue
        if child.type != "expression_statement" or child.named_child_count == 0:
            return False
        expression = child.named_children[0]
        if expression.type != "string":
            return False
        if node_text(expression)[1:-1] == "use strict":
            return True
    return False


# ── Context transitions ────────────────────────────────────────────


def root_context(root: Node, module_mode: bool) -> Context:
    """Context of the top-level statements. Module code is always strict."""
    return Context(module_mode=module_mode, strict=module_mode or has_use_strict(root))


def child_context(node: Node, context: Context) -> Context:
    """Context that the children of ``node`` are evaluated in."""
    if not node.is_named:
        return context
    if node.type in FUNCTION_TYPES:
        return _function_context(node, context)
    if node.type in ("class_declaration", "class"):
        return replace(context, strict=True)
    if node.type in ("field_definition", "class_static_block"):
        return replace(
            context,
            scope=Scope.SYNC,
            in_function=False,
            new_target=True,
            super_property=True,
            breakable=False,
            in_loop=False,
            labels=frozenset(),
            loop_labels=frozenset(),
        )
    if node.type in LOOP_TYPES:
        return replace(context, breakable=True, in_loop=True)
    if node.type == "switch_statement":
        return replace(context, breakable=True)
    if node.type == "labeled_statement":
        return _labeled_context(node, context)
    return context


def _function_context(node: Node, context: Context) -> Context:
    arrow = node.type == "arrow_function"
    body = node.child_by_field_name("body")
    return replace(
        context,
        scope=function_scope(node),
        strict=context.strict or (body is not None and has_use_strict(body)),
        in_function=True,
        # Arrows see the new.target and super of the enclosing function
        new_target=context.new_target if arrow else True,
        super_property=context.super_property if arrow else node.type == "method_definition",
        breakable=False,
        in_loop=False,
        labels=frozenset(),
        loop_labels=frozenset(),
    )


def _labeled_context(node: Node, context: Context) -> Context:
    label = _label(node)
    if label is None:
        return context
    name = node_text(label)
    body = node.child_by_field_name("body")
    while body is not None and body.type == "labeled_statement":
        body = body.child_by_field_name("body")
    loop_labels = context.loop_labels
    if body is not None and body.type in LOOP_TYPES:
        loop_labels = loop_labels | {name}
    return replace(context, labels=context.labels | {name}, loop_labels=loop_labels)


# ── Context-dependent checkers ─────────────────────────────────────
# Each returns the features a node uses beyond its bare type.

Checker = Callable[["Node", Context], list[Feature]]


def _check_function(node: Node, context: Context) -> list[Feature]:
    if not is_async(node):
        return []
    if is_generator(node):
        return [Feature("async generator", 9)]
    return [Feature("async function", 8)]


def _check_method(node: Node, context: Context) -> list[Feature]:
    features = _check_function(node, context)
    parent = node.parent
    if parent is None or parent.type != "object":
        return features
    tokens = _tokens(node)
    if "get" in tokens or "set" in tokens:
        features.append(Feature("getter/setter", 5))
    elif "*" in tokens:
        features.append(Feature("generator method", 6))
    else:
        features.append(Feature("method shorthand", 6))
    return features


def _check_lexical(node: Node, context: Context) -> list[Feature]:
    kind = node.child_by_field_name("kind")
    keyword = kind.type if kind is not None else "let"
    return [Feature(f"'{keyword}' declaration", 6)]


def _check_for_in(node: Node, context: Context) -> list[Feature]:
    tokens = _tokens(node)
    features = []
    if "await" in tokens:
        features.append(Feature("for-await-of loop", 9))
        if context.scope is Scope.TOP and context.module_mode:
            features.append(Feature("top-level await", 13))
        elif context.scope is not Scope.ASYNC:
            features.append(
                Feature("for await", NEVER, "Cannot use 'for await' outside an async function")
            )
    elif "of" in tokens:
        features.append(Feature("for-of loop", 6))
    for keyword in ("let", "const"):
        if keyword in tokens:
            features.append(Feature(f"'{keyword}' declaration", 6))
    return features


def _check_object(node: Node, context: Context) -> list[Feature]:
    features = []
    if _has_trailing_comma(node, "}"):
        features.append(Feature("trailing comma in object literal", 5))
    proto_keys = 0
    for child in node.named_children:
        if child.type != "pair":
            continue
        key = child.child_by_field_name("key")
        if key is None:
            continue
        if key.type == "property_identifier" and node_text(key) == "__proto__":
            proto_keys += 1
        elif key.type == "string" and node_text(key)[1:-1] == "__proto__":
            proto_keys += 1
    if proto_keys > 1:
        features.append(Feature("__proto__", NEVER, "Redefinition of __proto__ property"))
    return features


def _check_parameters(node: Node, context: Context) -> list[Feature]:
    if _has_trailing_comma(node, ")"):
        return [Feature("trailing comma in parameter list", 8)]
    return []


def _check_arguments(node: Node, context: Context) -> list[Feature]:
    if _has_trailing_comma(node, ")"):
        return [Feature("trailing comma in argument list", 8)]
    return []


def _check_spread(node: Node, context: Context) -> list[Feature]:
    parent = node.parent
    if parent is not None and parent.type == "object":
        return [Feature("object spread", 9)]
    return [Feature("spread", 6)]


def _check_rest(node: Node, context: Context) -> list[Feature]:
    parent = node.parent
    if parent is not None and parent.type == "object_pattern":
        return [Feature("object rest", 9)]
    return [Feature("rest element", 6)]


def _check_binary(node: Node, context: Context) -> list[Feature]:
    operator = node.child_by_field_name("operator")
    if operator is None:
        return []
    feature = BINARY_OPERATOR_FEATURES.get(operator.type)
    return [feature] if feature is not None else []


def _check_augmented(node: Node, context: Context) -> list[Feature]:
    operator = node.child_by_field_name("operator")
    if operator is None:
        return []
    feature = ASSIGNMENT_OPERATOR_FEATURES.get(operator.type)
    return [feature] if feature is not None else []


def _check_unary(node: Node, context: Context) -> list[Feature]:
    operator = node.child_by_field_name("operator")
    if not context.strict or operator is None or operator.type != "delete":
        return []
    argument = node.child_by_field_name("argument")
    while argument is not None and argument.type == "parenthesized_expression":
        argument = argument.named_children[0] if argument.named_child_count else None
    if argument is not None and argument.type == "identifier":
        return [Feature("delete", NEVER, "Deleting local variable in strict mode")]
    return []


def _check_number(node: Node, context: Context) -> list[Feature]:
    text = node_text(node).lower()
    features = []
    if text.startswith(("0b", "0o")):
        features.append(Feature("binary/octal literal", 6))
    if text.endswith("n"):
        features.append(Feature("BigInt literal", 11))
    if "_" in text:
        features.append(Feature("numeric separator", 12))
    if context.strict and len(text) > 1 and text[0] == "0" and text[1].isdigit():
        features.append(Feature("legacy octal literal", NEVER, "Octal literal in strict mode"))
    return features


def regex_pattern_features(pattern: str, unicode: bool) -> list[Feature]:
    """Features used by a regular expression body.

    Escapes are skipped as a unit and character classes are tracked, so
    ``[(?<]`` or ``\\(?<`` are plain characters. Property escapes exist only
    under the ``u``/``v`` flags; elsewhere ``\\p`` is an identity escape.
    """
    names: list[str] = []
    in_class = False
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            if unicode and pattern[index + 1 : index + 3] in ("p{", "P{"):
                names.append("unicode property escape")
            index += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "(" and pattern.startswith("?<", index + 1):
            if pattern[index + 3 : index + 4] in ("=", "!"):
                names.append("regular expression lookbehind")
            else:
                names.append("regular expression named group")
        index += 1
    return [Feature(name, 9) for name in dict.fromkeys(names)]


def _check_regex(node: Node, context: Context) -> list[Feature]:
    features = []
    flags_node = node.child_by_field_name("flags")
    flags = node_text(flags_node) if flags_node is not None else ""
    for flag in flags:
        level = REGEX_FLAG_LEVELS.get(flag, NEVER)
        if level > 3:
            features.append(Feature(f"regular expression flag '{flag}'", level))
    pattern = node.child_by_field_name("pattern")
    source = node_text(pattern) if pattern is not None else ""
    features.extend(regex_pattern_features(source, unicode="u" in flags or "v" in flags))
    return features


def _check_catch(node: Node, context: Context) -> list[Feature]:
    if "(" not in _tokens(node):
        return [Feature("optional catch binding", 10)]
    return []


def _check_call(node: Node, context: Context) -> list[Feature]:
    function = node.child_by_field_name("function")
    if function is not None and function.type == "import":
        return [Feature("dynamic import", 11)]
    return []


def _check_module_statement(node: Node, context: Context) -> list[Feature]:
    if not context.module_mode:
        return [_MODULE_SYNTAX]
    return [Feature("import/export", 6)]


def _check_meta_property(node: Node, context: Context) -> list[Feature]:
    text = node_text(node).replace(" ", "")
    if text.startswith("import"):
        if not context.module_mode:
            return [Feature("import.meta", NEVER, "Cannot use 'import.meta' outside a module")]
        return [Feature("import.meta", 11)]
    features = [Feature("new.target", 6)]
    if not context.new_target:
        features.append(
            Feature(
                "new.target",
                NEVER,
                "'new.target' can only be used in functions and class static block",
            )
        )
    return features


def _check_super(node: Node, context: Context) -> list[Feature]:
    if context.super_property:
        return []
    return [Feature("super", NEVER, "'super' keyword outside a method")]


def _is_call_form(node: Node) -> bool:
    """``await(x)``: in script code outside async functions this is a call."""
    argument = node.named_children[0] if node.named_child_count else None
    return argument is not None and node_text(argument).startswith("(")


def _check_await(node: Node, context: Context) -> list[Feature]:
    if context.scope is Scope.ASYNC:
        return []
    if context.module_mode:
        if context.scope is Scope.TOP:
            return [Feature("top-level await", 13)]
        return [_AWAIT_OUTSIDE_ASYNC]
    if _is_call_form(node):
        return []
    return [_AWAIT_OUTSIDE_ASYNC]


def _check_return(node: Node, context: Context) -> list[Feature]:
    if context.in_function:
        return []
    return [Feature("return", NEVER, "'return' outside of function")]


def _check_jump(node: Node, context: Context) -> list[Feature]:
    keyword = "break" if node.type == "break_statement" else "continue"
    label = _label(node)
    if label is not None:
        targets = context.labels if keyword == "break" else context.loop_labels
        allowed = node_text(label) in targets
    else:
        allowed = context.breakable if keyword == "break" else context.in_loop
    if allowed:
        return []
    return [Feature(keyword, NEVER, f"Unsyntactic {keyword}")]


def _check_with(node: Node, context: Context) -> list[Feature]:
    if context.strict:
        return [Feature("with", NEVER, "'with' in strict mode")]
    return []


def _check_member(node: Node, context: Context) -> list[Feature]:
    prop = node.child_by_field_name("property")
    if prop is not None and prop.type == "property_identifier" and node_text(prop) in RESERVED_WORDS:
        return [Feature("reserved word as property name", 5)]
    return []


def _check_pair(node: Node, context: Context) -> list[Feature]:
    key = node.child_by_field_name("key")
    if key is not None and key.type == "property_identifier" and node_text(key) in RESERVED_WORDS:
        return [Feature("reserved word as property name", 5)]
    return []


def _check_escape(node: Node, context: Context) -> list[Feature]:
    if node_text(node).startswith("\\u{"):
        return [Feature("unicode code point escape", 6)]
    return []


_CHECKERS: dict[str, Checker] = {
    "function_declaration": _check_function,
    "function_expression": _check_function,
    "function": _check_function,
    "generator_function_declaration": _check_function,
    "generator_function": _check_function,
    "arrow_function": _check_function,
    "method_definition": _check_method,
    "lexical_declaration": _check_lexical,
    "for_in_statement": _check_for_in,
    "object": _check_object,
    "formal_parameters": _check_parameters,
    "arguments": _check_arguments,
    "spread_element": _check_spread,
    "rest_pattern": _check_rest,
    "binary_expression": _check_binary,
    "augmented_assignment_expression": _check_augmented,
    "unary_expression": _check_unary,
    "number": _check_number,
    "regex": _check_regex,
    "catch_clause": _check_catch,
    "call_expression": _check_call,
    "import_statement": _check_module_statement,
    "export_statement": _check_module_statement,
    "meta_property": _check_meta_property,
    "super": _check_super,
    "await_expression": _check_await,
    "return_statement": _check_return,
    "break_statement": _check_jump,
    "continue_statement": _check_jump,
    "with_statement": _check_with,
    "member_expression": _check_member,
    "pair": _check_pair,
    "escape_sequence": _check_escape,
}


def node_features(node: Node, context: Context) -> list[Feature]:
    """All gated features a single named node uses."""
    features = []
    simple = NODE_FEATURES.get(node.type)
    if simple is not None:
        features.append(simple)
    checker = _CHECKERS.get(node.type)
    if checker is not None:
        features.extend(checker(node, context))
    return features


def blocking_feature(node: Node, context: Context, grammar_level: int) -> Optional[Feature]:
    """The feature of ``node`` that the grammar level rejects, if any.

    When several features are out of reach, the one needing the highest
    level is reported.
    """
    if not node.is_named:
        return None
    blocked = [f for f in node_features(node, context) if f.level > grammar_level]
    if not blocked:
        return None
    return max(blocked, key=lambda f: f.level)
