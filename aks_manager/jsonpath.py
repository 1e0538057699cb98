"""A small JSONPath interpreter for selecting columns out of kubectl JSON output.

Supported syntax::

    $                 the document root
    .name  ['name']   object member
    .*     [*]        every list element or object value
    [2]    [-1]       list index, negative counts from the end
    [1:3]  [-1:]      list slice, either bound optional

Anything that does not match (missing member, index out of range, member
access on a list) simply produces no value.
"""

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any

from aks_manager.exceptions import ValidationError


class PathSyntaxError(ValidationError):
    """Exception raised for malformed path expressions."""

    pass


class Step:
    """One selector in a compiled path."""

    def select(self, value: Any) -> Iterable[Any]:
        raise NotImplementedError


class Member(Step):
    def __init__(self, name: str):
        self.name = name

    def select(self, value: Any) -> Iterable[Any]:
        if isinstance(value, dict) and self.name in value:
            yield value[self.name]

    def __repr__(self) -> str:
        return f"Member({self.name!r})"


class Wildcard(Step):
    def select(self, value: Any) -> Iterable[Any]:
        if isinstance(value, list):
            yield from value
        elif isinstance(value, dict):
            yield from value.values()

    def __repr__(self) -> str:
        return "Wildcard()"


class Index(Step):
    def __init__(self, index: int):
        self.index = index

    def select(self, value: Any) -> Iterable[Any]:
        if isinstance(value, list) and -len(value) <= self.index < len(value):
            yield value[self.index]

    def __repr__(self) -> str:
        return f"Index({self.index})"


class Slice(Step):
    def __init__(self, start: int | None, stop: int | None):
        self.start = start
        self.stop = stop

    def select(self, value: Any) -> Iterable[Any]:
        if isinstance(value, list):
            yield from value[self.start : self.stop]

    def __repr__(self) -> str:
        return f"Slice({self.start}, {self.stop})"


_DOT_MEMBER = re.compile(r"\.([A-Za-z_][A-Za-z0-9_\-]*)")
_DOT_WILDCARD = re.compile(r"\.\*")
_BRACKET = re.compile(r"\[\s*([^\]]*?)\s*\]")
_QUOTED = re.compile(r"""^(['"])(.*)\1$""")
_INTEGER = re.compile(r"^-?\d+$")
_SLICE = re.compile(r"^(-?\d+)?\s*:\s*(-?\d+)?$")


def _parse_bracket(content: str, path: str) -> Step:
    if content == "*":
        return Wildcard()

    quoted = _QUOTED.match(content)
    if quoted:
        return Member(quoted.group(2))

    if _INTEGER.match(content):
        return Index(int(content))

    sliced = _SLICE.match(content)
    if sliced:
        start, stop = sliced.groups()
        return Slice(
            int(start) if start is not None else None,
            int(stop) if stop is not None else None,
        )

    raise PathSyntaxError(
        f"Unsupported selector [{content}] in path {path}",
        "Supported selectors: .name, ['name'], .*, [*], [n], [start:stop]",
    )


class JsonPath:
    """A compiled path expression."""

    def __init__(self, path: str, steps: list[Step]):
        self.path = path
        self.steps = tuple(steps)

    def find(self, document: Any) -> list[Any]:
        """Return every value the path selects, in document order."""
        values = [document]
        for step in self.steps:
            values = [selected for value in values for selected in step.select(value)]
        return values

    def __repr__(self) -> str:
        return f"JsonPath({self.path!r})"


@lru_cache(maxsize=128)
def compile_path(path: str) -> JsonPath:
    """
    Compile a path expression.

    Args:
        path: Expression starting with ``$``

    Returns:
        Compiled JsonPath

    Raises:
        PathSyntaxError: If the expression is malformed or unsupported
    """
    text = (path or "").strip()
    if not text.startswith("$"):
        raise PathSyntaxError(f"Path must start with '$': {path!r}")

    steps: list[Step] = []
    pos = 1
    while pos < len(text):
        if text.startswith("..", pos):
            raise PathSyntaxError(f"Recursive descent is not supported: {path}")

        match = _DOT_WILDCARD.match(text, pos)
        if match:
            steps.append(Wildcard())
            pos = match.end()
            continue

        match = _DOT_MEMBER.match(text, pos)
        if match:
            steps.append(Member(match.group(1)))
            pos = match.end()
            continue

        match = _BRACKET.match(text, pos)
        if match:
            steps.append(_parse_bracket(match.group(1), path))
            pos = match.end()
            continue

        raise PathSyntaxError(f"Unexpected {text[pos]!r} at position {pos} in path {path}")

    return JsonPath(text, steps)


def find(path: str, document: Any) -> list[Any]:
    """Compile ``path`` and evaluate it against ``document``."""
    return compile_path(path).find(document)
