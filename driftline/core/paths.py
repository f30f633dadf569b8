"""Path rendering for differences.

Paths are dotted for object fields and bracketed for array indices:

    user.address[0].street
    [2].name
    matrix[0][1]

The root document has the empty path. Field names are rendered verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union


def child_path(parent: str, name: str) -> str:
    """Path of field ``name`` inside the object at ``parent``."""
    return f"{parent}.{name}" if parent else name


def index_path(parent: str, index: int) -> str:
    """Path of element ``index`` inside the array at ``parent``."""
    return f"{parent}[{index}]"


# ---------------------------------------------------------------------------
# Streaming path stack
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObjectFrame:
    """Structural marker: inside an object, between fields."""


@dataclass
class ArrayFrame:
    """Structural marker: inside an array; ``index`` is the current element."""

    index: int = 0


@dataclass(frozen=True)
class FieldFrame:
    """Field name whose value is currently being consumed."""

    name: str


Frame = Union[ObjectFrame, ArrayFrame, FieldFrame]


class PathStack:
    """
    Path state for lockstep traversal.

    Container frames are pushed on object/array start and popped exactly
    once on the matching end, so ``depth`` always equals the current
    nesting depth. A field frame lives from its name token until its value
    has been fully consumed.
    """

    def __init__(self) -> None:
        self._frames: List[Frame] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def __len__(self) -> int:
        return len(self._frames)

    def top(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def in_object(self) -> bool:
        return isinstance(self.top(), ObjectFrame)

    def in_array(self) -> bool:
        return isinstance(self.top(), ArrayFrame)

    def push_object(self) -> None:
        self._frames.append(ObjectFrame())
        self._depth += 1

    def push_array(self) -> None:
        self._frames.append(ArrayFrame())
        self._depth += 1

    def push_field(self, name: str) -> None:
        self._frames.append(FieldFrame(name))

    def pop_container(self) -> Frame:
        """Pop the innermost container frame on its end token."""
        frame = self.top()
        if not isinstance(frame, (ObjectFrame, ArrayFrame)):
            raise IndexError("No open container on the path stack")
        self._frames.pop()
        self._depth -= 1
        return frame

    def value_done(self) -> None:
        """Record that the value at the current position was fully consumed.

        Pops the field name that owned the value, or advances the enclosing
        array to its next element.
        """
        frame = self.top()
        if isinstance(frame, FieldFrame):
            self._frames.pop()
        elif isinstance(frame, ArrayFrame):
            frame.index += 1

    def render(self) -> str:
        """Path of the value at the current position."""
        parts: List[str] = []
        length = 0
        for frame in self._frames:
            if isinstance(frame, FieldFrame):
                part = f".{frame.name}" if length else frame.name
            elif isinstance(frame, ArrayFrame):
                part = f"[{frame.index}]"
            else:
                continue
            parts.append(part)
            length += len(part)
        return "".join(parts)

    def render_field(self, name: str) -> str:
        """Path of field ``name`` of the object at the current position."""
        return child_path(self.render(), name)
