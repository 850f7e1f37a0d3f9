"""Pluggable diff/patch strategies.

A strategy produces opaque payloads such that
``strategy.patch(strategy.diff(a, b), a) == b`` for any strings ``a`` and ``b``.
The history engine never looks inside a payload.
"""
from __future__ import annotations

import difflib
from typing import Any, List, Optional, Protocol, Tuple

from script_history.config import get_settings
from script_history.errors import CorruptHistory, InvalidArgument


class PatchStrategy(Protocol):
    def diff(self, current: str, target: str) -> Any:
        """Build a payload that reconstructs `target` from `current`."""
        ...

    def patch(self, payload: Any, current: str) -> str:
        """Apply a payload produced by `diff` to `current`."""
        ...


class LinePatchStrategy:
    """
    Line-level patches built from difflib opcodes.

    Payload is a list of ops:
      ["=", n]        keep the next n lines of the base
      ["-", n]        drop the next n lines of the base
      ["+", [lines]]  insert lines
    """

    def diff(self, current: str, target: str) -> List[list]:
        base = current.splitlines(keepends=True)
        other = target.splitlines(keepends=True)
        ops: List[list] = []
        matcher = difflib.SequenceMatcher(None, base, other, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                ops.append(["=", i2 - i1])
            elif tag == "delete":
                ops.append(["-", i2 - i1])
            elif tag == "insert":
                ops.append(["+", other[j1:j2]])
            else:  # replace
                ops.append(["-", i2 - i1])
                ops.append(["+", other[j1:j2]])
        return ops

    def patch(self, payload: Any, current: str) -> str:
        base = current.splitlines(keepends=True)
        if not isinstance(payload, (list, tuple)):
            raise CorruptHistory(
                "line patch payload must be a list of ops",
                details={"payload_type": type(payload).__name__},
            )
        out: List[str] = []
        pos = 0
        for op in payload:
            kind, arg = _check_op(op)
            if kind == "+":
                out.extend(arg)
                continue
            if pos + arg > len(base):
                raise CorruptHistory(
                    "patch runs past the end of the base text",
                    details={"position": pos, "count": arg, "lines": len(base)},
                )
            if kind == "=":
                out.extend(base[pos:pos + arg])
            pos += arg
        if pos != len(base):
            raise CorruptHistory(
                "patch does not cover the base text",
                details={"position": pos, "lines": len(base)},
            )
        return "".join(out)


def _check_op(op: Any) -> Tuple[str, Any]:
    if not isinstance(op, (list, tuple)) or len(op) != 2:
        raise CorruptHistory(f"malformed patch op: {op!r}")
    kind, arg = op
    if kind == "+":
        if not isinstance(arg, (list, tuple)) or not all(isinstance(line, str) for line in arg):
            raise CorruptHistory("insert op must carry a list of lines", details={"op": kind})
    elif kind in ("=", "-"):
        if isinstance(arg, bool) or not isinstance(arg, int) or arg < 0:
            raise CorruptHistory(
                f"patch op {kind!r} needs a non-negative line count",
                details={"op": kind, "count": repr(arg)},
            )
    else:
        raise CorruptHistory(f"unknown patch op: {kind!r}", details={"op": repr(kind)})
    return kind, arg


class FullTextPatchStrategy:
    """Stores the whole target text as the payload."""

    def diff(self, current: str, target: str) -> str:
        return target

    def patch(self, payload: Any, current: str) -> str:
        if not isinstance(payload, str):
            raise CorruptHistory("full-text patch payload must be a string")
        return payload


_STRATEGIES = {
    "lines": LinePatchStrategy,
    "full": FullTextPatchStrategy,
}


def patch_strategy_from_env(backend: Optional[str] = None) -> PatchStrategy:
    name = (backend or get_settings().patch_backend).strip().lower()
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise InvalidArgument(
            f"unknown patch backend: {name}",
            details={"backend": name, "available": sorted(_STRATEGIES)},
        ) from None
