# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

"""Scalar index expressions over shapes and integer arrays.

An index expression is one of:

* a literal, whose integer is known at compile time,
* a symbol, wrapping a runtime `Value` usable in any expression context,
* a dim, wrapping a runtime `Value` only usable as a dimension/loop bound,
* a questionmark, unknown with no handle (optionally tagged with the
  `(source, index)` it was extracted from, for diagnostics),
* undefined, meaning "no such element".

Arrays and shapes are ordered lists of index expressions, one per position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from typing_extensions import Self

from ..support.ir_imports import Value
from .base import check_contract

__all__ = [
    "IndexExpr",
    "IndexExprKind",
    "IndexExprList",
    "format_list",
    "get_literals",
    "is_literal_list",
]


class IndexExprKind(Enum):
    UNDEFINED = auto()
    LITERAL = auto()
    SYMBOL = auto()
    DIM = auto()
    QUESTIONMARK = auto()


@dataclass(frozen=True)
class IndexExpr:
    kind: IndexExprKind
    literal_value: Optional[int] = None
    value: Optional[Value] = None
    provenance: Optional[tuple[Any, int]] = None

    @classmethod
    def undefined(cls) -> Self:
        return cls(IndexExprKind.UNDEFINED)

    @classmethod
    def literal(cls, val: int) -> Self:
        check_contract(
            isinstance(val, int) and not isinstance(val, bool),
            "literal index expression needs an int, got %r",
            val,
        )
        return cls(IndexExprKind.LITERAL, literal_value=int(val))

    @classmethod
    def symbol(cls, value: Value) -> Self:
        check_contract(value is not None, "symbol index expression needs a value")
        return cls(IndexExprKind.SYMBOL, value=value)

    @classmethod
    def dim(cls, value: Value) -> Self:
        check_contract(value is not None, "dim index expression needs a value")
        return cls(IndexExprKind.DIM, value=value)

    @classmethod
    def questionmark(cls, source: Any = None, index: Optional[int] = None) -> Self:
        provenance = None if source is None else (source, index)
        return cls(IndexExprKind.QUESTIONMARK, provenance=provenance)

    def is_undefined(self) -> bool:
        return self.kind == IndexExprKind.UNDEFINED

    def is_defined(self) -> bool:
        return self.kind != IndexExprKind.UNDEFINED

    def is_literal(self) -> bool:
        return self.kind == IndexExprKind.LITERAL

    def is_symbol(self) -> bool:
        return self.kind == IndexExprKind.SYMBOL

    def is_dim(self) -> bool:
        return self.kind == IndexExprKind.DIM

    def is_questionmark(self) -> bool:
        return self.kind == IndexExprKind.QUESTIONMARK

    def has_handle(self) -> bool:
        return self.kind in (IndexExprKind.SYMBOL, IndexExprKind.DIM)

    def get_literal(self) -> int:
        check_contract(
            self.is_literal(), "expected a literal index expression, got %s", self
        )
        return self.literal_value

    def get_value(self) -> Value:
        check_contract(
            self.has_handle(), "expected a symbol or dim index expression, got %s", self
        )
        return self.value

    def __str__(self) -> str:
        match self.kind:
            case IndexExprKind.LITERAL:
                return f"literal({self.literal_value})"
            case IndexExprKind.SYMBOL:
                return f"symbol({_value_name(self.value)})"
            case IndexExprKind.DIM:
                return f"dim({_value_name(self.value)})"
            case IndexExprKind.QUESTIONMARK:
                if self.provenance is None:
                    return "?"
                return f"?(index {self.provenance[1]})"
            case _:
                return "undefined"


def _value_name(value: Value) -> str:
    try:
        return value.get_name()
    except (AttributeError, RuntimeError):
        return "<value>"


# Positions map 1:1 to array index or dimension index.
IndexExprList = list[IndexExpr]


def is_literal_list(exprs: IndexExprList) -> bool:
    return all(e.is_literal() for e in exprs)


def get_literals(exprs: IndexExprList) -> list[int]:
    return [e.get_literal() for e in exprs]


def format_list(exprs: IndexExprList) -> str:
    return "[" + ", ".join(str(e) for e in exprs) + "]"
