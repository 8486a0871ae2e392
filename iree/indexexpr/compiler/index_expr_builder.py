# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

"""Builds index expressions from MLIR shapes, integer arrays and attributes.

Every extraction prefers the most informative representation available:
a compile time literal, else a runtime handle (symbol or dim), else a
questionmark. Out of range positions are undefined. Broken preconditions
(unranked values, too large ranks, indices past the rank) raise
`IndexExprContractError`.
"""

from typing import Optional

from typing_extensions import Self

from ..support import debugging
from ..support.ir_imports import (
    ArrayAttr,
    InsertionPoint,
    IntegerAttr,
    Location,
    ShapedType,
    Value,
)
from ..support.logging import builder_logger as logger
from .accessors import (
    ConstAccessor,
    ElementAccessor,
    MaterializingAccessors,
    ShapeAccessor,
    decline_element,
    decline_shape,
    get_dense_constant,
)
from .base import check_contract
from .index_expr import IndexExpr, IndexExprList

__all__ = [
    "IndexExprBuilder",
]


def _reset(out: Optional[IndexExprList]) -> IndexExprList:
    if out is None:
        return []
    out.clear()
    return out


class IndexExprBuilder:
    """Stateless extraction of index expressions.

    The three accessors are the only way the builder reaches the IR beyond
    reading types and attributes:

    * `get_const(value)` returns the dense integer table of a constant array,
    * `get_val(value, i)` returns a handle to element `i` of an array,
    * `get_shape_val(value, i)` returns a handle to the extent of dimension `i`.

    Each may decline by returning `None`.
    """

    def __init__(
        self,
        get_const: ConstAccessor = get_dense_constant,
        get_val: ElementAccessor = decline_element,
        get_shape_val: ShapeAccessor = decline_shape,
    ):
        self.get_const = get_const
        self.get_val = get_val
        self.get_shape_val = get_shape_val

    @classmethod
    def for_analysis(cls) -> Self:
        """Reads constants but never creates IR."""
        return cls()

    @classmethod
    def for_codegen(
        cls, insertion_point: InsertionPoint, location: Optional[Location] = None
    ) -> Self:
        """Reads constants and materializes extraction ops at `insertion_point`."""
        accessors = MaterializingAccessors(insertion_point, location)
        return cls(
            get_const=get_dense_constant,
            get_val=accessors.get_element,
            get_shape_val=accessors.get_shape,
        )

    # Integer array attributes.

    def get_int_array_attr_size(self, attr: ArrayAttr) -> int:
        return len(attr)

    def get_int_array_attr_as_literal(
        self, attr: ArrayAttr, i: int, default: Optional[int] = None
    ) -> IndexExpr:
        """Element `i` of `attr` as a literal.

        Past the end, returns undefined, or `literal(default)` when a default
        is given (optional trailing entries such as strides and pads).
        """
        check_contract(i >= 0, "negative attribute index %d", i)
        if i >= len(attr):
            if default is not None:
                return IndexExpr.literal(default)
            return IndexExpr.undefined()
        element = attr[i]
        if debugging.flags.asserts:
            check_contract(
                isinstance(element, IntegerAttr),
                "expected integer attribute at index %d, got %s",
                i,
                element,
            )
        return IndexExpr.literal(IntegerAttr(element).value)

    # Rank.

    def get_type_rank(self, value: Value) -> int:
        value_type = value.type
        check_contract(
            isinstance(value_type, ShapedType) and ShapedType(value_type).has_rank,
            "expected shaped type with rank, got %s",
            value_type,
        )
        return ShapedType(value_type).rank

    # Integer array values.

    def get_int_array_size(self, value: Value) -> int:
        rank = self.get_type_rank(value)
        check_contract(
            rank < 2,
            "expected a scalar or a 1 dimension array of int values, got rank %d",
            rank,
        )
        if rank == 0:
            return 1
        shaped_type = ShapedType(value.type)
        check_contract(
            not shaped_type.is_dynamic_dim(0),
            "expected a statically sized int array, got %s",
            shaped_type,
        )
        return shaped_type.get_dim_size(0)

    def get_int_array_as_symbol(
        self, value: Value, i: int, default: Optional[int] = None
    ) -> IndexExpr:
        """Element `i` of the int array `value`.

        Constant arrays yield literals, others a symbol when an element handle
        can be obtained and a questionmark when not. Past the end, returns
        undefined or `literal(default)`.
        """
        check_contract(i >= 0, "negative array index %d", i)
        size = self.get_int_array_size(value)
        if i >= size:
            if default is not None:
                return IndexExpr.literal(default)
            return IndexExpr.undefined()

        table = self.get_const(value)
        if table is not None:
            flat = table.reshape(-1)
            if debugging.flags.asserts:
                check_contract(
                    flat.size == size,
                    "constant table has %d elements, array size is %d",
                    flat.size,
                    size,
                )
            return IndexExpr.literal(int(flat[i]))

        handle = self.get_val(value, i)
        if handle is not None:
            return IndexExpr.symbol(handle)
        logger.debug("No handle for element %d of %s, using questionmark", i, value)
        return IndexExpr.questionmark(value, i)

    def get_int_array_as_symbols(
        self,
        value: Value,
        out: Optional[IndexExprList] = None,
        length: int = -1,
    ) -> IndexExprList:
        """Fills `out` (cleared first) with the first `length` elements.

        `length == -1` means the whole array.
        """
        exprs = _reset(out)
        size = self.get_int_array_size(value)
        if length == -1:
            length = size
        else:
            check_contract(
                0 <= length <= size,
                "requesting %d elements from an array of size %d",
                length,
                size,
            )
        for i in range(length):
            expr = self.get_int_array_as_symbol(value, i)
            check_contract(
                expr.is_defined(), "expected defined index expr at position %d", i
            )
            exprs.append(expr)
        return exprs

    # Shapes.

    def is_literal_shape(self, value: Value, i: Optional[int] = None) -> bool:
        """Whether dimension `i` (or every dimension when `i` is None) is static."""
        if i is not None:
            return self.get_shape(value, i) != ShapedType.get_dynamic_size()
        rank = self.get_type_rank(value)
        return all(self.is_literal_shape(value, d) for d in range(rank))

    def get_shape(self, value: Value, i: int) -> int:
        """Static extent of dimension `i`, or the dynamic size sentinel."""
        rank = self.get_type_rank(value)
        check_contract(
            0 <= i < rank, "expected index %d smaller than rank %d", i, rank
        )
        return ShapedType(value.type).get_dim_size(i)

    def get_shape_as_literal(self, value: Value, i: int) -> IndexExpr:
        extent = self.get_shape(value, i)
        check_contract(
            extent != ShapedType.get_dynamic_size(),
            "expected compile time constant extent for dimension %d of %s",
            i,
            value.type,
        )
        return IndexExpr.literal(extent)

    def get_shape_as_symbol(self, value: Value, i: int) -> IndexExpr:
        if self.is_literal_shape(value, i):
            return self.get_shape_as_literal(value, i)
        handle = self.get_shape_val(value, i)
        if handle is not None:
            return IndexExpr.symbol(handle)
        logger.debug("No handle for extent %d of %s, using questionmark", i, value)
        return IndexExpr.questionmark(value, i)

    def get_shape_as_dim(self, value: Value, i: int) -> IndexExpr:
        if self.is_literal_shape(value, i):
            return self.get_shape_as_literal(value, i)
        handle = self.get_shape_val(value, i)
        if handle is not None:
            return IndexExpr.dim(handle)
        logger.debug("No handle for extent %d of %s, using questionmark", i, value)
        return IndexExpr.questionmark(value, i)

    def get_shape_as_literals(
        self, value: Value, out: Optional[IndexExprList] = None
    ) -> IndexExprList:
        exprs = _reset(out)
        for i in range(self.get_type_rank(value)):
            exprs.append(self.get_shape_as_literal(value, i))
        return exprs

    def get_shape_as_symbols(
        self, value: Value, out: Optional[IndexExprList] = None
    ) -> IndexExprList:
        exprs = _reset(out)
        for i in range(self.get_type_rank(value)):
            exprs.append(self.get_shape_as_symbol(value, i))
        return exprs

    def get_shape_as_dims(
        self, value: Value, out: Optional[IndexExprList] = None
    ) -> IndexExprList:
        exprs = _reset(out)
        for i in range(self.get_type_rank(value)):
            exprs.append(self.get_shape_as_dim(value, i))
        return exprs
