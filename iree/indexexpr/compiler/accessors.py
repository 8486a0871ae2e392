# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

"""Host IR accessors used by `IndexExprBuilder`.

The builder only talks to the IR through three capabilities:

* `ConstAccessor`: the dense constant contents of an integer array value,
* `ElementAccessor`: a runtime handle to one element of an integer array,
* `ShapeAccessor`: a runtime handle to one dynamic extent of a shaped value.

Each one returns `None` when it declines. The analysis flavor never touches
the IR; the materializing flavor inserts extraction ops at an insertion point.
"""

from typing import Callable, Optional

import numpy as np

from ..support.ir_imports import (
    DenseIntElementsAttr,
    IndexType,
    InsertionPoint,
    IntegerAttr,
    IntegerType,
    Location,
    MemRefType,
    OpResult,
    RankedTensorType,
    ShapedType,
    Value,
    arith_d,
    memref_d,
    tensor_d,
)
from ..support.logging import accessor_logger as logger

__all__ = [
    "ConstAccessor",
    "ElementAccessor",
    "MaterializingAccessors",
    "ShapeAccessor",
    "decline_element",
    "decline_shape",
    "get_dense_constant",
]

ConstAccessor = Callable[[Value], Optional[np.ndarray]]
ElementAccessor = Callable[[Value, int], Optional[Value]]
ShapeAccessor = Callable[[Value, int], Optional[Value]]

CONSTANT_OP_NAMES = ("arith.constant",)


def get_dense_constant(value: Value) -> Optional[np.ndarray]:
    """Returns the contents of `value` if it is produced by an integer constant.

    The table is an int64 array shaped like the value's type; splats are
    expanded.
    """
    if not isinstance(value, OpResult):
        return None
    op = value.owner
    if op.name not in CONSTANT_OP_NAMES or "value" not in op.attributes:
        return None
    attr = op.attributes["value"]
    if not isinstance(attr, DenseIntElementsAttr):
        return None
    dense = DenseIntElementsAttr(attr)
    shape = tuple(ShapedType(dense.type).shape)
    if dense.is_splat:
        splat = IntegerAttr(dense.get_splat_value()).value
        return np.full(shape, splat, dtype=np.int64)
    table = np.array(dense, dtype=np.int64)
    return table.reshape(shape)


def decline_element(value: Value, i: int) -> Optional[Value]:
    return None


def decline_shape(value: Value, i: int) -> Optional[Value]:
    return None


class MaterializingAccessors:
    """Creates element and dimension handles by emitting extraction ops.

    Ops are inserted at `insertion_point`. Element handles are cast to `index`
    so they can be used directly as sizes and bounds.
    """

    def __init__(
        self, insertion_point: InsertionPoint, location: Optional[Location] = None
    ):
        self.insertion_point = insertion_point
        self.location = location

    def _location_for(self, value: Value) -> Location:
        if self.location is not None:
            return self.location
        return Location.unknown(value.type.context)

    def get_element(self, value: Value, i: int) -> Optional[Value]:
        value_type = value.type
        if not isinstance(value_type, ShapedType):
            return None
        shaped_type = ShapedType(value_type)
        element_type = shaped_type.element_type
        if not isinstance(element_type, (IndexType, IntegerType)):
            return None

        if isinstance(value_type, RankedTensorType):
            extract = tensor_d.extract
        elif isinstance(value_type, MemRefType):
            extract = memref_d.load
        else:
            return None

        with self._location_for(value), self.insertion_point:
            indices = []
            if shaped_type.rank > 0:
                indices = [arith_d.constant(IndexType.get(), i)]
            element = extract(value, indices)
            logger.debug("Materialized element %d of %s", i, value_type)
            if isinstance(element_type, IndexType):
                return element
            return arith_d.index_cast(IndexType.get(), element)

    def get_shape(self, value: Value, i: int) -> Optional[Value]:
        value_type = value.type
        if isinstance(value_type, RankedTensorType):
            dim_op = tensor_d.dim
        elif isinstance(value_type, MemRefType):
            dim_op = memref_d.dim
        else:
            return None

        with self._location_for(value), self.insertion_point:
            index = arith_d.constant(IndexType.get(), i)
            dim = dim_op(value, index)
            logger.debug("Materialized extent %d of %s", i, value_type)
            return dim
