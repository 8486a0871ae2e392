# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

"""Unifies all imports of iree.compiler.ir into one place."""

from iree.compiler.ir import (
    ArrayAttr,
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
)

from iree.compiler.dialects import (
    arith as arith_d,
    memref as memref_d,
    tensor as tensor_d,
)
