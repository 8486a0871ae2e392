"""
The indexexpr package builds scalar index expressions from the shapes,
integer array values and integer array attributes of MLIR programs.
"""

# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

from .compiler import (
    IndexExpr,
    IndexExprBuilder,
    IndexExprContractError,
    IndexExprError,
    IndexExprKind,
    IndexExprList,
)
