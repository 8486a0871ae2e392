# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

from ..support.logging import builder_logger as logger


class IndexExprError(Exception): ...


class IndexExprContractError(IndexExprError):
    """A caller broke a precondition of the builder.

    This is a compiler bug, not a property of the program being compiled, and
    is never downgraded to a questionmark.
    """


def check_contract(condition: bool, message: str, *args):
    """Raises `IndexExprContractError` unless `condition` holds.

    `message` is a %-style format string applied to `args` lazily.
    """
    if condition:
        return
    text = message % args if args else message
    logger.error("index expression contract violated: %s", text)
    raise IndexExprContractError(text)
