# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

import logging

from .debugging import flags

__all__ = [
    "accessor_logger",
    "builder_logger",
    "get_logger",
]


class DefaultFormatter(logging.Formatter):
    def __init__(self):
        super().__init__(
            "%(levelname)s %(asctime)s [%(filename)s:%(lineno)d] %(message)s",
            "%m-%d %H:%M:%S",
        )


def _setup_logger():
    root_logger = logging.getLogger("indexexpr")
    root_logger.setLevel(logging.WARNING)
    handler = logging.StreamHandler()
    handler.setFormatter(DefaultFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False
    return root_logger, handler


root_logger, default_handler = _setup_logger()


def get_logger(name: str):
    logger = logging.getLogger(name)
    logger.setLevel(flags.log_level)
    return logger


builder_logger = get_logger("indexexpr.builder")
accessor_logger = get_logger("indexexpr.accessors")
