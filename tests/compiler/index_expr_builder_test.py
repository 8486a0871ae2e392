# Copyright 2024 The IREE Authors
#
# Licensed under the Apache License v2.0 with LLVM Exceptions.
# See https://llvm.org/LICENSE.txt for license information.
# SPDX-License-Identifier: Apache-2.0 WITH LLVM-exception

import logging
import unittest
from unittest import mock

from parameterized import parameterized

from iree.compiler.ir import ArrayAttr, Attribute, Context, Module

from iree.indexexpr.compiler.base import IndexExprContractError
from iree.indexexpr.compiler.index_expr import IndexExpr, get_literals
from iree.indexexpr.compiler.index_expr_builder import IndexExprBuilder
from iree.indexexpr.support import debugging

SHAPES_ASM = r"""
func.func @shapes(%static: tensor<2x3x4xf32>,
                  %dynamic: tensor<2x?x4xf32>,
                  %scalar: tensor<i64>,
                  %array: tensor<3xi64>,
                  %matrix: tensor<2x2xi64>,
                  %unranked: tensor<*xf32>,
                  %dyn_array: tensor<?xi64>,
                  %h0: index, %h1: index, %h2: index) {
  %const = arith.constant dense<[5, 6, 7]> : tensor<3xi64>
  %splat = arith.constant dense<9> : tensor<4xi32>
  %const_scalar = arith.constant dense<11> : tensor<i64>
  return
}
"""


class IndexExprBuilderTest(unittest.TestCase):
    def setUp(self):
        self.enterContext(Context())
        self.module = Module.parse(SHAPES_ASM)
        block = self.module.body.operations[0].regions[0].blocks[0]
        (
            self.static,
            self.dynamic,
            self.scalar,
            self.array,
            self.matrix,
            self.unranked,
            self.dyn_array,
            self.h0,
            self.h1,
            self.h2,
        ) = list(block.arguments)
        operations = list(block.operations)
        self.const = operations[0].result
        self.splat = operations[1].result
        self.const_scalar = operations[2].result
        self.builder = IndexExprBuilder.for_analysis()

    def handles_builder(self, declined=()):
        handles = [self.h0, self.h1, self.h2]

        def get_val(value, i):
            return None if i in declined else handles[i]

        def get_shape_val(value, i):
            return None if i in declined else handles[i]

        return IndexExprBuilder(get_val=get_val, get_shape_val=get_shape_val)

    # Attributes.

    def testAttrLiterals(self):
        attr = ArrayAttr(Attribute.parse("[1, 2, 3]"))
        self.assertEqual(self.builder.get_int_array_attr_size(attr), 3)
        for i, expected in enumerate([1, 2, 3]):
            self.assertEqual(
                self.builder.get_int_array_attr_as_literal(attr, i),
                IndexExpr.literal(expected),
            )
        self.assertTrue(self.builder.get_int_array_attr_as_literal(attr, 3).is_undefined())
        self.assertTrue(self.builder.get_int_array_attr_as_literal(attr, 10).is_undefined())

    @parameterized.expand([(0, 4), (1, -3), (2, 0), (3, 1), (7, -1)])
    def testAttrLiteralDefault(self, i, default):
        attr = ArrayAttr(Attribute.parse("[4, -3, 0]"))
        defined = self.builder.get_int_array_attr_as_literal(attr, i)
        result = self.builder.get_int_array_attr_as_literal(attr, i, default)
        if defined.is_defined():
            self.assertEqual(result, defined)
        else:
            self.assertEqual(result, IndexExpr.literal(default))

    def testEmptyAttr(self):
        attr = ArrayAttr(Attribute.parse("[]"))
        self.assertEqual(self.builder.get_int_array_attr_size(attr), 0)
        self.assertTrue(self.builder.get_int_array_attr_as_literal(attr, 0).is_undefined())

    def testAttrNonIntegerWithAsserts(self):
        attr = ArrayAttr(Attribute.parse('[1, "two"]'))
        with mock.patch.object(debugging.flags, "asserts", True):
            with self.assertRaises(IndexExprContractError):
                self.builder.get_int_array_attr_as_literal(attr, 1)

    # Rank.

    def testRank(self):
        self.assertEqual(self.builder.get_type_rank(self.static), 3)
        self.assertEqual(self.builder.get_type_rank(self.scalar), 0)
        self.assertEqual(self.builder.get_type_rank(self.array), 1)

    def testRankRequiresRankedShapedType(self):
        with self.assertRaises(IndexExprContractError):
            self.builder.get_type_rank(self.unranked)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_type_rank(self.h0)

    # Integer arrays.

    def testArraySize(self):
        self.assertEqual(self.builder.get_int_array_size(self.scalar), 1)
        self.assertEqual(self.builder.get_int_array_size(self.array), 3)
        self.assertEqual(self.builder.get_int_array_size(self.const), 3)

    def testArraySizeContract(self):
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_size(self.matrix)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_size(self.dyn_array)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_as_symbol(self.matrix, 0)

    def testConstantArray(self):
        for i, expected in enumerate([5, 6, 7]):
            self.assertEqual(
                self.builder.get_int_array_as_symbol(self.const, i),
                IndexExpr.literal(expected),
            )
        self.assertTrue(self.builder.get_int_array_as_symbol(self.const, 3).is_undefined())
        exprs = self.builder.get_int_array_as_symbols(self.const)
        self.assertEqual(get_literals(exprs), [5, 6, 7])

    def testConstantArrayIgnoresHandles(self):
        builder = self.handles_builder()
        self.assertEqual(
            builder.get_int_array_as_symbol(self.const, 1), IndexExpr.literal(6)
        )

    def testSplatArray(self):
        exprs = self.builder.get_int_array_as_symbols(self.splat)
        self.assertEqual(get_literals(exprs), [9, 9, 9, 9])

    def testScalarArray(self):
        self.assertEqual(
            self.builder.get_int_array_as_symbol(self.const_scalar, 0),
            IndexExpr.literal(11),
        )
        expr = self.builder.get_int_array_as_symbol(self.scalar, 0)
        self.assertTrue(expr.is_questionmark())
        self.assertTrue(self.builder.get_int_array_as_symbol(self.scalar, 1).is_undefined())

    def testArrayDefault(self):
        self.assertEqual(
            self.builder.get_int_array_as_symbol(self.const, 5, 1),
            IndexExpr.literal(1),
        )
        self.assertEqual(
            self.builder.get_int_array_as_symbol(self.const, 0, 1),
            IndexExpr.literal(5),
        )
        self.assertTrue(self.builder.get_int_array_as_symbol(self.array, 2, 1).is_questionmark())

    def testRuntimeArraySymbols(self):
        builder = self.handles_builder()
        exprs = builder.get_int_array_as_symbols(self.array)
        self.assertEqual(
            exprs,
            [
                IndexExpr.symbol(self.h0),
                IndexExpr.symbol(self.h1),
                IndexExpr.symbol(self.h2),
            ],
        )

    def testRuntimeArrayPositionsAreIndependent(self):
        builder = self.handles_builder(declined=(1,))
        exprs = builder.get_int_array_as_symbols(self.array)
        self.assertTrue(exprs[0].is_symbol())
        self.assertTrue(exprs[1].is_questionmark())
        self.assertEqual(exprs[1].provenance, (self.array, 1))
        self.assertTrue(exprs[2].is_symbol())

    def testSymbolsLength(self):
        exprs = self.builder.get_int_array_as_symbols(self.const, length=2)
        self.assertEqual(get_literals(exprs), [5, 6])
        self.assertEqual(self.builder.get_int_array_as_symbols(self.const, length=0), [])
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_as_symbols(self.const, length=4)

    def testSymbolsUndefinedIsContractError(self):
        builder = IndexExprBuilder()
        with mock.patch.object(
            builder, "get_int_array_as_symbol", return_value=IndexExpr.undefined()
        ):
            with self.assertRaises(IndexExprContractError):
                builder.get_int_array_as_symbols(self.const)

    def testNegativeIndex(self):
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_as_symbol(self.const, -1)
        attr = ArrayAttr(Attribute.parse("[1]"))
        with self.assertRaises(IndexExprContractError):
            self.builder.get_int_array_attr_as_literal(attr, -1)

    # Shapes.

    def testLiteralShape(self):
        self.assertTrue(self.builder.is_literal_shape(self.static))
        self.assertTrue(self.builder.is_literal_shape(self.scalar))
        self.assertFalse(self.builder.is_literal_shape(self.dynamic))
        self.assertTrue(self.builder.is_literal_shape(self.dynamic, 0))
        self.assertFalse(self.builder.is_literal_shape(self.dynamic, 1))
        self.assertTrue(self.builder.is_literal_shape(self.dynamic, 2))

    def testGetShape(self):
        self.assertEqual(self.builder.get_shape(self.static, 1), 3)
        self.assertNotEqual(self.builder.get_shape(self.dynamic, 1), 3)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_shape(self.static, 3)

    def testShapeAsLiterals(self):
        exprs = self.builder.get_shape_as_literals(self.static)
        self.assertEqual(
            exprs,
            [IndexExpr.literal(2), IndexExpr.literal(3), IndexExpr.literal(4)],
        )
        self.assertEqual(self.builder.get_shape_as_literals(self.scalar), [])

    def testShapeAsLiteralContract(self):
        with self.assertRaises(IndexExprContractError):
            self.builder.get_shape_as_literal(self.static, 5)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_shape_as_literal(self.dynamic, 1)
        with self.assertRaises(IndexExprContractError):
            self.builder.get_shape_as_literals(self.dynamic)

    def testShapeAsSymbols(self):
        builder = self.handles_builder()
        self.assertEqual(
            builder.get_shape_as_symbols(self.dynamic),
            [IndexExpr.literal(2), IndexExpr.symbol(self.h1), IndexExpr.literal(4)],
        )

    def testShapeAsDims(self):
        builder = self.handles_builder()
        self.assertEqual(
            builder.get_shape_as_dims(self.dynamic),
            [IndexExpr.literal(2), IndexExpr.dim(self.h1), IndexExpr.literal(4)],
        )

    def testStaticShapeIgnoresHandles(self):
        builder = self.handles_builder()
        self.assertEqual(
            builder.get_shape_as_symbols(self.static),
            builder.get_shape_as_dims(self.static),
        )

    @parameterized.expand([("symbols",), ("dims",)])
    def testDeclinedShapeIsQuestionmark(self, variant):
        builder = self.handles_builder(declined=(1,))
        exprs = getattr(builder, f"get_shape_as_{variant}")(self.dynamic)
        self.assertEqual(exprs[0], IndexExpr.literal(2))
        self.assertTrue(exprs[1].is_questionmark())
        self.assertEqual(exprs[1].provenance, (self.dynamic, 1))
        self.assertEqual(exprs[2], IndexExpr.literal(4))

    def testAnalysisBuilderDeclines(self):
        expr = self.builder.get_shape_as_symbol(self.dynamic, 1)
        self.assertEqual(expr, IndexExpr.questionmark(self.dynamic, 1))

    def testRepeatedCallsAreEqual(self):
        builder = self.handles_builder(declined=(2,))
        self.assertEqual(
            builder.get_shape_as_symbols(self.dynamic),
            builder.get_shape_as_symbols(self.dynamic),
        )
        self.assertEqual(
            builder.get_int_array_as_symbols(self.array),
            builder.get_int_array_as_symbols(self.array),
        )

    @parameterized.expand(
        [
            ("symbols", lambda b, v, out: b.get_shape_as_symbols(v, out)),
            ("dims", lambda b, v, out: b.get_shape_as_dims(v, out)),
            ("literals", lambda b, v, out: b.get_shape_as_literals(v, out)),
            ("array", lambda b, v, out: b.get_int_array_as_symbols(v, out)),
        ]
    )
    def testOutputListIsCleared(self, name, fill):
        value = self.const if name == "array" else self.static
        out = [IndexExpr.questionmark()] * 7
        result = fill(self.builder, value, out)
        self.assertIs(result, out)
        self.assertEqual(len(out), 3)
        self.assertTrue(all(e.is_literal() for e in out))


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    unittest.main()
