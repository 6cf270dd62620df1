from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for shape-probe tests")
class ShapeProbeTests(unittest.TestCase):
    def test_rank_follows_leftmost_nesting_depth(self) -> None:
        from numrs_jax import probe_shape

        cases = [
            ([1, 2, 3], 1),
            ([[1, 2], [3, 4]], 2),
            ([[[1]]], 3),
            ([[[[1.5]]]], 4),
            ([[[[[1]]]]], 5),
        ]
        for data, rank in cases:
            with self.subTest(data=data):
                self.assertEqual(probe_shape(data).rank, rank)

    def test_shape_is_tagged_variant(self) -> None:
        from numrs_jax import Flat, Nested, probe_shape, shape_from_rank

        self.assertEqual(probe_shape([7]), Flat())
        self.assertEqual(probe_shape([[7]]), Nested(Flat()))
        self.assertEqual(probe_shape([[[7]]]), Nested(Nested(Flat())))
        self.assertEqual(shape_from_rank(3), Nested(Nested(Flat())))
        with self.assertRaises(ValueError):
            shape_from_rank(0)

    def test_only_leftmost_path_is_inspected(self) -> None:
        from numrs_jax import probe_shape

        self.assertEqual(probe_shape([1, [2, 3], "x", None]).rank, 1)
        self.assertEqual(probe_shape([[1], 2, []]).rank, 2)
        self.assertEqual(probe_shape([[-0.0]]).rank, probe_shape([[123456]]).rank)

    def test_tuples_and_other_sequences_are_probed(self) -> None:
        from numrs_jax import probe_shape

        self.assertEqual(probe_shape((1, 2)).rank, 1)
        self.assertEqual(probe_shape(((1,), (2,))).rank, 2)
        self.assertEqual(probe_shape([range(3)]).rank, 2)

    def test_numeric_leaf_classification(self) -> None:
        import jax.numpy as jnp

        from numrs_jax import is_numeric_leaf

        self.assertTrue(is_numeric_leaf(1))
        self.assertTrue(is_numeric_leaf(2.5))
        self.assertTrue(is_numeric_leaf(jnp.asarray(3.0)))
        self.assertFalse(is_numeric_leaf(True))
        self.assertFalse(is_numeric_leaf(1j))
        self.assertFalse(is_numeric_leaf("1"))
        self.assertFalse(is_numeric_leaf(None))
        self.assertFalse(is_numeric_leaf([1]))
        self.assertFalse(is_numeric_leaf(jnp.asarray([1.0])))

    def test_zero_dim_object_without_dtype_is_not_a_leaf(self) -> None:
        from numrs_jax import ShapeProbeError, is_numeric_leaf, probe_shape

        class ShapedThing:
            ndim = 0
            shape = ()

        self.assertFalse(is_numeric_leaf(ShapedThing()))
        with self.assertRaises(ShapeProbeError):
            probe_shape([ShapedThing()])

    def test_array_inputs_use_their_ndim(self) -> None:
        import jax.numpy as jnp

        from numrs_jax import probe_shape

        self.assertEqual(probe_shape(jnp.zeros((2, 3))).rank, 2)
        self.assertEqual(probe_shape([jnp.zeros((2, 3))]).rank, 3)
        self.assertEqual(probe_shape(jnp.zeros((1, 1, 1, 1))).rank, 4)

    def test_empty_levels_raise_probe_error_with_path(self) -> None:
        import jax.numpy as jnp

        from numrs_jax import ShapeProbeError, probe_shape

        with self.assertRaises(ShapeProbeError) as ctx:
            probe_shape([])
        self.assertEqual(ctx.exception.path, ())

        with self.assertRaises(ShapeProbeError) as ctx:
            probe_shape([[[]]])
        self.assertEqual(ctx.exception.path, (0, 0))
        self.assertIn("data[0][0]", str(ctx.exception))

        with self.assertRaises(ShapeProbeError) as ctx:
            probe_shape(jnp.zeros((2, 0)))
        self.assertEqual(ctx.exception.path, (0,))

    def test_non_indexable_values_raise_probe_error(self) -> None:
        from numrs_jax import ShapeProbeError, probe_shape

        for data in (5, None, [None], [[True]], {"a": 1}, "abc", ["abc"], [b"ab"]):
            with self.subTest(data=data):
                with self.assertRaises(ShapeProbeError):
                    probe_shape(data)

    def test_probe_error_is_an_index_error(self) -> None:
        from numrs_jax import ShapeProbeError, probe_shape

        with self.assertRaises(IndexError):
            probe_shape([])
        self.assertTrue(issubclass(ShapeProbeError, IndexError))

    def test_limit_stops_the_walk(self) -> None:
        from numrs_jax import UnsupportedRankError, probe_shape

        self.assertEqual(probe_shape([[[1]]], limit=3).rank, 3)

        with self.assertRaises(UnsupportedRankError) as ctx:
            probe_shape([[[[1]]]], limit=3)
        self.assertEqual(ctx.exception.rank, 4)
        self.assertTrue(ctx.exception.at_least)

    def test_limit_bounds_self_referencing_input(self) -> None:
        from numrs_jax import UnsupportedRankError, probe_shape

        loop: list = []
        loop.append(loop)
        with self.assertRaises(UnsupportedRankError):
            probe_shape(loop, limit=8)


if __name__ == "__main__":
    unittest.main()
