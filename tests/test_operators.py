"""
test_operators.py
~~~~~~~~~~~~~~~~~

Unit tests for the layer operators.
"""

import pytest
import numpy as np

from inference_engine.array import Array
from inference_engine.exceptions import ShapeMismatch, DimensionMismatch
from inference_engine.operators import (
    Operator,
    Flatten,
    ReLU,
    LinearCombination,
    SoftMax
)


@pytest.fixture
def linear_layer():
    """4 inputs, 2 outputs, weights stored row-major."""
    weights = [
        1., 5.,
        2., 6.,
        3., 7.,
        4., 8.,
    ]
    return LinearCombination(weights, [2., 2.], [4, 2])


@pytest.mark.unit
class TestFlatten:
    """Test the Flatten layer."""

    def test_flat_input_is_unchanged(self):
        output = Flatten().execute(Array([1., 2., 3., 4.], [4]))

        assert output.data.tolist() == [1., 2., 3., 4.]
        assert output.dimensions == (4,)

    def test_two_dimensional_input(self):
        output = Flatten().execute(Array([1., 2., 3., 4., 5., 6.], [2, 3]))

        assert output.n_dim == 1
        assert output.dimensions == (6,)
        assert output.data.tolist() == [1., 2., 3., 4., 5., 6.]

    def test_input_shape_is_not_modified(self):
        input_array = Array([1., 2., 3., 4.], [2, 2])
        Flatten().execute(input_array)

        assert input_array.dimensions == (2, 2)

    def test_has_no_parameters(self):
        assert Flatten().count_parameters() == 0


@pytest.mark.unit
class TestReLU:
    """Test the ReLU layer."""

    def test_negative_values_are_clamped(self):
        output = ReLU().execute(Array([4., -1., 5., 0., -2.], [5]))

        assert output.data.tolist() == [4., 0., 5., 0., 0.]

    def test_idempotent(self):
        values = np.random.RandomState(0).randn(20)
        first = ReLU().execute(Array(values, [20])).copy()
        second = ReLU().execute(first)

        assert np.array_equal(first.data, second.data)

    def test_keeps_input_shape(self):
        output = ReLU().execute(Array([-1., 2., -3., 4.], [2, 2]))

        assert output.dimensions == (2, 2)

    def test_buffer_is_reused(self):
        relu = ReLU()
        first = relu.execute(Array([1., -1.], [2]))
        buffer = first.data
        second = relu.execute(Array([-3., 3.], [2]))

        assert second.data is buffer
        assert second.data.tolist() == [0., 3.]

    def test_nan_is_clamped_to_zero(self):
        output = ReLU().execute(Array([float("nan"), -1., 2.], [3]))

        assert output.data.tolist() == [0., 0., 2.]

    def test_different_length_resizes_output(self):
        relu = ReLU()
        relu.execute(Array([1., -1.], [2]))
        output = relu.execute(Array([-1., 2., 3.], [3]))

        assert output.data.tolist() == [0., 2., 3.]

    def test_has_no_parameters(self):
        assert ReLU().count_parameters() == 0


@pytest.mark.unit
class TestLinearCombination:
    """Test the affine layer."""

    def test_known_result(self, linear_layer):
        output = linear_layer.execute(Array([1., 2., 3., 4.], [4]))

        assert output.data.tolist() == [32., 72.]
        assert output.dimensions == (2,)

    def test_repeated_calls_do_not_accumulate(self, linear_layer):
        linear_layer.execute(Array([1., 2., 3., 4.], [4]))
        output = linear_layer.execute(Array([1., 2., 3., 4.], [4]))

        assert output.data.tolist() == [32., 72.]

    def test_zero_input_gives_bias(self, linear_layer):
        linear_layer.execute(Array([1., 2., 3., 4.], [4]))
        output = linear_layer.execute(Array([0., 0., 0., 0.], [4]))

        assert output.data.tolist() == [2., 2.]

    def test_matches_matrix_product(self):
        rng = np.random.RandomState(1)
        weights = rng.randn(5, 3)
        bias = rng.randn(3)
        x = rng.randn(5)

        layer = LinearCombination(weights.reshape(-1), bias, weights.shape)
        output = layer.execute(Array(x, [5]))

        assert np.allclose(output.data, x @ weights + bias)

    def test_bias_not_dividing_weights_raises(self):
        with pytest.raises(DimensionMismatch):
            LinearCombination([1., 2., 3., 4., 5.], [1., 1.])

    def test_empty_bias_raises(self):
        with pytest.raises(DimensionMismatch):
            LinearCombination([1., 2.], [])

    def test_weights_columns_must_match_bias(self):
        with pytest.raises(DimensionMismatch):
            LinearCombination(np.ones(12), [1., 1.], [3, 4])

    def test_own_output_as_input(self):
        layer = LinearCombination([1., 2., 3., 4.], [0., 0.], [2, 2])
        first = layer.execute(Array([1., 1.], [2]))

        assert first.data.tolist() == [4., 6.]

        second = layer.execute(first)

        assert second is first
        assert second.data.tolist() == [22., 32.]

    def test_weights_dimensions_must_match(self):
        with pytest.raises(ShapeMismatch):
            LinearCombination([1., 2., 3., 4.], [1., 1.], [3, 2])

    def test_wrong_input_length_raises(self, linear_layer):
        with pytest.raises(DimensionMismatch):
            linear_layer.execute(Array([1., 2., 3.], [3]))

    def test_count_parameters(self, linear_layer):
        assert linear_layer.count_parameters() == 8 + 2

    def test_sizes(self, linear_layer):
        assert linear_layer.input_size == 4
        assert linear_layer.output_size == 2
        assert repr(linear_layer) == "LinearCombination(in=4, out=2)"


@pytest.mark.unit
class TestSoftMax:
    """Test the SoftMax layer."""

    @pytest.mark.parametrize("values", [
        [1., 2., 3.],
        [0., 0., 0., 0.],
        [-5., 10., 0.5, 3.],
        [700., 710., 705.],
    ])
    def test_output_is_a_distribution(self, values):
        output = SoftMax().execute(Array(values, [len(values)]))

        assert np.isclose(output.data.sum(), 1.0)
        assert np.all(output.data > 0.0)
        assert np.all(output.data < 1.0)

    def test_known_values(self):
        output = SoftMax().execute(Array([1., 2., 3.], [3]))
        expected = np.exp([1., 2., 3.]) / np.exp([1., 2., 3.]).sum()

        assert np.allclose(output.data, expected)

    def test_preserves_ordering(self):
        output = SoftMax().execute(Array([3., 1., 2.], [3]))

        assert int(np.argmax(output.data)) == 0

    def test_empty_input_raises(self):
        with pytest.raises(ShapeMismatch):
            SoftMax().execute(Array.empty())

    def test_has_no_parameters(self):
        assert SoftMax().count_parameters() == 0


@pytest.mark.unit
class TestOperatorBase:
    """Test the shared operator behaviour."""

    def test_initialize_output_is_idempotent(self):
        relu = ReLU()
        relu.initialize_output(3, [3])
        buffer = relu.output.data
        relu.initialize_output(5, [5])

        assert relu.output.data is buffer
        assert len(relu.output) == 3

    def test_operator_is_abstract(self):
        with pytest.raises(TypeError):
            Operator()

    def test_custom_operator(self):
        class Double(Operator):
            def execute(self, input):
                self.initialize_output(len(input), input.dimensions)
                np.multiply(input.data, 2.0, out=self.output.data)
                return self.output

        output = Double().execute(Array([1., 2.], [2]))

        assert output.data.tolist() == [2., 4.]
        assert Double().name == "Double"
