"""Property-based tests for the compressed column engine."""

import numpy as np
from hypothesis import HealthCheck, given, settings, strategies as st
from hypothesis.extra.numpy import arrays

from sparsecol import CompressedColumn

from conftest import assert_csc_invariants, assert_no_explicit_zeros

# The autouse config reset is idempotent across examples
property_settings = settings(
    max_examples=60,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

# Mostly zeros; values with short binary expansions keep sums exact
_ELEMENTS = st.sampled_from([0.0, 0.0, 0.0, 1.0, -1.0, 2.0, -3.0, 0.5])


# Helper strategies for generating test data
@st.composite
def dense_matrices(draw, rows=None, columns=None):
    """Random sparse-ish float64 matrix."""
    if rows is None:
        rows = draw(st.integers(min_value=1, max_value=6))
    if columns is None:
        columns = draw(st.integers(min_value=1, max_value=6))
    return draw(arrays(dtype=np.float64, shape=(rows, columns), elements=_ELEMENTS))


@st.composite
def same_shape_pairs(draw):
    left = draw(dense_matrices())
    right = draw(dense_matrices(*left.shape))
    return left, right


@st.composite
def product_triples(draw):
    """(left, right, inner) shapes for A·B, Aᵗ·B and A·Bᵗ."""
    m = draw(st.integers(min_value=1, max_value=5))
    k = draw(st.integers(min_value=1, max_value=5))
    n = draw(st.integers(min_value=1, max_value=5))
    return draw(dense_matrices(m, k)), draw(dense_matrices(k, n)), draw(dense_matrices(m, n))


@st.composite
def mutation_scripts(draw):
    """Shape plus a sequence of (action, row, column, value) steps."""
    rows = draw(st.integers(min_value=1, max_value=5))
    columns = draw(st.integers(min_value=1, max_value=5))
    steps = draw(st.lists(
        st.tuples(
            st.sampled_from(['add', 'replace', 'remove']),
            st.integers(min_value=0, max_value=rows - 1),
            st.integers(min_value=0, max_value=columns - 1),
            st.sampled_from([1.0, -2.0, 3.5]),
        ),
        max_size=30,
    ))
    return rows, columns, steps


# Construction
@property_settings
@given(dense_matrices())
def test_from_dense_round_trip(dense):
    storage = CompressedColumn.from_dense(dense)

    assert_csc_invariants(storage)
    assert_no_explicit_zeros(storage)
    assert storage.count == np.count_nonzero(dense)
    np.testing.assert_array_equal(storage.to_array(), dense)


# Mutation
@property_settings
@given(mutation_scripts())
def test_mutation_matches_model(script):
    """Every mutation keeps the invariants and agrees with a dict model."""
    rows, columns, steps = script
    storage = CompressedColumn(rows, columns)
    model = {}

    for action, row, column, value in steps:
        key = (row, column)
        if action == 'add':
            assert storage.add(row, column, value) == (key not in model)
            model.setdefault(key, value)
        elif action == 'replace':
            assert storage.replace(row, column, value) == (key in model)
            if key in model:
                model[key] = value
        else:
            assert storage.remove(row, column) == (key in model)
            model.pop(key, None)

        assert_csc_invariants(storage)

    expected = np.zeros((rows, columns))
    for (row, column), value in model.items():
        expected[row, column] = value
    np.testing.assert_array_equal(storage.to_array(), expected)
    assert storage.count == len(model)


@property_settings
@given(dense_matrices(), st.data())
def test_add_then_remove_restores_buffers(dense, data):
    storage = CompressedColumn.from_dense(dense)
    empty = [(r, c) for r in range(dense.shape[0]) for c in range(dense.shape[1]) if dense[r, c] == 0]
    if not empty:
        return
    row, column = data.draw(st.sampled_from(empty))
    before = storage.copy()

    assert storage.add(row, column, 4.0)
    assert storage.remove(row, column)

    assert storage.values == before.values
    assert storage.row_indices == before.row_indices
    np.testing.assert_array_equal(storage.column_pointers, before.column_pointers)


# Algebra
@property_settings
@given(same_shape_pairs())
def test_addition_and_subtraction(pair):
    left, right = pair
    a = CompressedColumn.from_dense(left)
    b = CompressedColumn.from_dense(right)

    for result, expected in ((a + b, left + right), (a - b, left - right), (-a, -left)):
        assert_csc_invariants(result)
        assert_no_explicit_zeros(result)
        np.testing.assert_array_equal(result.to_array(), expected)


@property_settings
@given(same_shape_pairs())
def test_subtraction_inverts_addition(pair):
    left, right = pair
    a = CompressedColumn.from_dense(left)
    b = CompressedColumn.from_dense(right)

    result = (a + b) - b

    assert result.row_indices == a.row_indices
    assert result.values == a.values
    np.testing.assert_array_equal(result.column_pointers, a.column_pointers)


@property_settings
@given(product_triples())
def test_products_match_dense(triple):
    left, right, other = triple
    a = CompressedColumn.from_dense(left)
    b = CompressedColumn.from_dense(right)
    c = CompressedColumn.from_dense(other)

    for result, expected in (
        (a @ b, left @ right),
        (a.transpose_multiply(c), left.T @ other),
        (a.multiply_transpose(c.transpose_multiply(a)), left @ (other.T @ left).T),
        (c.multiply_transpose(b), other @ right.T),
    ):
        assert_csc_invariants(result)
        assert_no_explicit_zeros(result)
        np.testing.assert_array_equal(result.to_array(), expected)


@property_settings
@given(product_triples())
def test_transpose_of_product(triple):
    """(Aᵗ·C)ᵗ equals Cᵗ·A."""
    left, _, other = triple
    a = CompressedColumn.from_dense(left)
    c = CompressedColumn.from_dense(other)

    np.testing.assert_array_equal(
        a.transpose_multiply(c).to_array().T,
        c.transpose_multiply(a).to_array(),
    )
