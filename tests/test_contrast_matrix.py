import re

import numpy
import pandas
import pytest

from modelcontrasts.contrast_matrix import (
    ContrastMatrix,
    build_contrast_matrix,
    promote_contrast,
)
from modelcontrasts.contrasts import (
    DummyContrasts,
    HelmertContrasts,
    SumContrasts,
    TreatmentContrasts,
)
from modelcontrasts.encoded_columns import EncodedColumnsMetadata
from modelcontrasts.errors import (
    BaseLevelNotFoundError,
    ContrastsSpecificationError,
    InsufficientLevelsError,
    LevelMismatchError,
)
from modelcontrasts.utils.sentinels import UNSET

ALL_CONTRASTS = [
    TreatmentContrasts(),
    SumContrasts(),
    HelmertContrasts(),
    DummyContrasts(),
    TreatmentContrasts(base="c"),
    SumContrasts(base="b"),
    HelmertContrasts(base="d"),
]


class TestBuildContrastMatrix:
    @pytest.mark.parametrize("contrasts", ALL_CONTRASTS)
    @pytest.mark.parametrize("n", [2, 4, 7])
    def test_shape_invariants(self, contrasts, n):
        levels = list("abcdefg")[:n]
        if contrasts.base is not UNSET and contrasts.base not in levels:
            contrasts = type(contrasts)()
        contrast_matrix = build_contrast_matrix(contrasts, levels)
        assert contrast_matrix.levels == tuple(levels)
        assert len(contrast_matrix.levels) == contrast_matrix.matrix.shape[0]
        assert len(contrast_matrix.term_names) == contrast_matrix.matrix.shape[1]
        assert contrast_matrix.contrasts is contrasts

    def test_treatment(self):
        contrast_matrix = build_contrast_matrix(
            TreatmentContrasts(base="a"), ["a", "b", "c"]
        )
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix, [[0, 0], [1, 0], [0, 1]]
        )
        assert contrast_matrix.term_names == ("b", "c")
        assert contrast_matrix.base == "a"
        assert not contrast_matrix.full_rank

    def test_treatment_base(self):
        contrast_matrix = build_contrast_matrix(
            TreatmentContrasts(base="b"), ["a", "b", "c"]
        )
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix, [[1, 0], [0, 0], [0, 1]]
        )
        assert contrast_matrix.term_names == ("a", "c")
        assert contrast_matrix.base == "b"

    def test_sum(self):
        contrast_matrix = build_contrast_matrix(SumContrasts(), ["a", "b", "c"])
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix, [[-1, -1], [1, 0], [0, 1]]
        )
        assert contrast_matrix.term_names == ("b", "c")

    def test_helmert(self):
        contrast_matrix = build_contrast_matrix(
            HelmertContrasts(base="a"), ["a", "b", "c", "d"]
        )
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix,
            [[-1, -1, -1], [1, -1, -1], [0, 2, -1], [0, 0, 3]],
        )
        assert contrast_matrix.term_names == ("b", "c", "d")
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix.sum(axis=0), numpy.zeros(3)
        )

    def test_helmert_base(self):
        contrast_matrix = build_contrast_matrix(
            HelmertContrasts(base="c"), ["a", "b", "c", "d"]
        )
        numpy.testing.assert_array_equal(
            contrast_matrix.matrix,
            [[0, 2, -1], [-1, -1, -1], [1, -1, -1], [0, 0, 3]],
        )
        assert contrast_matrix.term_names == ("a", "b", "d")
        assert contrast_matrix.base == "c"

    def test_dummy(self):
        contrast_matrix = build_contrast_matrix(DummyContrasts(), ["b", "a", "c"])
        numpy.testing.assert_array_equal(contrast_matrix.matrix, numpy.eye(3))
        assert contrast_matrix.term_names == ("b", "a", "c")
        assert contrast_matrix.base is None
        assert contrast_matrix.full_rank

        single = build_contrast_matrix(DummyContrasts(), ["a"])
        numpy.testing.assert_array_equal(single.matrix, [[1]])

    def test_declared_levels_order(self):
        contrast_matrix = build_contrast_matrix(
            TreatmentContrasts(levels=["c", "b", "a"]), ["a", "b", "c"]
        )
        assert contrast_matrix.levels == ("c", "b", "a")
        assert contrast_matrix.term_names == ("b", "a")
        assert contrast_matrix.base == "c"

    def test_level_mismatch(self):
        with pytest.raises(LevelMismatchError) as excinfo:
            build_contrast_matrix(TreatmentContrasts(levels=["a", "b"]), ["a", "b", "c"])
        assert excinfo.value.levels == {"c"}

        with pytest.raises(LevelMismatchError) as excinfo:
            build_contrast_matrix(DummyContrasts(levels=["a", "b"]), ["a", "c"])
        assert excinfo.value.levels == {"b", "c"}

    def test_insufficient_levels(self):
        for contrasts in (TreatmentContrasts(), SumContrasts(), HelmertContrasts()):
            with pytest.raises(InsufficientLevelsError):
                build_contrast_matrix(contrasts, ["a"])
        with pytest.raises(InsufficientLevelsError):
            build_contrast_matrix(DummyContrasts(), [])

    def test_base_level_not_found(self):
        with pytest.raises(BaseLevelNotFoundError):
            build_contrast_matrix(SumContrasts(base="z"), ["a", "b"])

    def test_contrasts_method(self):
        assert SumContrasts().get_contrast_matrix(["a", "b"]) == build_contrast_matrix(
            SumContrasts(), ["a", "b"]
        )


class TestContrastMatrix:
    def test_immutability(self):
        contrast_matrix = build_contrast_matrix(TreatmentContrasts(), ["a", "b"])
        with pytest.raises(ValueError):
            contrast_matrix.matrix[0, 0] = 2
        with pytest.raises(AttributeError):
            contrast_matrix.levels = ("b", "a")

    def test_input_is_copied(self):
        matrix = numpy.array([[0.0], [1.0]])
        contrast_matrix = ContrastMatrix(matrix, ["b"], ["a", "b"], TreatmentContrasts())
        matrix[0, 0] = 5
        assert contrast_matrix.matrix[0, 0] == 0
        assert matrix.flags.writeable

    def test_shape_validation(self):
        with pytest.raises(ContrastsSpecificationError, match="Number of levels"):
            ContrastMatrix(numpy.eye(2), ["a", "b"], ["a"], DummyContrasts())
        with pytest.raises(ContrastsSpecificationError, match="Number of term names"):
            ContrastMatrix(numpy.eye(2), ["a"], ["a", "b"], DummyContrasts())
        with pytest.raises(ContrastsSpecificationError, match="two-dimensional"):
            ContrastMatrix(numpy.ones(2), ["a"], ["a", "b"], DummyContrasts())

    def test_equality(self):
        a = build_contrast_matrix(TreatmentContrasts(), ["a", "b", "c"])
        assert a == build_contrast_matrix(TreatmentContrasts(), ["a", "b", "c"])
        assert a != build_contrast_matrix(SumContrasts(), ["a", "b", "c"])
        assert a != build_contrast_matrix(TreatmentContrasts(), ["a", "c", "b"])
        assert a != "not a contrast matrix"

    def test_hashing(self):
        a = build_contrast_matrix(HelmertContrasts(), ["a", "b", "c"])
        b = build_contrast_matrix(HelmertContrasts(), ["a", "b", "c"])
        assert hash(a) == hash(b)
        assert len({a, b, promote_contrast(a)}) == 2
        metadata = EncodedColumnsMetadata(column_names=("b", "c"), contrast_matrix=a)
        assert hash(metadata) == hash(
            EncodedColumnsMetadata(column_names=("b", "c"), contrast_matrix=b)
        )

    def test_term_names(self):
        contrast_matrix = build_contrast_matrix(SumContrasts(), ["a", "b", "c"])
        assert contrast_matrix.get_term_names("x") == ["x - b", "x - c"]

    def test_to_frame(self):
        contrast_matrix = build_contrast_matrix(TreatmentContrasts(), ["a", "b", "c"])
        pandas.testing.assert_frame_equal(
            contrast_matrix.to_frame(),
            pandas.DataFrame(
                {"b": [0.0, 1.0, 0.0], "c": [0.0, 0.0, 1.0]}, index=["a", "b", "c"]
            ),
        )

    def test_coefficient_matrix(self):
        treatment = build_contrast_matrix(TreatmentContrasts(), ["a", "b", "c"])
        pandas.testing.assert_frame_equal(
            treatment.get_coefficient_matrix(),
            pandas.DataFrame(
                [[1.0, 0.0, 0.0], [-1.0, 1.0, 0.0], [-1.0, 0.0, 1.0]],
                index=["Intercept", "b", "c"],
                columns=["a", "b", "c"],
            ),
        )

        total = build_contrast_matrix(SumContrasts(), ["a", "b", "c"])
        coefficients = total.get_coefficient_matrix()
        assert list(coefficients.index) == ["Intercept", "b", "c"]
        numpy.testing.assert_allclose(coefficients.loc["Intercept"], [1 / 3] * 3)
        numpy.testing.assert_allclose(
            coefficients.loc["b"], [-1 / 3, 2 / 3, -1 / 3], atol=1e-12
        )

        dummy = build_contrast_matrix(DummyContrasts(), ["a", "b"])
        numpy.testing.assert_array_equal(dummy.get_coefficient_matrix(), numpy.eye(2))


class TestPromoteContrast:
    @pytest.mark.parametrize("contrasts", ALL_CONTRASTS[:4])
    def test_promotion(self, contrasts):
        contrast_matrix = build_contrast_matrix(contrasts, ["b", "a", "d", "c"])
        promoted = promote_contrast(contrast_matrix)
        assert promoted.levels == ("b", "a", "d", "c")
        assert promoted.term_names == ("b", "a", "d", "c")
        assert isinstance(promoted.contrasts, DummyContrasts)
        numpy.testing.assert_array_equal(promoted.matrix, numpy.eye(4))
        assert promoted.full_rank

    def test_promotion_respects_declared_levels(self):
        contrast_matrix = build_contrast_matrix(
            HelmertContrasts(levels=["c", "a", "b"], base="a"), ["a", "b", "c"]
        )
        promoted = promote_contrast(contrast_matrix)
        assert promoted.levels == ("c", "a", "b")
        assert promoted == build_contrast_matrix(DummyContrasts(), ["c", "a", "b"])


def test_shared_contrast_matrices_are_unaffected_by_use():
    contrast_matrix = build_contrast_matrix(HelmertContrasts(), ["a", "b", "c"])
    snapshot = contrast_matrix.matrix.copy()
    contrast_matrix.get_coefficient_matrix()
    contrast_matrix.to_frame()
    promote_contrast(contrast_matrix)
    numpy.testing.assert_array_equal(contrast_matrix.matrix, snapshot)
    with pytest.raises(ValueError, match=re.escape("read-only")):
        contrast_matrix.matrix += 1
