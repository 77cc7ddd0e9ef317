"""Tests for range remapping Pipes and Features."""

import numpy as np
import pytest

from reliefmesh import Feature, Interval, Overflow, Pipe, UV_PIPE


class TestPipeApply:
    @pytest.mark.parametrize("overflow", [Overflow.EXTEND, Overflow.SATURATE])
    @pytest.mark.parametrize("domain, range_", [
        ((0.0, 10.0), (5.0, -5.0)),
        ((-180.0, 180.0), (0.0, 1.0)),
        ((3.0, -2.0), (0.1, 0.7)),
        ((-125.0, -65.0), (-5.0, 5.0)),
    ])
    def test_endpoints_map_exactly(self, domain, range_, overflow):
        pipe = Pipe(domain, range_, overflow)
        assert pipe.apply(domain[0]) == range_[0]
        assert pipe.apply(domain[1]) == range_[1]

    def test_saturate_clamps(self):
        pipe = Pipe((-1.0, 1.0), (-2.0, 0.0), Overflow.SATURATE)
        assert pipe.apply(2.0) == 0.0
        assert pipe.apply(-3.0) == -2.0

    def test_extend_does_not_clamp(self):
        pipe = Pipe((-1.0, 1.0), (-2.0, 0.0), Overflow.EXTEND)
        assert pipe.apply(2.0) == 1.0

    def test_default_overflow_is_extend(self):
        assert Pipe((0, 1), (0, 1)).overflow_policy is Overflow.EXTEND

    def test_midpoint(self):
        pipe = Pipe((-125.0, -65.0), (-5.0, 5.0))
        assert pipe.apply(-95.0) == pytest.approx(0.0)

    def test_inverted_range(self):
        pipe = Pipe((0.0, 10.0), (10.0, 0.0))
        assert pipe.apply(2.0) == pytest.approx(8.0)

    def test_inverted_range_saturates_to_bounds(self):
        pipe = Pipe((0.0, 1.0), (1.0, 0.0), Overflow.SATURATE)
        assert pipe.apply(2.0) == 0.0
        assert pipe.apply(-1.0) == 1.0

    def test_array_input(self):
        pipe = Pipe((0.0, 2.0), (-2.0, 0.0))
        out = pipe.apply([0.0, 1.0, 2.0])
        assert isinstance(out, np.ndarray)
        np.testing.assert_allclose(out, [-2.0, -1.0, 0.0])

    def test_scalar_returns_float(self):
        assert isinstance(Pipe((0, 1), (0, 1)).apply(0.5), float)

    def test_callable(self):
        pipe = Pipe((0.0, 1.0), (0.0, 10.0))
        assert pipe(0.5) == pipe.apply(0.5)


class TestPipeConstruction:
    def test_degenerate_domain_is_widened(self):
        pipe = Pipe((2.0, 2.0), (0.0, 1.0))
        assert pipe.domain == Interval(2.0, 3.0)
        assert pipe.apply(2.5) == pytest.approx(0.5)

    def test_from_values(self):
        pipe = Pipe.from_values([3.0, 1.0, 2.0])
        assert pipe.domain == Interval(1.0, 3.0)
        assert pipe.range == Interval(1.0, 3.0)
        assert pipe.apply(2.0) == pytest.approx(2.0)

    def test_from_values_constant_sample(self):
        pipe = Pipe.from_values([4.0, 4.0])
        assert pipe.domain == Interval(4.0, 5.0)

    def test_from_values_empty(self):
        assert Pipe.from_values([]).domain == Interval(0.0, 1.0)

    def test_bad_overflow(self):
        with pytest.raises(TypeError):
            Pipe((0, 1), (0, 1), "saturate")

    def test_builders_do_not_mutate(self):
        base = Pipe((0.0, 1.0), (0.0, 1.0))
        fitted = base.fit_to((0.0, 5.0))
        widened = base.set_domain((0.0, 2.0))
        clamped = base.overflow(Overflow.SATURATE)

        assert base.range == Interval(0.0, 1.0)
        assert base.domain == Interval(0.0, 1.0)
        assert base.overflow_policy is Overflow.EXTEND

        assert fitted.range == Interval(0.0, 5.0)
        assert widened.domain == Interval(0.0, 2.0)
        assert clamped.overflow_policy is Overflow.SATURATE

    def test_equality(self):
        a = Pipe((0, 1), (2, 3))
        b = Pipe((0.0, 1.0), (2.0, 3.0))
        assert a == b
        assert hash(a) == hash(b)
        assert a != a.overflow(Overflow.SATURATE)

    def test_uv_pipe(self):
        assert UV_PIPE.apply(-180.0) == 0.0
        assert UV_PIPE.apply(180.0) == 1.0
        assert UV_PIPE.apply(0.0) == pytest.approx(0.5)
        assert UV_PIPE.apply(200.0) == 1.0


class TestFeature:
    def test_scale(self):
        out = Feature([0.0, 1.0, 2.0]).fit_to((-2.0, 0.0)).convert()
        np.testing.assert_allclose(out, [-2.0, -1.0, 0.0])

    def test_overflow_saturate(self):
        out = (Feature([0.0, 1.0, 2.0])
               .overflow(Overflow.SATURATE)
               .set_domain((-1.0, 1.0))
               .fit_to((-2.0, 0.0))
               .convert())
        np.testing.assert_allclose(out, [-1.0, 0.0, 0.0])

    def test_overflow_extend_default(self):
        out = (Feature([0.0, 1.0, 2.0])
               .set_domain((-1.0, 1.0))
               .fit_to((-2.0, 0.0))
               .convert())
        np.testing.assert_allclose(out, [-1.0, 0.0, 1.0])

    def test_builders_return_new_feature(self):
        base = Feature([1.0, 2.0, 3.0])
        fitted = base.fit_to((0.0, 10.0))
        np.testing.assert_allclose(base.convert(), [1.0, 2.0, 3.0])
        np.testing.assert_allclose(fitted.convert(), [0.0, 5.0, 10.0])

    def test_empty(self):
        feature = Feature([])
        assert len(feature) == 0
        assert feature.convert().shape == (0,)
