"""Tests for bitdepth_viz.core.session — per-image state and memoization."""

import numpy as np
import pytest
from bitdepth_viz.core.quantizer import quantize
from bitdepth_viz.core.session import Session
from bitdepth_viz.core.types import InvalidParameter, PixelBuffer


@pytest.fixture
def original() -> PixelBuffer:
    rng = np.random.default_rng(11)
    return PixelBuffer(rng.integers(0, 256, (16, 16, 4), dtype=np.uint8))


class TestSession:
    def test_defaults_to_original_depth(self, original: PixelBuffer) -> None:
        session = Session(original)
        assert session.bit_depth == 8
        assert session.original_bit_depth == 8
        assert session.export_name == 'processed-8bit.png'

    def test_set_bit_depth(self, original: PixelBuffer) -> None:
        session = Session(original)
        session.bit_depth = 3
        assert session.result().bit_depth == 3
        assert session.result().buffer == quantize(original, 3)
        assert session.export_name == 'processed-3bit.png'

    def test_rejects_bad_depth(self, original: PixelBuffer) -> None:
        session = Session(original)
        with pytest.raises(InvalidParameter):
            session.bit_depth = 0
        assert session.bit_depth == 8

    def test_original_depth_caps_range(self, original: PixelBuffer) -> None:
        session = Session(original, original_bit_depth=4)
        assert session.bit_depth == 4
        with pytest.raises(InvalidParameter):
            session.bit_depth = 5

    def test_rejects_bad_original_depth(self, original: PixelBuffer) -> None:
        with pytest.raises(InvalidParameter):
            Session(original, original_bit_depth=9)

    def test_result_memoized(self, original: PixelBuffer) -> None:
        session = Session(original)
        session.bit_depth = 2
        assert session.result() is session.result()
        assert session.result(2) is session.result()

    def test_result_rejects_bool_after_cache(self, original: PixelBuffer) -> None:
        session = Session(original)
        session.result(1)
        with pytest.raises(InvalidParameter):
            session.result(True)

    def test_result_rejects_out_of_range(self, original: PixelBuffer) -> None:
        session = Session(original, original_bit_depth=4)
        with pytest.raises(InvalidParameter):
            session.result(6)

    def test_results_independent_of_history(self, original: PixelBuffer) -> None:
        session = Session(original)
        for depth in (1, 5, 2):
            session.bit_depth = depth
            session.result()
        fresh = Session(original)
        fresh.bit_depth = 2
        assert session.result() == fresh.result()

    def test_original_not_mutated(self, original: PixelBuffer) -> None:
        before = original.pixels.copy()
        session = Session(original)
        session.sweep()
        np.testing.assert_array_equal(session.original.pixels, before)

    def test_reset(self, original: PixelBuffer) -> None:
        session = Session(original)
        session.bit_depth = 1
        first = session.result()
        session.reset()
        assert session.bit_depth == 8
        session.bit_depth = 1
        assert session.result() is not first
        assert session.result() == first

    def test_sweep_order(self, original: PixelBuffer) -> None:
        depths = [r.bit_depth for r in Session(original).sweep()]
        assert depths == [8, 7, 6, 5, 4, 3, 2, 1]

    def test_sweep_histograms_sum(self, original: PixelBuffer) -> None:
        for result in Session(original).sweep():
            assert result.histogram.total == 256
