import pytest

from jigsnap.calibration import (
    PAPER_SIZES,
    ScaleCalibration,
    calibrate_from_manual_reference,
    calibrate_from_reference,
    compute_square_jig_size,
    paper_dimensions,
)
from jigsnap.errors import GeometryInputError
from jigsnap.geometry import BoundingBox
from jigsnap.rectify import ReferenceQuad, destination_corners


def _quad(width, height):
    return ReferenceQuad(corners=destination_corners(width, height), width=width, height=height)


def test_letter_reference_calibration():
    assert calibrate_from_reference(_quad(2159, 2794), 215.9, 279.4) == pytest.approx(10.0)


def test_reference_calibration_ignores_orientation():
    landscape = calibrate_from_reference(_quad(2794, 2159), 215.9, 279.4)
    assert landscape == pytest.approx(10.0)
    swapped = calibrate_from_reference(_quad(2159, 2794), 279.4, 215.9)
    assert swapped == pytest.approx(10.0)


def test_reference_calibration_averages_axes():
    ppu = calibrate_from_reference(_quad(2000, 3000), 200, 300)
    assert ppu == pytest.approx(10.0)
    ppu = calibrate_from_reference(_quad(2100, 3000), 200, 300)
    assert ppu == pytest.approx((10.5 + 10.0) / 2)


def test_reference_calibration_rejects_bad_dimensions():
    with pytest.raises(GeometryInputError):
        calibrate_from_reference(_quad(100, 100), 0, 100)


def test_manual_calibration():
    assert calibrate_from_manual_reference(500, 50) == 10.0
    with pytest.raises(GeometryInputError):
        calibrate_from_manual_reference(500, 0)
    with pytest.raises(GeometryInputError):
        calibrate_from_manual_reference(0, 50)


def test_paper_sizes():
    assert paper_dimensions('letter') == (215.9, 279.4)
    assert paper_dimensions('A4') == (210.0, 297.0)
    assert set(PAPER_SIZES) == {'letter', 'a4'}
    with pytest.raises(GeometryInputError):
        paper_dimensions('legal')


def test_scale_calibration_constructors():
    auto = ScaleCalibration.from_paper(_quad(2159, 2794), 'letter')
    assert auto.method == 'auto'
    assert auto.pixels_per_unit == pytest.approx(10.0)
    assert auto.to_units(50) == pytest.approx(5.0)

    manual = ScaleCalibration.from_manual_reference(300, 25.4)
    assert manual.method == 'manual'
    assert manual.reference_length == 25.4

    with pytest.raises(GeometryInputError):
        ScaleCalibration(pixels_per_unit=0)
    with pytest.raises(GeometryInputError):
        ScaleCalibration(pixels_per_unit=1, method='guess')


class TestSquareJigSize:

    def test_documented_example(self):
        assert compute_square_jig_size({'width': 105, 'height': 60}, 10, 10, 10) == 40.0

    def test_accepts_bounding_box_and_pair(self):
        box = BoundingBox(0, 0, 105, 60)
        assert compute_square_jig_size(box, 10) == 40.0
        assert compute_square_jig_size((60, 105), 10) == 40.0

    def test_exact_multiple_is_not_bumped(self):
        # 100 px at 10 px/mm is 10 mm, plus 2 x 10 mm padding = 30 mm exactly
        assert compute_square_jig_size((100, 50), 10, 10, 10) == 30.0

    def test_rounds_up(self):
        assert compute_square_jig_size((101, 50), 10, 10, 10) == 40.0
        assert compute_square_jig_size((101, 50), 10, 10, 5) == 35.0

    def test_invalid_arguments(self):
        with pytest.raises(GeometryInputError):
            compute_square_jig_size((10, 10), 0)
        with pytest.raises(GeometryInputError):
            compute_square_jig_size((10, 10), 1, rounding_increment=0)
