import math

import pytest

from vectorcanvas.geometry import (
    Mat,
    Vec,
    is_same_point,
    line_intersection,
    line_point_dist_sqr,
)


def test_vec_add_sub_round_trip():
    a = Vec(1.5, -2.0)
    b = Vec(3.25, 7.0)
    assert (a + b) - b == a


def test_vec_scalar_multiply_and_divide_round_trip():
    v = Vec(3.0, -4.0)
    assert (v * 2.5) / 2.5 == pytest.approx(v)
    assert 2.0 * v == v * 2.0


def test_norm_has_unit_length():
    v = Vec(3.0, 4.0)
    assert v.norm().length() == pytest.approx(1.0)
    assert v.length() ** 2 == pytest.approx(v.length_sqr())


def test_norm_of_zero_vector_is_nan():
    n = Vec(0.0, 0.0).norm()
    assert (str(n.x), str(n.y)) == ("nan", "nan")


def test_dot_of_perpendicular_vectors_is_zero():
    v = Vec(2.0, 5.0)
    assert v.dot(Vec(-v.y, v.x)) == 0


def test_angle_to_perpendicular_is_half_pi():
    assert Vec(1.0, 0.0).angle_to(Vec(0.0, 3.0)) == pytest.approx(math.pi / 2)


def test_atan2_matches_math():
    v = Vec(-1.0, 2.0)
    assert v.atan2() == math.atan2(2.0, -1.0)


def test_identity_leaves_point_unchanged():
    v = Vec(12.5, -3.0)
    assert v.mul_mat(Mat.identity()) == v


def test_translate_and_scale():
    v = Vec(2.0, 3.0)
    assert v.mul_mat(Mat.translate(10.0, 20.0)) == v + Vec(10.0, 20.0)
    assert v.mul_mat(Mat.scale(4.0, 5.0)) == Vec(v.x * 4.0, v.y * 5.0)


def test_invert_round_trip():
    m = Mat(2.0, 0.5, -1.0, 3.0, 7.0, -2.0)
    v = Vec(1.25, -4.5)
    assert v.mul_mat(m).mul_mat(m.invert()) == pytest.approx(v)
    assert m.multiply(m.invert()) == pytest.approx(Mat.identity())


def test_multiply_applies_left_first():
    a = Mat.scale(2.0, 3.0)
    b = Mat.translate(5.0, -1.0)
    v = Vec(1.0, 1.0)
    assert v.mul_mat(a @ b) == pytest.approx(v.mul_mat(a).mul_mat(b))


def test_invert_singular_raises():
    with pytest.raises(ValueError):
        Mat().invert()


def test_is_same_point():
    assert is_same_point(Vec(1.0, 1.0), Vec(1.05, 0.95), 0.1)
    assert not is_same_point(Vec(1.0, 1.0), Vec(1.2, 1.0), 0.1)


def test_line_intersection_of_crossing_segments():
    a0, a1 = Vec(0.0, 0.0), Vec(2.0, 2.0)
    b0, b1 = Vec(0.0, 2.0), Vec(2.0, 0.0)
    point, p, q = line_intersection(a0, a1, b0, b1)
    assert point == pytest.approx(a0 + (a1 - a0) * p)
    assert point == pytest.approx(b0 + (b1 - b0) * q)
    assert 0 < p < 1 and 0 < q < 1


def test_line_intersection_of_parallel_lines_is_infinite():
    _, p, q = line_intersection(Vec(0, 0), Vec(1, 1), Vec(0, 1), Vec(1, 2))
    assert p == math.inf and q == math.inf


def test_line_intersection_degenerate_segment():
    _, p, _ = line_intersection(Vec(1, 1), Vec(1, 1), Vec(0, 0), Vec(3, 5))
    assert p == math.inf


def test_line_point_dist_sqr():
    a, b = Vec(0.0, 0.0), Vec(10.0, 0.0)
    assert line_point_dist_sqr(a, b, Vec(5.0, 0.0)) == 0
    assert line_point_dist_sqr(a, b, Vec(3.0, 4.0)) == pytest.approx(16.0)


def test_line_point_dist_sqr_degenerate_line_is_nan():
    result = line_point_dist_sqr(Vec(1, 1), Vec(1, 1), Vec(2, 2))
    assert str(result) == "nan"