"""Tests for metaballs.renderer: field evaluation, classification and markers.

Test suites:
1. Per-pixel evaluation (field_value) and its vectorised twin
2. On/off classification, including coincident-source degeneracies
3. Centre markers (shape, clipping, toggling)
4. Buffer contract (size, read-only, atomic failure)
5. Determinism

Run:
    pytest tests/test_renderer.py -v
"""

import math

import numpy as np
import pytest

from metaballs.field import Metaball, MetaballField, generate_random
from metaballs.geometry import Point
from metaballs.palettes import get_scheme
from metaballs.renderer import RenderOptions, field_value, field_values, render, render_frame

ON = (255, 0, 0, 255)
OFF = (0, 0, 0, 255)
MARKER = (0, 0, 255, 255)


# ============================================================================
# FIXTURES / HELPERS
# ============================================================================

def make_field(*balls, goo=2.0, threshold=1.0, width=32, height=32):
    return MetaballField(
        goo=goo,
        threshold=threshold,
        width=width,
        height=height,
        metaballs=[Metaball(Point(x, y), size) for x, y, size in balls],
    )


def pixel(buffer, field, x, y):
    i = (y * field.width + x) * 4
    return tuple(buffer[i:i + 4])


def rendered(field, opts=None):
    buf = bytearray(field.pixel_count * 4)
    render(buf, field, opts or RenderOptions())
    return buf


@pytest.fixture
def centre_field():
    """Single source of size 50 at the centre of a 32×32 raster."""
    return make_field((16, 16, 50.0), goo=2.0, threshold=49.9)


@pytest.fixture
def random_field():
    return generate_random(1.6, 0.5, 48, 40, np.random.default_rng(99))


# ============================================================================
# 1. EVALUATION
# ============================================================================

def test_field_value_inverse_square():
    field = make_field((0, 0, 50.0), goo=2.0)
    assert field_value(field, 3, 4) == pytest.approx(50.0 / 25.0)


def test_field_value_sums_sources():
    field = make_field((0, 0, 10.0), (10, 0, 20.0), goo=1.0)
    assert field_value(field, 5, 0) == pytest.approx(10.0 / 5 + 20.0 / 5)


def test_field_value_goo_changes_falloff():
    field = make_field((0, 0, 8.0), goo=1.0)
    assert field_value(field, 4, 0) == pytest.approx(2.0)
    field.goo = 3.0
    assert field_value(field, 4, 0) == pytest.approx(8.0 / 64.0)


def test_field_value_coincident_is_infinite():
    field = make_field((5, 5, 10.0))
    assert field_value(field, 5, 5) == math.inf


def test_field_value_coincident_zero_size_is_nan():
    field = make_field((5, 5, 0.0))
    assert math.isnan(field_value(field, 5, 5))


def test_field_value_coincident_negative_size():
    field = make_field((5, 5, -10.0))
    assert field_value(field, 5, 5) == -math.inf


def test_field_values_match_per_pixel(random_field):
    grid = field_values(random_field)
    assert grid.shape == (random_field.height, random_field.width)
    for y in range(0, random_field.height, 3):
        for x in range(0, random_field.width, 3):
            assert np.isclose(grid[y, x], field_value(random_field, x, y), rtol=1e-12, equal_nan=True)


def test_field_values_no_warnings(recwarn):
    field = make_field((5, 5, 0.0), (6, 6, 10.0))
    field_values(field)
    assert not [w for w in recwarn if issubclass(w.category, RuntimeWarning)]


# ============================================================================
# 2. CLASSIFICATION
# ============================================================================

def test_centre_on_far_off(centre_field):
    buf = rendered(centre_field)
    assert pixel(buf, centre_field, 16, 16) == ON
    # distance 1 → 50 > 49.9
    assert pixel(buf, centre_field, 17, 16) == ON
    assert pixel(buf, centre_field, 0, 0) == OFF
    assert pixel(buf, centre_field, 31, 31) == OFF


def test_threshold_above_max_turns_everything_off(centre_field):
    # Only the coincident pixel reaches inf; nothing exceeds an infinite threshold
    centre_field.threshold = math.inf
    buf = rendered(centre_field)
    frame = np.frombuffer(bytes(buf), dtype=np.uint8).reshape(32, 32, 4)
    assert (frame == OFF).all()


def test_threshold_above_max_off_raster_source():
    field = make_field((100, 100, 50.0), goo=2.0, threshold=1.0)
    buf = rendered(field)
    frame = np.frombuffer(bytes(buf), dtype=np.uint8).reshape(32, 32, 4)
    assert (frame == OFF).all()


def test_negative_threshold_turns_everything_on():
    field = make_field((100, 100, 50.0), goo=2.0, threshold=-1.0)
    frame = render_frame(field, RenderOptions())
    assert (frame == ON).all()


def test_nan_pixel_is_off():
    # Zero-size source on (8, 8): 0/0 = nan there, 0/d = 0 > -1 elsewhere
    field = make_field((8, 8, 0.0), threshold=-1.0)
    buf = rendered(field)
    assert pixel(buf, field, 8, 8) == OFF
    assert pixel(buf, field, 9, 8) == ON


def test_negative_coincident_is_off():
    field = make_field((8, 8, -10.0), (20, 20, 40.0), threshold=0.0)
    buf = rendered(field)
    assert pixel(buf, field, 8, 8) == OFF
    assert pixel(buf, field, 20, 20) == ON


def test_frame_matches_field_values(random_field):
    frame = render_frame(random_field, RenderOptions())
    on = field_values(random_field) > random_field.threshold
    assert (frame[on] == ON).all()
    assert (frame[~on] == OFF).all()


def test_scheme_colours():
    scheme = get_scheme("mono")
    field = make_field((16, 16, 50.0), threshold=1.0)
    frame = render_frame(field, RenderOptions(scheme=scheme))
    assert tuple(frame[16, 16]) == scheme.on
    assert tuple(frame[0, 0]) == scheme.off


# ============================================================================
# 3. MARKERS
# ============================================================================

def test_markers_drawn_as_plus(centre_field):
    centre_field.threshold = math.inf
    buf = rendered(centre_field, RenderOptions(show_centers=True))
    for x, y in [(16, 16), (17, 16), (15, 16), (16, 17), (16, 15)]:
        assert pixel(buf, centre_field, x, y) == MARKER
    for x, y in [(17, 17), (18, 16), (15, 15)]:
        assert pixel(buf, centre_field, x, y) == OFF


def test_markers_clipped_at_edges():
    field = make_field((0, 0, 10.0), (31, 31, 10.0), (40, 5, 10.0), threshold=math.inf)
    frame = render_frame(field, RenderOptions(show_centers=True))
    assert tuple(frame[0, 0]) == MARKER
    assert tuple(frame[0, 1]) == MARKER
    assert tuple(frame[1, 0]) == MARKER
    assert tuple(frame[31, 31]) == MARKER
    assert tuple(frame[30, 31]) == MARKER
    assert (frame == MARKER).all(axis=-1).sum() == 6


def test_markers_overwrite_field_colour(centre_field):
    centre_field.threshold = 5.0
    frame = render_frame(centre_field, RenderOptions(show_centers=True))
    assert tuple(frame[16, 16]) == MARKER
    assert tuple(frame[16, 18]) == ON


def test_toggle_markers_restores_base(random_field):
    base = rendered(random_field)
    with_markers = rendered(random_field, RenderOptions(show_centers=True))
    assert with_markers != base
    assert rendered(random_field, RenderOptions(show_centers=False)) == base


# ============================================================================
# 4. BUFFER CONTRACT
# ============================================================================

def test_render_overwrites_every_byte(centre_field):
    buf = bytearray(b"\x7f" * centre_field.pixel_count * 4)
    render(buf, centre_field, RenderOptions())
    assert buf == rendered(centre_field)


def test_render_into_numpy_array(centre_field):
    arr = np.zeros((32, 32, 4), dtype=np.uint8)
    render(arr, centre_field, RenderOptions())
    assert arr.tobytes() == bytes(rendered(centre_field))


@pytest.mark.parametrize("size", [0, 32 * 32 * 4 - 1, 32 * 32 * 4 + 4])
def test_render_rejects_wrong_size(centre_field, size):
    buf = bytearray(b"\x01" * size)
    with pytest.raises(ValueError):
        render(buf, centre_field, RenderOptions())
    assert buf == bytearray(b"\x01" * size)


def test_render_rejects_read_only(centre_field):
    with pytest.raises(ValueError):
        render(bytes(32 * 32 * 4), centre_field, RenderOptions())


# ============================================================================
# 5. DETERMINISM
# ============================================================================

def test_render_is_deterministic(random_field):
    opts = RenderOptions(show_centers=True)
    assert rendered(random_field, opts) == rendered(random_field, opts)
