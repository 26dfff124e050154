import pytest
from PIL import Image

from qthreadlab.mandelbrot_render import INFO_KEY
from qthreadlab.mandelbrot_view import (
    DEFAULT_CENTER_X,
    DEFAULT_CENTER_Y,
    DEFAULT_SCALE,
    Key,
    MandelbrotView,
)


@pytest.fixture
def requests():
    return []


@pytest.fixture
def view(requests):
    v = MandelbrotView(lambda *args: requests.append(args))
    v.resize(100, 80)
    requests.clear()
    return v


def _image(width, height, info=None):
    image = Image.new("RGB", (width, height))
    if info is not None:
        image.info[INFO_KEY] = info
    return image


def test_resize_requests_render_with_defaults(requests):
    v = MandelbrotView(lambda *args: requests.append(args))
    v.resize(800, 600, 2.0)
    assert requests == [(DEFAULT_CENTER_X, DEFAULT_CENTER_Y, DEFAULT_SCALE, (800, 600), 2.0)]


def test_zoom_in_then_out_restores_scale(view, requests):
    assert view.key_press(Key.PLUS)
    assert view.cur_scale < DEFAULT_SCALE
    assert view.key_press(Key.MINUS)
    assert view.cur_scale == pytest.approx(DEFAULT_SCALE)
    assert len(requests) == 2
    assert requests[-1][2] == view.cur_scale


def test_arrow_keys_move_center(view):
    view.key_press(Key.LEFT)
    assert view.center_x < DEFAULT_CENTER_X
    view.key_press(Key.RIGHT)
    assert view.center_x == pytest.approx(DEFAULT_CENTER_X)
    view.key_press(Key.UP)
    assert view.center_y > DEFAULT_CENTER_Y
    view.key_press("Down")
    assert view.center_y == pytest.approx(DEFAULT_CENTER_Y)


def test_q_closes_and_unknown_key_is_ignored(view, requests):
    assert view.key_press("x") is False
    assert requests == []
    assert view.closed is False
    assert view.key_press(Key.Q) is True
    assert view.closed is True


def test_wheel_one_notch_matches_plus_key(requests):
    a = MandelbrotView(lambda *args: None)
    b = MandelbrotView(lambda *args: None)
    a.wheel(120)
    b.key_press(Key.PLUS)
    assert a.cur_scale == pytest.approx(b.cur_scale)
    a.wheel(-120)
    assert a.cur_scale == pytest.approx(DEFAULT_SCALE)


def test_small_wheel_delta_does_not_zoom(view):
    view.wheel(7)
    assert view.cur_scale == DEFAULT_SCALE


def test_pinch_inverts_scale_factor(view):
    view.pinch(2.0)
    assert view.cur_scale == pytest.approx(DEFAULT_SCALE / 2.0)
    view.pinch(0.5)
    assert view.cur_scale == pytest.approx(DEFAULT_SCALE)


def test_drag_moves_offset_and_blocks_updates(view):
    view.update_pixmap(_image(100, 80), DEFAULT_SCALE)
    view.mouse_press(10, 10)
    view.mouse_move(30, 25)
    assert view.pixmap_offset == (20, 15)
    replacement = _image(100, 80, "new")
    view.update_pixmap(replacement, DEFAULT_SCALE)
    assert view.pixmap is not replacement
    assert view.info == ""


def test_release_recenters_on_dragged_position(view, requests):
    view.update_pixmap(_image(100, 80), DEFAULT_SCALE)
    view.mouse_press(10, 10)
    view.mouse_release(30, 25)
    assert view.last_drag_pos is None
    assert view.center_x == pytest.approx(DEFAULT_CENTER_X - 20 * DEFAULT_SCALE)
    assert view.center_y == pytest.approx(DEFAULT_CENTER_Y - 15 * DEFAULT_SCALE)
    assert requests[-1][0] == view.center_x


def test_move_without_press_does_nothing(view):
    view.mouse_move(50, 50)
    assert view.pixmap_offset == (0, 0)


def test_update_pixmap_takes_info_and_scale(view):
    view.mouse_press(1, 1)
    view.mouse_release(1, 1)
    image = _image(100, 80, " Pass 1/8")
    view.update_pixmap(image, 0.5)
    assert view.pixmap is image
    assert view.info == " Pass 1/8"
    assert view.pixmap_scale == 0.5
    assert view.pixmap_offset == (0, 0)


def test_preview_geometry_none_without_pixmap(view):
    assert view.preview_geometry() is None


def test_preview_geometry_at_same_scale(view):
    view.update_pixmap(_image(100, 80), DEFAULT_SCALE)
    geometry = view.preview_geometry()
    assert (geometry.x, geometry.y, geometry.width, geometry.height) == (0, 0, 100, 80)
    assert geometry.scale == 1.0


def test_preview_geometry_after_zoom(view):
    view.update_pixmap(_image(100, 80), DEFAULT_SCALE)
    view.zoom(0.5)
    geometry = view.preview_geometry()
    assert geometry.scale == pytest.approx(2.0)
    assert (geometry.width, geometry.height) == (200, 160)
    assert (geometry.x, geometry.y) == (-50, -40)


def test_preview_uses_device_independent_size(requests):
    v = MandelbrotView(lambda *args: None)
    v.resize(50, 40, 2.0)
    v.update_pixmap(_image(100, 80), DEFAULT_SCALE)
    geometry = v.preview_geometry()
    assert (geometry.width, geometry.height) == (50, 40)