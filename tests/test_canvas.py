"""Tests for the pixel canvas, font and palettes."""

import numpy as np
import pytest
from PIL import Image

from quicklook.canvas import Canvas
from quicklook.font import FALLBACK_INDEX, GLYPHS, glyph, glyph_index, text_width
from quicklook.palettes import Colormap, get_colormap


class TestCanvas:
    """Tests for Canvas drawing primitives."""

    def test_dark_background(self):
        canvas = Canvas(4, 3)
        assert canvas.pixels.shape == (3, 4, 3)
        assert not canvas.pixels.any()

    def test_light_background_and_inverted_gray(self):
        canvas = Canvas(4, 3, dark=False)
        assert (canvas.pixels == 255).all()
        canvas.set_gray(1, 1, 255)
        assert canvas.get_pixel(1, 1) == (0, 0, 0)

    def test_out_of_bounds_writes_are_dropped(self):
        canvas = Canvas(4, 4)
        canvas.set_gray(-1, 0, 255)
        canvas.set_gray(4, 0, 255)
        canvas.set_rgb(0, 99, (1, 2, 3))
        assert not canvas.pixels.any()
        assert canvas.get_pixel(4, 0) is None

    def test_fill_rect_clips(self):
        canvas = Canvas(4, 4)
        canvas.fill_rect(2, 2, 10, 10, 200)
        assert (canvas.pixels[2:, 2:] == 200).all()
        assert not canvas.pixels[:2].any()
        assert not canvas.pixels[:, :2].any()

    def test_empty_rect_draws_nothing(self):
        canvas = Canvas(4, 4)
        canvas.fill_rect(1, 1, 0, 3, 200)
        canvas.fill_rect(1, 1, 3, -2, 200)
        assert not canvas.pixels.any()

    def test_lines_are_inclusive(self):
        canvas = Canvas(8, 8)
        canvas.hline(5, 0, 2, 100)
        canvas.vline(0, 3, 6, 100)
        assert (canvas.pixels[0, 2:6] == 100).all()
        assert (canvas.pixels[3:7, 0] == 100).all()

    def test_put_column_clips(self):
        canvas = Canvas(2, 4)
        colors = np.arange(18, dtype=np.uint8).reshape(6, 3)
        canvas.put_column(1, -1, colors)
        assert canvas.get_pixel(1, 0) == (3, 4, 5)
        assert canvas.get_pixel(1, 3) == (12, 13, 14)
        canvas.put_column(5, 0, colors)

    def test_tint_dark(self):
        canvas = Canvas(2, 2)
        canvas.tint(0, 0, 1, 120)
        assert canvas.get_pixel(0, 0) == (0, 120, 0)

    def test_tint_light(self):
        canvas = Canvas(2, 2, dark=False)
        canvas.tint(0, 0, 0, 120)
        assert canvas.get_pixel(0, 0) == (255, 135, 135)

    def test_draw_text(self):
        canvas = Canvas(20, 10)
        canvas.draw_text(0, 0, 'I', 255)
        # 'I' has a full-width top bar and a centered stem
        assert (canvas.pixels[0, 1:4] == 255).all()
        assert (canvas.pixels[1:6, 2] == 255).all()
        assert not canvas.pixels[:, 6:].any()

    def test_draw_vertical_text_runs_down(self):
        canvas = Canvas(10, 20)
        canvas.draw_text(0, 0, '--', 255, vertical=True)
        assert (canvas.pixels[0:5, 3] == 255).all()
        assert (canvas.pixels[6:11, 3] == 255).all()

    def test_text_past_edge_is_clipped(self):
        canvas = Canvas(8, 8)
        canvas.draw_text(4, 4, 'WWW', 255)
        assert canvas.pixels[4:, 4:].any()

    def test_pixels_must_match_size(self):
        with pytest.raises(ValueError):
            Canvas(4, 4, pixels=np.zeros((4, 4, 4), dtype=np.uint8))

    def test_to_image(self):
        canvas = Canvas(6, 3)
        image = canvas.to_image()
        assert isinstance(image, Image.Image)
        assert image.size == (6, 3)
        assert image.mode == 'RGB'


class TestFont:
    """Tests for the bitmap font."""

    def test_covers_printable_ascii(self):
        assert len(GLYPHS) == 96
        assert glyph_index(' ') == 0
        assert glyph_index('~') == 94

    def test_space_is_blank(self):
        assert not glyph(' ').any()

    def test_non_ascii_uses_fallback(self):
        assert glyph_index('µ') == FALLBACK_INDEX
        assert glyph_index('\n') == FALLBACK_INDEX
        assert (glyph('é') == GLYPHS[FALLBACK_INDEX]).all()

    def test_glyphs_leave_bottom_row_blank(self):
        assert not GLYPHS[:, 7].any()

    def test_text_width(self):
        assert text_width('abc') == 18


class TestPalettes:
    """Tests for colormaps."""

    @pytest.mark.parametrize('cmap', list(Colormap))
    def test_tables(self, cmap):
        assert cmap.table.shape == (256, 3)
        assert cmap.table.dtype == np.uint8
        assert not cmap.table.flags.writeable

    def test_gray_ramp(self):
        table = Colormap.GRAY.table
        assert table[0].tolist() == [0, 0, 0]
        assert table[255].tolist() == [255, 255, 255]

    def test_cubehelix_brightens(self):
        table = Colormap.CUBEHELIX.table.astype(int)
        assert table[0].sum() < table[128].sum() < table[255].sum()

    def test_lookup(self):
        assert get_colormap(0) == Colormap.CUBE1
        assert get_colormap('Gray') == Colormap.GRAY
        assert get_colormap(Colormap.CUBEHELIX) == Colormap.CUBEHELIX
        assert Colormap.GRAY.ident == 2

    def test_unknown_id_raises(self):
        with pytest.raises(ValueError):
            get_colormap(3)
