"""
Tests for the Drawable base class and the ezdxf DXF drawable.
"""

import pytest
import ezdxf
from ezdxf.lldxf.const import VALID_DXF_LINEWEIGHTS
from graphtotex.drawable import Drawable
from graphtotex.entries import RawEntry, prepare_entries
from graphtotex.ezdxf_drawable import ezdxfDraw, lineweight
from graphtotex.scene import build_scene_2d
from graphtotex.viewport import Viewport


class TestDrawableProperties:

    def test_defaults(self):
        d = Drawable()
        assert d.linewidth == 1.0
        assert d.linecolor is False
        assert d.fillcolor is False
        assert d.fillalpha == 1.0
        assert d.dashed is False
        assert d.layer is False

    def test_layer_must_be_listed(self):
        d = Drawable()
        d.layer = 'default'
        assert d.layer == 'default'
        with pytest.raises(ValueError):
            d.layer = 'CURVES'
        d.layerlist = [False, 'CURVES']
        d.layer = 'CURVES'
        with pytest.raises(ValueError):
            d.layerlist = ('CURVES',)

    @pytest.mark.parametrize("width", [0, -1, True, "2"])
    def test_bad_linewidth(self, width):
        with pytest.raises(ValueError):
            Drawable().linewidth = width

    def test_linewidth_stored_as_float(self):
        d = Drawable()
        d.linewidth = 3
        assert d.linewidth == 3.0

    @pytest.mark.parametrize("color", ["#ef4444", "#f00", (1, 2, 3), [0, 0, 255], False])
    def test_good_colors(self, color):
        d = Drawable()
        d.linecolor = color
        d.fillcolor = color
        assert d.linecolor == color

    @pytest.mark.parametrize("color", ["red", (1, 2), (0, 0, 256), True, None])
    def test_bad_colors(self, color):
        d = Drawable()
        with pytest.raises(ValueError):
            d.linecolor = color
        with pytest.raises(ValueError):
            d.fillcolor = color

    def test_color2rgb(self):
        assert Drawable.color2rgb("#0f766e") == (15, 118, 110)
        assert Drawable.color2rgb([1, 2, 3]) == (1, 2, 3)
        assert Drawable.color2rgb(False) is None

    def test_fillalpha(self):
        d = Drawable()
        d.fillalpha = 0.25
        assert d.fillalpha == 0.25
        with pytest.raises(ValueError):
            d.fillalpha = 1.5

    def test_dashed(self):
        d = Drawable()
        d.dashed = True
        assert d.dashed
        with pytest.raises(ValueError):
            d.dashed = 1

    def test_display(self):
        assert Drawable().display()


class TestLineweight:

    def test_nearest(self):
        assert lineweight(1.0) == 35
        assert lineweight(2.5) == 90

    def test_always_valid(self):
        for width in (0.01, 0.5, 1.8, 10, 100):
            assert lineweight(width) in VALID_DXF_LINEWEIGHTS


class TestEzdxfDraw:

    def test_document_setup(self):
        dd = ezdxfDraw()
        doc = dd.document
        for name in ('GRID', 'AXES', 'CURVES', 'SURFACES'):
            assert name in doc.layers
        assert 'DASHED' in doc.linetypes
        assert dd.layerlist == [False, '0', 'GRID', 'AXES', 'CURVES', 'SURFACES']

    def test_draw_line(self):
        dd = ezdxfDraw()
        dd.layer = 'AXES'
        dd.linecolor = '#ff0000'
        dd.dashed = True
        dd.draw_line((0, 0), (1, 2))
        line, = dd.document.modelspace().query('LINE')
        assert line.dxf.layer == 'AXES'
        assert line.dxf.linetype == 'DASHED'
        assert line.rgb == (255, 0, 0)
        assert line.dxf.end.y == 2

    def test_draw_line_by_layer(self):
        dd = ezdxfDraw()
        dd.draw_line((0, 0), (1, 1))
        line, = dd.document.modelspace().query('LINE')
        assert line.dxf.layer == '0'
        assert line.dxf.color == 256
        assert line.dxf.linetype == 'Continuous'

    def test_draw_polyline(self):
        dd = ezdxfDraw()
        dd.draw_polyline([(0, 0), (1, 1), (2, 0)])
        dd.draw_polyline([(5, 5)])
        poly, = dd.document.modelspace().query('LWPOLYLINE')
        assert len(poly) == 3

    def test_draw_polygon(self):
        dd = ezdxfDraw()
        dd.layer = 'SURFACES'
        dd.fillcolor = '#2563eb'
        dd.fillalpha = 0.25
        dd.draw_polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        hatch, = dd.document.modelspace().query('HATCH')
        assert hatch.dxf.layer == 'SURFACES'
        assert hatch.rgb == (37, 99, 235)
        assert hatch.transparency == pytest.approx(0.75, abs=0.01)
        assert len(hatch.paths.paths) == 1

    def test_draw_text(self):
        dd = ezdxfDraw()
        dd.draw_text('x', (3, 4), attr={'color': '#111827', 'height': 2})
        text, = dd.document.modelspace().query('TEXT')
        assert text.dxf.text == 'x'
        assert text.dxf.height == 2
        assert text.rgb == (17, 24, 39)

    def test_draw_text_defaults(self):
        dd = ezdxfDraw()
        dd.draw_text('a', (0, 0))
        dd.draw_text('b', (1, 0), attr={'height': 3})
        dd.draw_text('c', (2, 0))
        heights = [t.dxf.height for t in dd.document.modelspace().query('TEXT')]
        assert heights == [.25, 3, .25]
        assert all(t.dxf.color == 256 for t in dd.document.modelspace().query('TEXT'))

    def test_draw_text_leaves_attr_untouched(self):
        attr = {'color': '#111827'}
        ezdxfDraw().draw_text('x', (0, 0), attr=attr)
        assert attr == {'color': '#111827'}

    def test_base_draw_text_default_attr(self):
        Drawable().draw_text('x', (0, 0))

    def test_bad_filename(self):
        with pytest.raises(ValueError):
            ezdxfDraw().filename = ''

    def test_draw_scene_and_save(self, tmp_path):
        entries = prepare_entries([RawEntry(id='a', raw='x^2')])
        dd = ezdxfDraw()
        dd.filename = str(tmp_path / 'graph')
        dd.draw(build_scene_2d(entries, Viewport()))
        path = dd.display()

        assert path == str(tmp_path / 'graph') + '.dxf'
        doc = ezdxf.readfile(path)
        msp = doc.modelspace()
        assert len(msp.query('LWPOLYLINE[layer=="CURVES"]')) == 1
        assert len(msp.query('LWPOLYLINE[layer=="GRID"]')) == 22
        assert len(msp.query('TEXT')) == 20
