## GraphToTeX framework for dxf-rendered drawable objects using the
## ezdxf package.
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) GraphToTeX contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import logging

import ezdxf
from ezdxf import colors
from ezdxf.enums import TextEntityAlignment
from ezdxf.lldxf.const import VALID_DXF_LINEWEIGHTS

import graphtotex.drawable as drawable
from graphtotex.scene import LAYERS

logger = logging.getLogger(__name__)

DASHED = 'DASHED'
CONTINUOUS = 'Continuous'

## 1 pt = 0.3528 mm; DXF lineweights are in 1/100 mm
POINTS_TO_LINEWEIGHT = 35.28

def lineweight(width):
    """Nearest valid DXF lineweight for a width in points."""
    target = width * POINTS_TO_LINEWEIGHT
    return min(VALID_DXF_LINEWEIGHTS, key=lambda lw: abs(lw - target))

## class to provide dxf drawing functionality
class ezdxfDraw(drawable.Drawable):

    def __init__(self):
        super().__init__()

        # setup=False avoids creating default blocks (like _CLOSEDFILLED) that
        # contain SOLID entities unsupported by some CAD programs (e.g., FreeCAD)
        self.__doc = ezdxf.new(dxfversion='R2010', setup=False)
        self.__doc.header['$INSUNITS'] = 0 # unitless
        self.__doc.linetypes.add(DASHED, pattern=[0.6, 0.5, -0.1],
                                 description='Dashed __ __ __')
        self.__doc.layers.new('GRID', dxfattribs={'color': 8}) #gray
        self.__doc.layers.new('AXES', dxfattribs={'color': 7}) #white
        self.__doc.layers.new('CURVES', dxfattribs={'color': 7})
        self.__doc.layers.new('SURFACES', dxfattribs={'color': 7})
        self.__msp = self.__doc.modelspace()
        self.__filename = "graphtotex-out"
        self.layerlist = [False, '0'] + list(LAYERS)

    def __repr__(self):
        return 'an instance of ezdxfDraw'

    ## properties

    @property
    def document(self):
        return self.__doc

    @property
    def filename(self):
        return self.__filename

    def _set_filename(self,name):
        self.__filename = name

    @filename.setter
    def filename(self,name):
        if not isinstance(name,str) or not name:
            raise ValueError('bad (non-string) filename: '+str(name))
        self._set_filename(name)

    ## attributes shared by every stroked entity
    def _strokeattribs(self):
        layer = self.layer
        if layer == False:
            layer = '0'
        attribs = {'layer': layer,
                   'linetype': DASHED if self.dashed else CONTINUOUS,
                   'lineweight': lineweight(self.linewidth)}
        rgb = self.color2rgb(self.linecolor)
        if rgb:
            attribs['true_color'] = colors.rgb2int(rgb)
        else:
            attribs['color'] = 256 # bylayer
        return attribs

    ## Overload virtual drawable base class drawing methods

    def draw_line(self,p1,p2):
        self.__msp.add_line((p1[0], p1[1]), (p2[0], p2[1]),
                            dxfattribs=self._strokeattribs())

    def draw_polyline(self,points):
        if len(points) < 2:
            return
        self.__msp.add_lwpolyline([(p[0], p[1]) for p in points], format='xy',
                                  dxfattribs=self._strokeattribs())

    def draw_polygon(self,points):
        layer = self.layer
        if layer == False:
            layer = '0'
        rgb = self.color2rgb(self.fillcolor)
        hatch = self.__msp.add_hatch(dxfattribs={'layer': layer})
        if rgb:
            hatch.set_solid_fill(rgb=rgb)
        else:
            hatch.set_solid_fill(color=256)
        hatch.paths.add_polyline_path([(p[0], p[1]) for p in points], is_closed=True)
        hatch.transparency = 1.0 - self.fillalpha

    def draw_text(self,text,location,
                  align=TextEntityAlignment.LEFT,
                  attr=None):
        if attr is None:
            attr = {}
        layer=self.layer
        if layer == False:
            layer = '0'

        dxfattr = dict()
        if 'color' in attr:
            dxfattr['true_color'] = colors.rgb2int(self.color2rgb(attr['color']))
        elif self.linecolor:
            dxfattr['true_color'] = colors.rgb2int(self.color2rgb(self.linecolor))
        else:
            dxfattr['color'] = 256 # by layer

        if align == 'CENTER':
            alignment = TextEntityAlignment.CENTER
        elif align == 'RIGHT':
            alignment = TextEntityAlignment.RIGHT
        elif isinstance(align, TextEntityAlignment):
            alignment = align
        else:
            ## default alignment is left
            alignment = TextEntityAlignment.LEFT

        if 'style' in attr:
            dxfattr['style'] = attr['style']
        dxfattr['height'] = attr.get('height', .25)
        dxfattr['layer'] = layer
        self.__msp.add_text(
            text,
            dxfattribs=dxfattr).set_placement(
                (location[0],location[1]),
                align=alignment
            )

    def display(self):
        path = "{}.dxf".format(self.filename)
        self.__doc.saveas(path)
        logger.info("wrote %s", path)
        return path
