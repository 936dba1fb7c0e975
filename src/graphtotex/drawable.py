## base class of drawable for GraphToTeX render consumers
## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## Copyright (c) GraphToTeX contributors
## See licensing terms in the LICENSE file

import logging

from graphtotex.formatting import hex_to_rgb, is_hex_color

logger = logging.getLogger(__name__)

## Generic drawing functions -- assumed to use the current drawing
## pen (layer, color, line width, dash)

class Drawable:
    """Base class for GraphToTeX drawables"""

    ## pure virtual functions -- override for specific rendering
    ## system
    def draw_line(self,p1,p2):
        logger.warning("pure virtual draw_line called: %s, %s", p1, p2)

    def draw_polygon(self,points):
        logger.warning("pure virtual draw_polygon called: %s", points)

    def draw_text(self,text,location,
                  align='left',
                  attr=None):
        logger.warning("pure virtual draw_text called: %s, %s, %s, %s",
                       text, location, align, attr)

    ## non-virtual utility drawing functions; subclasses with a native
    ## polyline primitive override this
    def draw_polyline(self,points):
        for i in range(1,len(points)):
            self.draw_line(points[i-1],points[i])

    def __init__(self):
        self.__linewidth = 1.0
        self.__linecolor = False
        self.__fillcolor = False
        self.__fillalpha = 1.0
        self.__dashed = False
        self.__layer = False
        self.__layerlist = [ False, 'default' ]

    ## Various property functions

    @property
    def layerlist(self):
        return self.__layerlist

    def _set_layerlist(self,lst):
        self.__layerlist = lst

    @layerlist.setter
    def layerlist(self,lst):
        if isinstance(lst,list):
            self._set_layerlist(lst)
        else:
            raise ValueError('bad layer list ' + str(lst))

    @property
    def layer(self):
        return self.__layer

    def _set_layer(self,lyr):
        self.__layer = lyr

    @layer.setter
    def layer(self,lyr=False):
        if lyr in self.layerlist:
            self._set_layer(lyr)
        else:
            raise ValueError('bad layer: ' + str(lyr))

    @property
    def linewidth(self):
        return self.__linewidth

    def _set_linewidth(self,lw):
        self.__linewidth=lw

    @linewidth.setter
    def linewidth(self,lw=False):
        if isinstance(lw,bool) or not isinstance(lw,(int,float)):
            raise ValueError('invalid linewidth ' + str(lw))
        if lw <= 0:
            raise ValueError('linewidth must be positive: ' + str(lw))
        self._set_linewidth(float(lw))

    @property
    def dashed(self):
        return self.__dashed

    @dashed.setter
    def dashed(self,flag):
        if not isinstance(flag,bool):
            raise ValueError('dashed must be a bool: ' + str(flag))
        self.__dashed = flag

    ## colors can be set as a hex string ('#rgb' or '#rrggbb'), an RGB
    ## triple of bytes, or False for "by layer"

    @staticmethod
    def _checkcolor(c):
        def isbyte(x):
            return isinstance(x,int) and not isinstance(x,bool) and 0 <= x <= 255
        if isinstance(c,bool):
            return c == False
        if isinstance(c,(list,tuple)):
            return len(c) == 3 and all(isbyte(x) for x in c)
        return is_hex_color(c)

    @staticmethod
    def color2rgb(c):
        """Convert a valid color to an ``(r, g, b)`` tuple, or None for False."""
        if isinstance(c,bool):
            return None
        if isinstance(c,str):
            return hex_to_rgb(c)
        return tuple(c)

    ## line color
    @property
    def linecolor(self):
        return self.__linecolor

    def _set_linecolor(self,c):
        self.__linecolor=c

    @linecolor.setter
    def linecolor(self,c=False):
        if self._checkcolor(c):
            self._set_linecolor(c)
        else:
            raise ValueError('bad linecolor ' + str(c))

    ## fill color
    @property
    def fillcolor(self):
        return self.__fillcolor

    def _set_fillcolor(self,c):
        self.__fillcolor = c

    @fillcolor.setter
    def fillcolor(self,c=False):
        if self._checkcolor(c):
            self._set_fillcolor(c)
        else:
            raise ValueError('bad fillcolor ' + str(c))

    ## fill opacity, 0 (clear) to 1 (solid)
    @property
    def fillalpha(self):
        return self.__fillalpha

    @fillalpha.setter
    def fillalpha(self,a):
        if isinstance(a,bool) or not isinstance(a,(int,float)) or not 0 <= a <= 1:
            raise ValueError('bad fillalpha ' + str(a))
        self.__fillalpha = float(a)

    ## non-property methods

    def __repr__(self):
        return 'an abstract Drawable instance'

    def draw(self,x):
        from graphtotex.scene import Scene2D, Scene3D, draw_scene
        if isinstance(x,(Scene2D,Scene3D)):
            draw_scene(x,self)
        elif isinstance(x,list):
            for e in x:
                self.draw(e)
        else:
            raise ValueError(f'bad argument to Drawable.draw(): {x}')

    ## cause drawing page to be rendered -- pure virtual in base class
    def display(self):
        logger.warning('pure virtual display function called')
        return True
