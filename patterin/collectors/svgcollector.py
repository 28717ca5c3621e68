"""
SVG output for stamped geometry.

The collector is a rendering sink: anything with `add_path(path_data, style)` and
`add_shape(shape, style)` can receive stamps. SVGCollector keeps the stamped path data,
tracks the overall bounds and renders a standalone <svg> document.
"""

from typing import NamedTuple, Optional
from xml.etree.ElementTree import Element, SubElement, tostring

from svgelements import Color, Path

SVG_NS = "http://www.w3.org/2000/svg"
SVG_NAME_TAG = "svg"
SVG_TAG_PATH = "path"
SVG_TAG_RECT = "rect"
SVG_ATTR_XMLNS = "xmlns"
SVG_ATTR_VIEWBOX = "viewBox"
SVG_ATTR_WIDTH = "width"
SVG_ATTR_HEIGHT = "height"


def validate_color(value) -> str:
    """
    Normalize a color to its hex form.

    Hex, rgb(), hsl() and named SVG colors are accepted.

    @param value: color string or svgelements Color
    @return: hex string such as '#ff5733'
    @raise ValueError: when the value is not a color
    """
    if isinstance(value, Color):
        return value.hex
    text = str(value).strip()
    color = Color(text)
    if color.value is None:
        raise ValueError(f"'{value}' is not a color")
    if text.startswith("#") or text.lower().startswith(("rgb", "hsl")):
        return color.hex
    # Unknown names parse to black.
    if color == Color("#000000") and text.replace(" ", "").lower() != "black":
        raise ValueError(f"'{value}' is not a color")
    return color.hex


class PathStyle:
    """
    Presentation attributes of a stamped path. Attributes left as None are not written.
    """

    __slots__ = ("fill", "stroke", "stroke_width", "opacity", "dash")

    def __init__(self, fill=None, stroke=None, stroke_width=None, opacity=None, dash=None):
        self.fill = fill
        self.stroke = stroke
        self.stroke_width = stroke_width
        self.opacity = opacity
        self.dash = list(dash) if dash else None

    def __repr__(self):
        values = ", ".join(f"{k}={getattr(self, k)!r}" for k in self.__slots__ if getattr(self, k) is not None)
        return f"PathStyle({values})"

    def __eq__(self, other):
        if not isinstance(other, PathStyle):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    @classmethod
    def of(cls, value) -> "PathStyle":
        """PathStyle from None, a dict of attributes or another PathStyle."""
        if value is None:
            return cls()
        if isinstance(value, PathStyle):
            return cls(**value.as_dict())
        return cls(**value)

    def as_dict(self):
        return {k: getattr(self, k) for k in self.__slots__}

    def merged(self, other) -> "PathStyle":
        """
        Copy of this style with every attribute set on other taking precedence.
        """
        result = PathStyle.of(self)
        for key, value in PathStyle.of(other).as_dict().items():
            if value is not None:
                setattr(result, key, value)
        return result

    def attributes(self):
        """SVG presentation attributes as a name to string value dict."""
        attrs = {"fill": str(self.fill) if self.fill is not None else "none"}
        if self.stroke is not None:
            attrs["stroke"] = str(self.stroke)
        if self.stroke_width is not None:
            attrs["stroke-width"] = str(self.stroke_width)
        if self.opacity is not None:
            attrs["opacity"] = str(self.opacity)
        if self.dash:
            attrs["stroke-dasharray"] = " ".join(str(d) for d in self.dash)
        return attrs


DEFAULT_STYLES = {
    "shape": PathStyle(stroke="#000000", stroke_width=1),
    "line": PathStyle(stroke="#999999", stroke_width=0.5),
}


class ViewBox(NamedTuple):
    x: float
    y: float
    width: float
    height: float


class SVGCollector:
    def __init__(self):
        self.paths = []
        self._bounds = None

    def __len__(self):
        return len(self.paths)

    def __str__(self):
        return self.to_svg()

    def add_path(self, path_data: str, style=None):
        """
        Store path data with its style and grow the collected bounds.

        @param path_data: SVG path data
        @param style: PathStyle, dict of PathStyle attributes or None
        """
        self.paths.append((path_data, PathStyle.of(style)))
        if not path_data:
            return
        bbox = Path(path_data).bbox()
        if bbox is None:
            return
        if self._bounds is None:
            self._bounds = bbox
        else:
            x0, y0, x1, y1 = self._bounds
            self._bounds = (
                min(x0, bbox[0]),
                min(y0, bbox[1]),
                max(x1, bbox[2]),
                max(y1, bbox[3]),
            )

    def add_shape(self, shape, style=None):
        """
        Stamp a shape. Ephemeral shapes are skipped. The shape's color is used as the
        stroke unless the style sets one.
        """
        if shape.ephemeral:
            return
        base = DEFAULT_STYLES["shape"]
        if shape.color is not None:
            base = base.merged({"stroke": shape.color})
        self.add_path(shape.to_path_data(), base.merged(style))

    def get_bounds(self, margin: float = 0) -> ViewBox:
        """
        Bounds of everything collected, grown by margin on each side. An empty collector
        reports a 100 by 100 box at the origin.
        """
        if self._bounds is None:
            return ViewBox(0, 0, 100, 100)
        x0, y0, x1, y1 = self._bounds
        return ViewBox(x0 - margin, y0 - margin, x1 - x0 + margin * 2, y1 - y0 + margin * 2)

    def to_svg(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        margin: float = 10,
        background: Optional[str] = None,
    ) -> str:
        """
        Standalone SVG document of everything collected.

        @param width: document width, the viewBox width when omitted
        @param height: document height, the viewBox height when omitted
        @param margin: space around the collected bounds
        @param background: fill of a rectangle behind the paths
        @return: svg text
        """
        box = self.get_bounds(margin)
        width = box.width if width is None else width
        height = box.height if height is None else height
        root = Element(SVG_NAME_TAG)
        root.set(SVG_ATTR_XMLNS, SVG_NS)
        root.set(SVG_ATTR_VIEWBOX, f"{box.x:g} {box.y:g} {box.width:g} {box.height:g}")
        root.set(SVG_ATTR_WIDTH, f"{width:g}")
        root.set(SVG_ATTR_HEIGHT, f"{height:g}")
        if background:
            subelement = SubElement(root, SVG_TAG_RECT)
            subelement.set("x", f"{box.x:g}")
            subelement.set("y", f"{box.y:g}")
            subelement.set(SVG_ATTR_WIDTH, f"{box.width:g}")
            subelement.set(SVG_ATTR_HEIGHT, f"{box.height:g}")
            subelement.set("fill", str(background))
        for path_data, style in self.paths:
            subelement = SubElement(root, SVG_TAG_PATH)
            subelement.set("d", path_data)
            for key, value in style.attributes().items():
                subelement.set(key, value)
        return tostring(root, encoding="unicode")

    def clear(self):
        self.paths.clear()
        self._bounds = None
