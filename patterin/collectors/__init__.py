from .svgcollector import DEFAULT_STYLES, PathStyle, SVGCollector, ViewBox, validate_color
