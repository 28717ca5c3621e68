class PatterinError(Exception):
    """
    This root exception is provided in case we ever want to provide common functionality
    across all patterin exceptions.
    """


class ShapeConstructionError(ValueError, PatterinError):
    """
    Raised when a shape or path is built from too few points, or a regular polygon is
    requested with fewer than three sides.

    The number of points that were given and the minimum required are kept on the error.
    """

    def __init__(self, message, count=None, minimum=None):
        super().__init__(message)
        self.count = count
        self.minimum = minimum


class OrphanPointError(ValueError, PatterinError):
    """
    Raised when a point without a parent shape is asked for a direction that only makes
    sense relative to a shape ('outward' / 'inward').
    """
