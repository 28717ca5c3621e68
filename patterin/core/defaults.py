"""
Geometry defaults shared by the primitives and contexts.

Values are read at call time, so changing an attribute on `defaults` (or loading a
settings file with `load_defaults`) takes effect for every later operation.
"""

SECTION = "geometry"


class GeometryDefaults:
    def __init__(self):
        # Tolerance for coincidence and degenerate-segment checks.
        self.epsilon = 1e-10
        # Miter length beyond |distance| * miter_limit becomes a bevel.
        self.miter_limit = 4.0
        self.circle_segments = 32
        # Rays passing this close to a vertex are re-cast above and below.
        self.containment_jitter = 1e-9
        # Gap at which path output starts a new subpath.
        self.path_epsilon = 1e-5

    def reset(self):
        self.__init__()

    def __repr__(self):
        values = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"GeometryDefaults({values})"


defaults = GeometryDefaults()


def load_defaults(settings, section=SECTION):
    """
    Read the geometry defaults from the given Settings.

    @param settings: patterin.kernel.Settings instance
    @param section: configuration section, 'geometry' by default
    @return: the shared defaults object
    """
    settings.read_persistent_attributes(section, defaults)
    return defaults


def save_defaults(settings, section=SECTION):
    settings.write_persistent_attributes(section, defaults)
