from .defaults import GeometryDefaults, defaults, load_defaults, save_defaults
