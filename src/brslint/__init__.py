"""brslint: pattern and indentation lint for BrightScript and SceneGraph XML."""

__version__ = "0.1.0"
