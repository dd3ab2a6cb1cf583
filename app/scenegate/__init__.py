"""scenegate - background blocklist patcher for downloaded VR world content."""

__version__ = "0.1.0"
