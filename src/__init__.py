"""postkit - tooling for Markdown blog posts with front matter."""

__version__ = "0.3.0"
