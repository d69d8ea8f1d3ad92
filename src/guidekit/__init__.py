"""guidekit - question index and link checks for Markdown guides."""

__version__ = "0.1.0"
