"""Parse and render infobox blocks embedded in Markdown notes."""

__version__ = "0.1.0"
