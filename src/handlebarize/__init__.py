"""
handlebarize - one component tree, two renderings

Renders Python component trees either as a live HTML preview against sample
data, or as a portable Handlebars template compiled from instrumented markup.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
