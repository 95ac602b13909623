"""Source printing for parsed trees."""

from lenientpy.format.printer import PrettyPrinter, PrettyPrinterPrefs, pretty_print

__all__ = [
    "PrettyPrinter",
    "PrettyPrinterPrefs",
    "pretty_print",
]
