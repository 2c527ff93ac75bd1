"""Package initialization for chrome-trace-converter.

Converts packed Cap'n Proto span logs into the Chrome trace event format.
The public entry point is `chrome_trace_converter.converter.convert`; the CLI
in `__main__` wraps it with file handling and error reporting.
"""

__all__ = []
