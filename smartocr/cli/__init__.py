"""Command-line tools for smartocr.

- ``python -m smartocr.cli.extract IMAGE`` -- run the OCR fallback chain on
  a local image and print the text (or JSON with ``--json``).
"""
