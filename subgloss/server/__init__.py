"""HTTP API for annotating subtitle files.

WHY: Media servers and scripts can submit a subtitle file over HTTP and
receive the annotated ASS file, without installing the CLI next to their
library.

HOW: app.py defines the FastAPI app and its routes; models.py defines the
pydantic response schemas.
"""
