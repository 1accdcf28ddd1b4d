"""
Work Suite

Content backend for the Work Suite editors: items, tags, search, batch
operations, workspace linkage, content themes and real-time fan-out.
"""

import importlib.metadata

__version__ = importlib.metadata.version("work-suite")
