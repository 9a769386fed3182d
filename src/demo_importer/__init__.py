"""Import recorded match demos into the stats service.

Each demo in an input directory is matched to its league record, optionally
unpacked from a single-file zip, submitted to the stats API and filed into
``_completed`` or ``_skipped``.
"""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
