"""
songtags - tag songs in a personal library and filter them by label.

Labels are REGULAR (atomic, attached to songs) or SUPER (a named group of
REGULAR labels). Filtering is strict AND: a song matches only if it carries
every REGULAR label the selection expands to.
"""

__version__ = "0.1.0"
__license__ = "GPL-2.0"

from songtags.server import SongTagsServer

__all__ = ["SongTagsServer", "__version__"]
