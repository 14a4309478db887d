"""
Classic M3U.

Non-extended M3U is a plain listing with a name: one reference per line,
parsed and written exactly like a plain listing. '#' has no special
meaning, so a file with an '#EXTM3U' header read this way keeps its
directive lines as references. Open such files as "extm3u" to keep the
EXTINF metadata.

Entries, metadata and playlist info are the plain-listing types.
"""

from playlist_mangler.formats.plaintext import PlainTextFormat


class M3UFormat(PlainTextFormat):
    """Format provider for classic M3U / M3U8."""

    name = "m3u"
    extensions = (".m3u", ".m3u8")
