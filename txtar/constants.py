# Marker line framing: "-- NAME --"
MARKER_PREFIX = b"-- "
MARKER_SUFFIX = b" --"
MIN_MARKER_LEN = len(MARKER_PREFIX) + len(MARKER_SUFFIX)  # 6 bytes: "--  --"

NEWLINE = b"\n"
CRLF = b"\r\n"
# A marker may only begin a line; searching for this sequence anchors it.
NEWLINE_MARKER = NEWLINE + MARKER_PREFIX

ENCODING = "utf-8"

ARCHIVE_SUFFIX = ".txtar"
