"""
Services - Candidate Formatter

Renders bookmark records as selection-list candidates.
"""

import re
from datetime import datetime
from typing import List, Optional, Tuple

from hatena_search.schemas import BookmarkAnnotation, BookmarkRecord, Candidate

DATE_FORMAT = "%Y-%m-%d %H:%M"

_DISPLAY_RE = re.compile(r"^(?P<title>.*?) (?P<url>[A-Za-z][\w+.-]*://\S+)(?: (?P<comment>.*))?$")


class CandidateFormatter:
    """Formats BookmarkRecords into display lines with annotation metadata."""

    def __init__(self, date_format: str = DATE_FORMAT):
        self.date_format = date_format

    def format_date(self, timestamp: int) -> str:
        """Local time for an epoch-seconds timestamp."""
        return datetime.fromtimestamp(timestamp).strftime(self.date_format)

    def format(self, record: BookmarkRecord) -> Candidate:
        display = f"{record.title} {record.url}"
        if record.comment:
            display = f"{display} {record.comment}"

        return Candidate(
            display=display,
            key=record.url,
            annotation=BookmarkAnnotation(
                date=self.format_date(record.timestamp),
                comment=record.comment,
                count=record.count,
            ),
        )

    def format_batch(self, records: List[BookmarkRecord]) -> List[Candidate]:
        return [self.format(record) for record in records]

    @staticmethod
    def annotate(candidate: Candidate) -> str:
        """Annotation column text: date, user count and comment."""
        note = candidate.annotation
        parts = [note.date, f"{note.count} users"]
        if note.comment:
            parts.append(note.comment)
        return "  ".join(parts)

    @staticmethod
    def parse_display(line: str, key: Optional[str] = None) -> Optional[Tuple[str, str, str]]:
        """
        Split a display line back into (title, url, comment).

        With a key, the line is split at the first standalone occurrence of
        it. Without one, the url is the first whitespace-free token carrying
        a scheme, so a title that itself contains a URL splits too early.

        Args:
            line: Display line built by format()
            key: Candidate key (the bookmark url), if known

        Returns:
            Tuple of title, url and comment ("" when absent), or None
        """
        if key:
            marker = f" {key}"
            start = line.find(marker)
            while start != -1:
                end = start + len(marker)
                if end == len(line) or line[end] == " ":
                    return line[:start], key, line[end + 1:]
                start = line.find(marker, start + 1)
            return None

        match = _DISPLAY_RE.match(line)
        if not match:
            return None
        return match.group("title"), match.group("url"), match.group("comment") or ""
