"""
Import / Export

Whole-state backup files. Export writes the wire-format snapshot as
pretty-printed JSON; import parses a file and checks only that it holds
a "weeks" map. Everything else is handled by migration when the parsed
snapshot replaces the current state.
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union

from weekly_keeper.services.storage.interface import ImportFormatError


EXPORT_FILENAME_PREFIX = "weekly_keeper_backup_"


@dataclass(frozen=True)
class ExportedFile:
    """A backup ready to be written or downloaded."""
    filename: str
    content: str
    media_type: str = "application/json"


def export_filename(today: date) -> str:
    return f"{EXPORT_FILENAME_PREFIX}{today.isoformat()}.json"


def export_snapshot(payload: dict[str, Any], today: Optional[date] = None) -> ExportedFile:
    """Serialize a wire-format snapshot into a dated backup file."""
    today = today or date.today()
    return ExportedFile(
        filename=export_filename(today),
        content=json.dumps(payload, ensure_ascii=False, indent=2),
    )


def parse_import(content: Union[str, bytes]) -> dict[str, Any]:
    """
    Parse a backup file.

    Raises:
        ImportFormatError: If the content is not JSON or has no "weeks" map
    """
    try:
        payload = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportFormatError(f"File could not be parsed: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("weeks"), dict):
        raise ImportFormatError("File format is not a WeeklyKeeper backup (no 'weeks')")
    return payload
