"""Export format registry and writing exported files to disk."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .fdx_export import export_fdx
from .models import Session
from .pdf_export import export_pdf
from .rtf_export import export_rtf
from .text_export import export_text

log = logging.getLogger(__name__)

_NON_ALPHANUMERIC_RE = re.compile(r"[\W_]")
_FALLBACK_STEM = "NewDialog"


@dataclass(frozen=True)
class ExportFormat:
    name: str
    suffix: str
    render: Callable[[Session, str], bytes]


def _render_text(session: Session, page_size: str) -> bytes:
    return export_text(session.elements, session.custom_speaker_names).encode("utf-8")


def _render_rtf(session: Session, page_size: str) -> bytes:
    return export_rtf(session.elements, session.custom_speaker_names)


def _render_fdx(session: Session, page_size: str) -> bytes:
    return export_fdx(session.elements, session.custom_speaker_names).encode("utf-8")


def _render_pdf(session: Session, page_size: str) -> bytes:
    return export_pdf(
        session.elements,
        session.custom_speaker_names,
        title=session.title,
        page_size=page_size,
    )


EXPORT_FORMATS: dict[str, ExportFormat] = {
    "txt": ExportFormat("txt", "txt", _render_text),
    "rtf": ExportFormat("rtf", "rtf", _render_rtf),
    "fdx": ExportFormat("fdx", "fdx", _render_fdx),
    "pdf": ExportFormat("pdf", "pdf", _render_pdf),
}


def render(session: Session, format_name: str, *, page_size: str = "letter") -> bytes:
    try:
        export_format = EXPORT_FORMATS[format_name]
    except KeyError:
        raise ValueError(f"Unknown export format: {format_name!r}") from None
    return export_format.render(session, page_size)


def make_filename(session: Session, suffix: str, today: date | None = None) -> str:
    """Generate a filename like 'TitleWords_18102026.rtf'."""
    stem = _NON_ALPHANUMERIC_RE.sub("", session.title) or _FALLBACK_STEM
    stamp = (today or date.today()).strftime("%d%m%Y")
    return f"{stem}_{stamp}.{suffix}"


def write_export(
    session: Session,
    format_name: str,
    output_dir: Path,
    *,
    page_size: str = "letter",
    dry_run: bool = False,
    today: date | None = None,
) -> Path:
    """Render one format and write it to ``output_dir``. Returns the path."""
    content = render(session, format_name, page_size=page_size)
    filepath = output_dir / make_filename(session, EXPORT_FORMATS[format_name].suffix, today)

    if dry_run:
        log.info("[DRY RUN] Would write %s (%d bytes)", filepath, len(content))
        return filepath

    output_dir.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(content)
    log.info("Wrote %s (%d bytes)", filepath, len(content))
    return filepath


def export_session(
    session: Session,
    formats: list[str],
    output_dir: Path,
    *,
    page_size: str = "letter",
    dry_run: bool = False,
) -> list[Path]:
    """Write every requested format; a failing format does not stop the rest."""
    written: list[Path] = []
    for format_name in formats:
        try:
            written.append(
                write_export(
                    session, format_name, output_dir, page_size=page_size, dry_run=dry_run,
                )
            )
        except OSError:
            log.error("Failed to write %s export of %s", format_name, session.title, exc_info=True)
    return written
