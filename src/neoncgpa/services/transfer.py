import logging
from pathlib import Path
from typing import Union

from neoncgpa.services.snapshot import SnapshotError, dump_session, load_session
from neoncgpa.state.session_state import Session

logger = logging.getLogger(__name__)

EXPORT_INDENT = 2


def export_session(session: Session) -> str:
    return dump_session(session, indent=EXPORT_INDENT)


def import_session(raw: Union[str, bytes]) -> Session:
    try:
        session = load_session(raw)
    except SnapshotError:
        logger.warning("Rejected imported snapshot")
        raise
    logger.info("Imported %d semester(s)", len(session.semesters))
    return session


def write_export(session: Session, path: Union[str, Path]) -> Path:
    target = Path(path)
    target.write_text(export_session(session), encoding="utf-8")
    logger.info("Exported session to %s", target)
    return target


def read_import(path: Union[str, Path]) -> Session:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read {path}: {exc}") from exc
    return import_session(raw)
