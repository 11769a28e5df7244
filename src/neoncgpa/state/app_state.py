import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from neoncgpa.core.gpa import OverallStats, gpa_trend, overall_stats
from neoncgpa.services.storage import LoadResult, SnapshotStore
from neoncgpa.services.transfer import export_session, import_session
from neoncgpa.state.session_state import Session, default_session

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Owns the current session value; every change is persisted before listeners run."""

    store: SnapshotStore
    session: Session = field(default_factory=default_session)
    last_load: Optional[LoadResult] = None
    listeners: List[Callable[[Session], None]] = field(default_factory=list)

    @classmethod
    def load(cls, store: SnapshotStore) -> "AppState":
        result = store.load()
        state = cls(store=store, session=result.session, last_load=result)
        state.store.save(state.session)
        return state

    def _commit(self, session: Session) -> Session:
        self.session = session
        self.store.save(session)
        for listener in self.listeners:
            listener(session)
        return session

    def apply(self, mutation: Callable[..., Session], *args) -> Session:
        return self._commit(mutation(self.session, *args))

    def reset(self) -> Session:
        self.store.clear()
        logger.info("Session reset to defaults")
        return self._commit(default_session())

    def import_json(self, raw: Union[str, bytes]) -> Session:
        # Raises SnapshotError before anything is replaced.
        return self._commit(import_session(raw))

    def replace(self, session: Session) -> Session:
        return self._commit(session)

    def export_json(self) -> str:
        return export_session(self.session)

    @property
    def overall(self) -> OverallStats:
        return overall_stats(self.session.semesters)

    @property
    def trend(self) -> List[float]:
        return gpa_trend(self.session.semesters)
