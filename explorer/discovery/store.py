"""
In-memory registry of explorer sessions.

Each reader gets an ``ExplorerSession`` keyed by an opaque id. Sessions
are not persisted; restarting the process drops them. The registry is
created by ``create_app()`` and kept on ``app.state`` so that separate
app instances (and tests) never share sessions.
"""

from __future__ import annotations

import uuid
from typing import Callable, Dict, Optional, Tuple

from ..settings import Settings
from .filters import OwnershipOracle, never_owned
from .googlebooks_service import CatalogTransport
from .presets import PresetRegistry
from .session import ExplorerSession


class UnknownSession(KeyError):
    """No session is registered under the requested id."""


class SessionRegistry:
    def __init__(
        self,
        transport: CatalogTransport,
        settings: Settings,
        presets: Optional[PresetRegistry] = None,
        oracle_factory: Optional[Callable[[str], OwnershipOracle]] = None,
    ) -> None:
        self.transport = transport
        self.settings = settings
        self.presets = presets or PresetRegistry()
        # Builds the shelf membership check for a given session id
        self._oracle_factory = oracle_factory or (lambda _session_id: never_owned)
        self._sessions: Dict[str, ExplorerSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> Tuple[str, ExplorerSession]:
        session_id = uuid.uuid4().hex
        session = ExplorerSession(
            self.transport,
            self.settings,
            is_owned=self._oracle_factory(session_id),
            presets=self.presets,
        )
        self._sessions[session_id] = session
        return session_id, session

    def get(self, session_id: str) -> ExplorerSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise UnknownSession(session_id) from None

    def remove(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise UnknownSession(session_id)
