"""Local/remote engine selection with one-way fallback to remote.

A :class:`DataSourceSession` carries the sync flags for one running client.
Once a local failure sets ``force_remote`` it stays set until the local
engine is explicitly (re)initialized through :func:`activate_local_engine`.
Concurrent calls share the session unsynchronized; a call that read the
flag before another call flipped it simply fails over on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

from bible_reader.core.exceptions import EngineQueryError, LocalDatabaseUnavailableError
from bible_reader.core.logging import data_source_context, get_logger
from bible_reader.core.ports import BibleEnginePort, NetworkPort

logger = get_logger(__name__)

LOCAL = "local"
REMOTE = "remote"

T = TypeVar("T")
EngineRequest = Callable[[BibleEnginePort], Awaitable[T]]


@dataclass(slots=True)
class SyncState:
    """Mutable selection flags shared by every query on a session."""

    force_remote: bool = False
    local_ready: bool = False


@dataclass(slots=True)
class DataSourceSession:
    """Engine handles plus the state deciding between them."""

    remote_engine: BibleEnginePort
    local_engine: Optional[BibleEnginePort] = None
    network: Optional[NetworkPort] = None
    state: SyncState = field(default_factory=SyncState)

    @property
    def mode(self) -> str:
        """Engine mode the next call will use."""
        return REMOTE if self.state.force_remote else LOCAL

    @property
    def using_local(self) -> bool:
        """True when calls go to an initialized local engine."""
        return not self.state.force_remote and self.local_engine is not None


def select_engine(session: DataSourceSession) -> BibleEnginePort:
    """Return the remote handle if forced remote, otherwise the local one."""
    if session.state.force_remote:
        return session.remote_engine
    if session.local_engine is None:
        raise LocalDatabaseUnavailableError("Local engine has not been initialized")
    return session.local_engine


def force_remote(session: DataSourceSession, reason: str) -> None:
    """Trip the session into remote mode."""
    if not session.state.force_remote:
        logger.warning("Switching to remote engine: %s", reason)
    session.state.force_remote = True


def activate_local_engine(session: DataSourceSession, engine: BibleEnginePort) -> None:
    """Install a freshly initialized local engine and leave remote mode."""
    session.local_engine = engine
    session.state.force_remote = False
    logger.info("Local engine initialized")


async def should_fall_back_to_network(session: DataSourceSession) -> bool:
    """Return True when a failed local call may be retried remotely."""
    if session.state.force_remote or session.network is None:
        return False
    return await session.network.internet_is_available()


async def _attempt(session: DataSourceSession, request: EngineRequest[T]) -> T:
    with data_source_context(session.mode):
        return await request(select_engine(session))


async def run_with_fallback(
    session: DataSourceSession, operation: str, request: EngineRequest[T]
) -> T:
    """Run ``request`` on the selected engine, retrying once on remote.

    Raises:
        EngineQueryError: when the request failed on every permitted attempt.
    """
    last_error: Exception | None = None
    for _ in range(2):
        was_remote = session.state.force_remote
        try:
            return await _attempt(session, request)
        except Exception as exc:  # pylint: disable=broad-except
            last_error = exc
            if was_remote:
                break
            force_remote(session, f"{operation} failed locally: {exc}")
    logger.error("%s failed on every data source: %s", operation, last_error)
    raise EngineQueryError(f"{operation} failed") from last_error


async def run_with_gated_fallback(
    session: DataSourceSession, operation: str, request: EngineRequest[T]
) -> T:
    """Like :func:`run_with_fallback`, but retry only when the network is reachable.

    Raises:
        EngineQueryError: when the request failed and no retry was permitted,
            or the retry failed as well.
    """
    try:
        return await _attempt(session, request)
    except Exception as exc:  # pylint: disable=broad-except
        if not await should_fall_back_to_network(session):
            logger.warning("%s failed without a network fallback: %s", operation, exc)
            raise EngineQueryError(f"{operation} failed") from exc
        logger.info("Failed to query local db. Falling back to network...")
        force_remote(session, f"{operation} failed locally: {exc}")
    try:
        return await _attempt(session, request)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("%s failed on the remote engine: %s", operation, exc)
        raise EngineQueryError(f"{operation} failed") from exc


__all__ = [
    "LOCAL",
    "REMOTE",
    "SyncState",
    "DataSourceSession",
    "select_engine",
    "force_remote",
    "activate_local_engine",
    "should_fall_back_to_network",
    "run_with_fallback",
    "run_with_gated_fallback",
]
