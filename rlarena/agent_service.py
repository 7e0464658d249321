"""Agent management and leaderboards."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Protocol, Sequence, TypeVar

from rlarena.errors import (
    AgentNotFoundError,
    InvalidInputError,
    ServiceError,
    UnauthorizedError,
)

_MAX_PAGE_SIZE = 100
_DEFAULT_PAGE_SIZE = 20


class _Agent(Protocol):
    user_id: str
    elo: int
    rank: int


class _AgentRepository(Protocol):
    def create(self, user_id: str, name: str, description: str, environment_id: str) -> Any: ...
    def find_by_id(self, agent_id: str) -> Any: ...
    def find_by_user_id(self, user_id: str) -> list[Any]: ...
    def find_all(self, limit: int, offset: int) -> list[Any]: ...
    def count(self) -> int: ...
    def find_by_environment_id(self, environment_id: str, limit: int, offset: int) -> list[Any]: ...
    def update(self, agent_id: str, name: str, description: str) -> None: ...
    def delete(self, agent_id: str) -> None: ...
    def opponent_stats(self, agent_id: str) -> list[Any]: ...


_A = TypeVar("_A", bound=_Agent)


@contextmanager
def _failure(action: str) -> Iterator[None]:
    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:
        raise ServiceError(f"failed to {action}: {exc}") from exc


def _clamp_size(size: int) -> int:
    return size if 1 <= size <= _MAX_PAGE_SIZE else _DEFAULT_PAGE_SIZE


def assign_ranks(agents: Sequence[_A]) -> Sequence[_A]:
    """Rank agents already sorted by ELO; equal ELO shares the previous rank."""
    previous = None
    for position, agent in enumerate(agents, start=1):
        if previous is not None and previous.elo == agent.elo:
            agent.rank = previous.rank
        else:
            agent.rank = position
        previous = agent
    return agents


class AgentService:
    """Business rules around agents, on top of an agent repository."""

    def __init__(self, agent_repo: _AgentRepository) -> None:
        self._repo = agent_repo

    def create(self, user_id: str, name: str, description: str, environment_id: str) -> Any:
        if not name:
            raise InvalidInputError()
        with _failure("create agent"):
            return self._repo.create(user_id, name, description, environment_id)

    def get(self, agent_id: str) -> Any:
        with _failure("get agent"):
            agent = self._repo.find_by_id(agent_id)
        if agent is None:
            raise AgentNotFoundError()
        return agent

    def by_user(self, user_id: str) -> list[Any]:
        with _failure("get user agents"):
            return self._repo.find_by_user_id(user_id)

    def list(self, page: int = 1, page_size: int = _DEFAULT_PAGE_SIZE) -> tuple[list[Any], int]:
        """One page of agents and the total number of agents."""
        page = max(page, 1)
        page_size = _clamp_size(page_size)
        with _failure("list agents"):
            agents = self._repo.find_all(page_size, (page - 1) * page_size)
        with _failure("count agents"):
            total = self._repo.count()
        return agents, total

    def leaderboard(self, environment_id: str = "", limit: int = _DEFAULT_PAGE_SIZE) -> list[Any]:
        """Top agents overall, or of one environment, with ranks assigned."""
        limit = _clamp_size(limit)
        with _failure("get leaderboard"):
            if environment_id:
                agents = self._repo.find_by_environment_id(environment_id, limit, 0)
            else:
                agents = self._repo.find_all(limit, 0)
        assign_ranks(agents)
        return agents

    def leaderboard_with_type(
        self,
        environment_id: str = "",
        leaderboard_type: str = "public",
        limit: int = _DEFAULT_PAGE_SIZE,
    ) -> list[Any]:
        """Same as :meth:`leaderboard`; the type is accepted but not yet used."""
        return self.leaderboard(environment_id, limit)

    def _owned(self, agent_id: str, user_id: str) -> Any:
        with _failure("find agent"):
            agent = self._repo.find_by_id(agent_id)
        if agent is None:
            raise AgentNotFoundError()
        if agent.user_id != user_id:
            raise UnauthorizedError()
        return agent

    def update(self, agent_id: str, user_id: str, name: str, description: str) -> None:
        self._owned(agent_id, user_id)
        with _failure("update agent"):
            self._repo.update(agent_id, name, description)

    def delete(self, agent_id: str, user_id: str) -> None:
        self._owned(agent_id, user_id)
        with _failure("delete agent"):
            self._repo.delete(agent_id)

    def opponent_stats(self, agent_id: str) -> list[Any]:
        with _failure("find agent"):
            agent = self._repo.find_by_id(agent_id)
        if agent is None:
            raise AgentNotFoundError()
        with _failure("get opponent stats"):
            return self._repo.opponent_stats(agent_id)