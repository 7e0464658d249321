from dataclasses import dataclass

import pytest

from rlarena.agent_service import AgentService, assign_ranks
from rlarena.errors import (
    AgentNotFoundError,
    InvalidInputError,
    ServiceError,
    UnauthorizedError,
)


@dataclass
class FakeAgent:
    id: str
    user_id: str
    name: str
    elo: int = 1200
    environment_id: str = "pong"
    description: str = ""
    rank: int = 0


class FakeRepo:
    def __init__(self, agents=(), fail=False):
        self.agents = {a.id: a for a in agents}
        self.fail = fail
        self.calls = []

    def _check(self):
        if self.fail:
            raise RuntimeError("db down")

    def create(self, user_id, name, description, environment_id):
        self._check()
        agent = FakeAgent(f"a{len(self.agents)}", user_id, name, description=description,
                          environment_id=environment_id)
        self.agents[agent.id] = agent
        return agent

    def find_by_id(self, agent_id):
        self._check()
        return self.agents.get(agent_id)

    def find_by_user_id(self, user_id):
        self._check()
        return [a for a in self.agents.values() if a.user_id == user_id]

    def _sorted(self, agents):
        return sorted(agents, key=lambda a: -a.elo)

    def find_all(self, limit, offset):
        self._check()
        self.calls.append(("all", limit, offset))
        return self._sorted(self.agents.values())[offset:offset + limit]

    def count(self):
        self._check()
        return len(self.agents)

    def find_by_environment_id(self, environment_id, limit, offset):
        self._check()
        self.calls.append(("env", environment_id, limit, offset))
        chosen = [a for a in self.agents.values() if a.environment_id == environment_id]
        return self._sorted(chosen)[offset:offset + limit]

    def update(self, agent_id, name, description):
        self.agents[agent_id].name = name
        self.agents[agent_id].description = description

    def delete(self, agent_id):
        del self.agents[agent_id]

    def opponent_stats(self, agent_id):
        return [{"opponent": "other", "agent": agent_id}]


def _agents():
    return [
        FakeAgent("a1", "u1", "one", elo=1500),
        FakeAgent("a2", "u2", "two", elo=1400, environment_id="chess"),
        FakeAgent("a3", "u1", "three", elo=1400),
        FakeAgent("a4", "u3", "four", elo=1300),
    ]


def test_assign_ranks_shares_rank_on_ties():
    agents = [FakeAgent(str(i), "u", "n", elo=e) for i, e in enumerate([1500, 1400, 1400, 1300])]
    assign_ranks(agents)
    assert [a.rank for a in agents] == [1, 2, 2, 4]


def test_create_requires_name():
    with pytest.raises(InvalidInputError):
        AgentService(FakeRepo()).create("u1", "", "desc", "pong")


def test_create_returns_repository_agent():
    repo = FakeRepo()
    agent = AgentService(repo).create("u1", "bot", "desc", "pong")
    assert repo.agents[agent.id] is agent
    assert agent.name == "bot"


def test_get_missing_agent_raises():
    with pytest.raises(AgentNotFoundError):
        AgentService(FakeRepo()).get("nope")


def test_repository_failure_is_wrapped():
    with pytest.raises(ServiceError, match="^failed to get agent: db down$"):
        AgentService(FakeRepo(fail=True)).get("a1")


def test_by_user_filters():
    service = AgentService(FakeRepo(_agents()))
    assert {a.id for a in service.by_user("u1")} == {"a1", "a3"}


def test_list_returns_total():
    agents, total = AgentService(FakeRepo(_agents())).list(1, 2)
    assert total == len(_agents())
    assert [a.id for a in agents] == ["a1", "a2"] or [a.id for a in agents] == ["a1", "a3"]


def test_list_normalizes_bad_page_arguments():
    repo = FakeRepo(_agents())
    service = AgentService(repo)
    service.list(0, 101)
    service.list(1, 20)
    assert repo.calls[0] == repo.calls[1]


def test_leaderboard_overall_ranks():
    board = AgentService(FakeRepo(_agents())).leaderboard("", 10)
    ranks = [a.rank for a in board]
    assert ranks[0] == 1
    assert ranks[1] == ranks[2]
    assert ranks == sorted(ranks)


def test_leaderboard_by_environment_uses_environment_query():
    repo = FakeRepo(_agents())
    board = AgentService(repo).leaderboard("chess", 500)
    assert [a.id for a in board] == ["a2"]
    assert repo.calls[-1] == ("env", "chess", 20, 0)


def test_leaderboard_with_type_matches_leaderboard():
    service = AgentService(FakeRepo(_agents()))
    plain = [(a.id, a.rank) for a in service.leaderboard("pong", 10)]
    typed = [(a.id, a.rank) for a in service.leaderboard_with_type("pong", "private", 10)]
    assert plain == typed


def test_update_by_owner():
    repo = FakeRepo(_agents())
    AgentService(repo).update("a1", "u1", "renamed", "new")
    assert (repo.agents["a1"].name, repo.agents["a1"].description) == ("renamed", "new")


def test_update_by_other_user_is_refused():
    with pytest.raises(UnauthorizedError):
        AgentService(FakeRepo(_agents())).update("a1", "u2", "x", "y")


def test_delete_missing_agent_raises():
    with pytest.raises(AgentNotFoundError):
        AgentService(FakeRepo(_agents())).delete("zzz", "u1")


def test_delete_by_owner():
    repo = FakeRepo(_agents())
    AgentService(repo).delete("a3", "u1")
    assert "a3" not in repo.agents


def test_opponent_stats():
    service = AgentService(FakeRepo(_agents()))
    assert service.opponent_stats("a1") == [{"opponent": "other", "agent": "a1"}]
    with pytest.raises(AgentNotFoundError):
        service.opponent_stats("missing")