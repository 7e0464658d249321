"""ELO rating calculation with provisional K-factors."""

from __future__ import annotations

import math
from typing import NamedTuple


class RatingUpdate(NamedTuple):
    """New ratings of both agents and how much each changed."""

    new_agent1_elo: int
    new_agent2_elo: int
    agent1_change: int
    agent2_change: int


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class EloService:
    """Computes rating changes after a match.

    ``result`` is 1.0 when agent 1 wins, 0.5 for a draw and 0.0 when agent 2 wins.
    """

    def __init__(self, default_k_factor: float = 32.0) -> None:
        self.default_k_factor = default_k_factor

    def k_factor(self, match_count: int) -> float:
        """K-factor for an agent that has played ``match_count`` matches."""
        if match_count < 10:
            return 40.0
        if match_count < 20:
            return 32.0
        return 24.0

    def expected_score(self, rating_a: float, rating_b: float) -> float:
        """Expected score of a player rated ``rating_a`` against ``rating_b``."""
        return 1.0 / (1.0 + math.pow(10, (rating_b - rating_a) / 400.0))

    def _update(
        self, agent1_elo: int, agent2_elo: int, k1: float, k2: float, result: float
    ) -> RatingUpdate:
        expected1 = self.expected_score(float(agent1_elo), float(agent2_elo))
        expected2 = 1.0 - expected1
        new1 = _round_half_away(agent1_elo + k1 * (result - expected1))
        new2 = _round_half_away(agent2_elo + k2 * ((1.0 - result) - expected2))
        return RatingUpdate(new1, new2, new1 - agent1_elo, new2 - agent2_elo)

    def calculate_new_ratings(
        self, agent1_elo: int, agent2_elo: int, result: float
    ) -> RatingUpdate:
        """New ratings using the default K-factor for both agents."""
        k = self.default_k_factor
        return self._update(agent1_elo, agent2_elo, k, k, result)

    def calculate_new_ratings_with_match_counts(
        self,
        agent1_elo: int,
        agent2_elo: int,
        agent1_matches: int,
        agent2_matches: int,
        result: float,
    ) -> RatingUpdate:
        """New ratings with K-factors chosen by each agent's match count."""
        return self._update(
            agent1_elo,
            agent2_elo,
            self.k_factor(agent1_matches),
            self.k_factor(agent2_matches),
            result,
        )