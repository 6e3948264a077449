from cashflow.agents.base import Agent
from cashflow.agents.random import RandomAgent
from cashflow.agents.greedy import GreedyAgent

__all__ = [
    "Agent",
    "RandomAgent",
    "GreedyAgent",
]
