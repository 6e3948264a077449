#!/usr/bin/env python3
"""
Minimal CLI for simulating Cashflow games.

Runs the turn engine with simple AI players that make random or greedy
decisions, optionally saving the game after every action.
"""

import argparse
import logging
import random
from typing import Dict, Optional

from cashflow.agents import Agent, GreedyAgent, RandomAgent
from cashflow.data.store import JsonSnapshotStore
from cashflow.exceptions import InvalidActionError
from cashflow.game.config import GameConfig
from cashflow.game.engine import GameEngine
from cashflow.game.player import Player
from cashflow.game.rules import ActionType, get_legal_actions
from cashflow.game.state import PLAYER_COLORS, GameSnapshot, new_player
from cashflow.logging_config import setup_logging
from cashflow.services import GameSession
from cashflow.settings import get_app_settings

logger = logging.getLogger(__name__)

PLAYER_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank"]
MAX_ACTIONS_PER_TURN = 10


def reached_fast_track(snapshot: GameSnapshot, player: Player) -> bool:
    """Win rule: the first player out of the Rat Race wins."""
    return player.on_fast_track


def print_game_state(snapshot: GameSnapshot) -> None:
    print("\n" + "=" * 60)
    print(f"TURN {snapshot.turn_number}")
    print("=" * 60)

    for player in snapshot.players:
        rr = player.rat_race
        track = "Fast Track" if player.on_fast_track else f"position {player.position + 1}"
        print(
            f"{player.name} ({player.profession}): ${player.cash:,} cash | "
            f"passive ${rr.passive_income:,} / expenses ${rr.total_expenses:,} | {track}"
        )


def print_game_summary(snapshot: GameSnapshot) -> None:
    print("\n" + "=" * 60)
    print("GAME OVER" if snapshot.is_over else "TURN LIMIT REACHED")
    print("=" * 60)

    if snapshot.winner_id is not None:
        winner = snapshot.get_player(snapshot.winner_id)
        print(f"\nWinner: {winner.name} ({winner.profession})")

    print("\nFinal Standings:")
    for player in sorted(snapshot.players, key=lambda p: p.net_worth, reverse=True):
        print(f"  {player.name}: net worth ${player.net_worth:,}, passive ${player.rat_race.passive_income:,}")

    print(f"\nTotal Turns: {snapshot.turn_number}")


def simulate_game(
    num_players: int = 4,
    agent_type: str = "greedy",
    seed: Optional[int] = None,
    verbose: bool = True,
    max_turns: int = 200,
    custom_mode: bool = False,
    save_path: Optional[str] = None,
    stop_on_fast_track: bool = False,
    resume: bool = False,
) -> GameSnapshot:
    """
    Simulate a game of Cashflow.

    Args:
        num_players: Number of players (1-6)
        agent_type: Type of AI ('random' or 'greedy')
        seed: Random seed for reproducibility
        verbose: Whether to print detailed output
        max_turns: Turn limit; the game has no built-in end otherwise
        custom_mode: Use custom-mode profession and income multipliers
        save_path: JSON file to save the game to after every action
        stop_on_fast_track: End the game when someone reaches the Fast Track
        resume: Continue the game saved at save_path if there is one

    Returns:
        The final snapshot
    """
    config = GameConfig(custom_mode=custom_mode, seed=seed)
    engine = GameEngine(
        config,
        rng=random.Random(seed),
        win_rule=reached_fast_track if stop_on_fast_track else None,
    )
    store = JsonSnapshotStore(save_path) if save_path else None
    session = GameSession(engine, store)

    players = [new_player(PLAYER_NAMES[i], PLAYER_COLORS[i], player_id=f"p{i + 1}") for i in range(num_players)]
    snapshot = session.resume() if resume else None
    resumed = snapshot is not None
    if snapshot is None:
        snapshot = session.new_game(players)

    agents: Dict[str, Agent] = {}
    for i, player in enumerate(snapshot.players):
        if agent_type == "random":
            agent_seed = None if seed is None else seed + i
            agents[player.player_id] = RandomAgent(player.player_id, player.name, seed=agent_seed)
        else:
            agents[player.player_id] = GreedyAgent(player.player_id, player.name)

    if verbose:
        if resumed:
            print(f"Resuming game at turn {snapshot.turn_number} using {agent_type} agents")
        else:
            print(f"Starting game with {len(snapshot.players)} players using {agent_type} agents")
        print(f"Seed: {seed}")
        for player in snapshot.players:
            print(f"  {player.name}: {player.profession}, ${player.cash:,} cash")

    while not session.snapshot.is_over and session.snapshot.turn_number < max_turns:
        current = session.snapshot.current_player
        agent = agents[current.player_id]
        turn = session.snapshot.turn_number

        for _ in range(MAX_ACTIONS_PER_TURN):
            legal_actions = get_legal_actions(session.snapshot, current.player_id)
            if not legal_actions:
                break

            action = agent.choose_action(session.snapshot, legal_actions)
            try:
                result = session.apply(action, current.player_id)
            except InvalidActionError as exc:
                logger.warning("%s: %s rejected: %s", agent.name, action, exc)
                break

            if result.condition is not None and verbose:
                print(f"  {agent.name}: {result.condition}")
            if verbose and action.action_type == ActionType.BUY_OPPORTUNITY:
                print(f"  {agent.name}: bought {action.params.get('card')}")

            if session.snapshot.turn_number != turn or session.snapshot.is_over:
                break
        else:
            logger.warning("%s hit the action limit on turn %d", agent.name, turn)
            break

        if verbose and session.snapshot.turn_number % 25 == 0:
            print_game_state(session.snapshot)

    if verbose:
        print_game_summary(session.snapshot)

    return session.snapshot


def main() -> None:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Simulate a Cashflow game")
    parser.add_argument(
        "--players",
        type=int,
        default=4,
        choices=range(1, 7),
        help="Number of players (1-6)",
    )
    parser.add_argument(
        "--agent",
        type=str,
        default="greedy",
        choices=["random", "greedy"],
        help="AI agent type",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--quiet", action="store_true", help="Reduce output verbosity")
    parser.add_argument("--max-turns", type=int, default=200, help="Maximum number of turns")
    parser.add_argument("--custom-mode", action="store_true", help="Enable custom-mode multipliers")
    parser.add_argument("--save", type=str, default=None, help="Save the game to this JSON file")
    parser.add_argument("--resume", action="store_true", help="Continue the game saved with --save, if any")
    parser.add_argument(
        "--stop-on-fast-track",
        action="store_true",
        help="End the game when the first player reaches the Fast Track",
    )

    args = parser.parse_args()
    if args.resume and not args.save:
        parser.error("--resume requires --save")

    settings = get_app_settings()
    setup_logging("WARNING" if args.quiet else settings.log_level)

    simulate_game(
        num_players=args.players,
        agent_type=args.agent,
        seed=args.seed if args.seed is not None else settings.seed,
        verbose=not args.quiet,
        max_turns=args.max_turns,
        custom_mode=args.custom_mode or settings.custom_mode,
        save_path=args.save,
        stop_on_fast_track=args.stop_on_fast_track,
        resume=args.resume,
    )


if __name__ == "__main__":
    main()
