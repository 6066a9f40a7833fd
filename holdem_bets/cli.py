#!/usr/bin/env python3
"""CLI tool for inspecting games in the configured store."""
import asyncio
import sys

from holdem_bets.game.errors import GameNotFound
from holdem_bets.service import GameService, create_service


async def list_games(service: GameService):
    """List all games."""
    await service.store.connect()
    try:
        games = await service.list_games()

        if not games:
            print("No games found.")
            return

        print(f"\n{'ID':<6} {'Players':<8} {'Hand':<6} {'Round':<10} {'Pot':<8} {'Active'}")
        print("-" * 50)
        for g in games:
            print(
                f"{g.id:<6} {g.player_count:<8} {g.current_hand_number:<6} "
                f"{g.current_round.value:<10} {g.pot:<8} {'yes' if g.is_active else 'no'}"
            )
        print(f"\nTotal: {len(games)} games")
    finally:
        await service.store.disconnect()


async def show_game(service: GameService, game_id: int):
    """Show a game's players and recent actions."""
    await service.store.connect()
    try:
        try:
            snapshot = await service.get_game_state(game_id)
        except GameNotFound as e:
            print(f"Error: {e}")
            sys.exit(1)

        game = snapshot.game
        print(f"\nGame {game.id} ({'active' if game.is_active else 'ended'})")
        print(f"  Hand:        #{game.current_hand_number} ({game.current_round.value})")
        print(f"  Pot:         {game.pot}")
        print(f"  Current bet: {game.current_bet_amount}")
        print(f"  To act:      position {game.current_player_turn}")

        print(f"\n{'Pos':<5} {'Name':<12} {'Balance':<9} {'Bet':<6} {'Status'}")
        print("-" * 42)
        for p in snapshot.players:
            print(f"{p.position:<5} {p.name:<12} {p.balance:<9} {p.current_bet:<6} {p.status.value}")

        recent = snapshot.actions[-10:]
        if recent:
            print("\nRecent actions:")
            for a in recent:
                amount = f" {a.amount}" if a.amount is not None else ""
                print(f"  #{a.hand_number} {a.round.value:<9} {a.player_name}: {a.action.value}{amount}")
    finally:
        await service.store.disconnect()


def print_usage():
    """Print usage information."""
    print("""
Bet Manager CLI

Usage:
  python -m holdem_bets.cli <command> [args]

Commands:
  list                  List all games
  show <game_id>        Show a game's table and recent actions

Examples:
  STORE_BACKEND=redis python -m holdem_bets.cli list
  STORE_BACKEND=redis python -m holdem_bets.cli show 3
""")


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1].lower()

    if command == "list":
        asyncio.run(list_games(create_service()))

    elif command == "show":
        if len(sys.argv) < 3 or not sys.argv[2].isdigit():
            print("Error: Game ID required.")
            print("Usage: python -m holdem_bets.cli show <game_id>")
            sys.exit(1)
        asyncio.run(show_game(create_service(), int(sys.argv[2])))

    elif command in ("help", "-h", "--help"):
        print_usage()

    else:
        print(f"Unknown command: {command}")
        print_usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
