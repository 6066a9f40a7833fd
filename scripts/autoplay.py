#!/usr/bin/env python3
"""
Auto-play a few hands against a running server over HTTP.

Usage:
    python scripts/autoplay.py

Prerequisites:
    - Server running at localhost:8765 (python -m holdem_bets.main)
    - pip install httpx
"""
import asyncio
import random
import httpx

API_URL = "http://localhost:8765"
PLAYER_COUNT = 4
STARTING_BALANCE = 500
MAX_HANDS = 5


def choose_action(game: dict, player: dict) -> dict:
    """Pick a legal-looking action for the player to act."""
    to_call = game["currentBetAmount"] - player["currentBet"]

    if game["currentBetAmount"] == 0:
        if player["balance"] > 0 and random.random() < 0.5:
            return {"action": "bet", "amount": random.randint(1, min(20, player["balance"]))}
        return {"action": "fold"} if random.random() < 0.2 else {"action": "bet", "amount": 1}

    if to_call > player["balance"] or random.random() < 0.15:
        return {"action": "fold"}
    headroom = player["balance"] - to_call
    if headroom > 10 and random.random() < 0.2:
        return {"action": "raise", "amount": game["currentBetAmount"] + random.randint(1, 10)}
    return {"action": "call"}


async def play_round(client: httpx.AsyncClient, game_id: int) -> bool:
    """Give every active player one action. Returns False if the hand is decided."""
    state = (await client.get(f"{API_URL}/api/games/{game_id}")).json()
    active = [p for p in state["players"] if p["status"] == "active"]

    for _ in range(len(active)):
        state = (await client.get(f"{API_URL}/api/games/{game_id}")).json()
        game = state["game"]
        active = [p for p in state["players"] if p["status"] == "active"]
        if len(active) <= 1:
            return False

        player = next(p for p in active if p["position"] == game["currentPlayerTurn"])
        action = choose_action(game, player)
        res = await client.post(f"{API_URL}/api/games/{game_id}/actions", json=action)
        if res.status_code == 200:
            amount = res.json()["action"]["amount"]
            print(f"  {player['name']}: {action['action']}" + (f" {amount}" if amount else ""))
        else:
            print(f"  ✗ {player['name']}: {action} rejected ({res.json().get('error')})")
            await client.post(f"{API_URL}/api/games/{game_id}/actions", json={"action": "fold"})

    return True


async def main():
    print("=" * 50)
    print("Bet manager autoplay")
    print("=" * 50)

    async with httpx.AsyncClient() as client:
        res = await client.post(
            f"{API_URL}/api/games",
            json={"playerCount": PLAYER_COUNT, "startingBalance": STARTING_BALANCE},
        )
        res.raise_for_status()
        game_id = res.json()["game"]["id"]
        print(f"  ✓ Created game {game_id}")

        for hand in range(1, MAX_HANDS + 1):
            print(f"\n--- Hand {hand} ---")
            for round_name in ("pre-flop", "turn", "river"):
                print(f" [{round_name}]")
                if not await play_round(client, game_id):
                    break
                if round_name != "river":
                    await client.post(f"{API_URL}/api/games/{game_id}/next-round")

            state = (await client.get(f"{API_URL}/api/games/{game_id}")).json()
            contenders = [p for p in state["players"] if p["status"] == "active"]
            if not contenders:
                contenders = [p for p in state["players"] if p["status"] != "out"]
            winner = random.choice(contenders)
            res = await client.post(
                f"{API_URL}/api/games/{game_id}/declare-winner",
                json={"playerId": winner["id"]},
            )
            print(f"  ✓ {winner['name']} wins {res.json()['amountWon']}")

        state = (await client.get(f"{API_URL}/api/games/{game_id}")).json()
        leader = max(state["players"], key=lambda p: p["balance"])
        res = await client.post(
            f"{API_URL}/api/games/{game_id}/end-game", json={"winnerId": leader["id"]}
        )

    print("\n" + "=" * 50)
    print(f"{leader['name']} takes the game with {res.json()['totalWon']} more chips")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(main())
