"""Bet manager for Domino Hold'em tables played with physical cards."""
