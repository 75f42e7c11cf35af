"""Game domain services: lifecycle, scoring, clock and foul projections.

This package contains the rules of a basketball game and is imported by
the HTTP routes, keeping transport concerns separated from core game
mechanics. Every operation takes the game id explicitly and re-reads the
stored rows; nothing is cached between requests.
"""
