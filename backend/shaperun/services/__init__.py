"""Domain services shared by HTTP routes and socket handlers.

Keeps persistence side effects (stats, leaderboard broadcasts) out of the
transport layer.
"""
