# Infrastructure layer - SQLite repositories
"""
Infrastructure layer contains:
- Repositories over a sqlite3 connection (accounts, sessions, elections,
  questions and options, voter rosters, votes)

Application services depend on this layer, not vice versa.
"""
