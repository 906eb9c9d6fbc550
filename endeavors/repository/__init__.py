"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services/domains avoid SQL strings.
JSON columns are encoded/decoded here.
"""
