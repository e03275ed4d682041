"""
Entity repositories.

Typed CRUD over each store collection. Every function takes the `Store`
handle as its first argument and performs a full load -> mutate -> save
cycle; there is no partial persistence.
"""
