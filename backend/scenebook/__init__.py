"""
Scenebook: screenplay breakdown backend (movies, characters, scenes, montages).
"""
