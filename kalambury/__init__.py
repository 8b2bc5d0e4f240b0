"""
Kalambury - Charades Session Engine

Tracks the players, word categories and phrases of a party game of
charades and drives its rounds:
- Category offers and phrase selection
- Word-change budget
- Turn rotation and scoring
- Session persistence across restarts
"""

__version__ = "0.1.0"
