"""
Manas adaptive core.

Closed-loop control around the mini-games:
- manas.adaptive: trial-by-trial difficulty staircase
- manas.learning: cross-session mastery and spaced repetition
- manas.study: stage composition and lifecycle
"""

__version__ = "0.1.0"
