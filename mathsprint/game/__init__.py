"""Game rules shared by the server and the client: modes, tiers, problems.

Nothing in this package touches Flask or the database, so the terminal
client can import it without an application context.
"""

from .modes import GameMode, Tier, tier_for_score
from .problems import Problem, generate_problem

__all__ = ['GameMode', 'Tier', 'tier_for_score', 'Problem', 'generate_problem']
