"""Game domain services: draw pool, payouts, roster, timer and session.

This package contains the pure(ish) game logic used by the socket handlers
and HTTP routes, keeping transport concerns separated from core game
mechanics.
"""

from .draw_pool import DrawPool
from .payout import prize_share, compute_prize
from .roster import Roster
from .scheduler import DrawTimer
from .session import GameSession

__all__ = ['DrawPool', 'prize_share', 'compute_prize', 'Roster', 'DrawTimer', 'GameSession']
