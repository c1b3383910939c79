"""The shared Lota game session.

One ``GameSession`` lives for the whole process. Every mutation (joins,
leaves, admin commands, timer ticks) runs under ``session.lock`` and ends with
the broadcasts it causes, so clients never see a half-applied transition and
broadcasts arrive in mutation order.

Status pipeline: waiting -> playing -> verifying -> playing | finished, with
playing <-> paused and reset back to waiting from anywhere else.
"""

import functools
import logging
import threading
from typing import Any, Callable, Mapping, Optional

from lota.exceptions import (
    AuthorizationDenied,
    InvalidConfig,
    InvariantBreach,
    JoinRejected,
    PreconditionViolated,
)
from lota.models import GameConfig, PendingClaim, Results, Role, Status, Winner
from .draw_pool import DrawPool
from .payout import compute_prize
from .roster import Roster
from .scheduler import DrawTimer


HISTORY_SIZE = 5

ANNOUNCE_CLAIM = '¡LOTA!'
ANNOUNCE_DENIED = 'Denegado, continuamos'
ANNOUNCE_GAME_OVER = 'Juego Terminado'
PLACE_PHRASES = {1: 'Primer Lugar', 2: 'Segundo Lugar', 3: 'Tercer Lugar'}


def session_command(func):
    """Run a command atomically; refused commands are dropped silently.

    Returns True when the command was applied, False when it was dropped.
    """
    @functools.wraps(func)
    def wrapper(self, requester, *args, **kwargs):
        with self.lock:
            try:
                func(self, requester, *args, **kwargs)
            except (AuthorizationDenied, PreconditionViolated) as exc:
                self.logger.debug(f"[dropped] cmd={func.__name__} sid={requester} {type(exc).__name__}: {exc}")
                return False
            return True
    return wrapper


class GameSession:

    def __init__(self, broadcaster, check_credential: Callable[[Optional[str]], bool],
                 timer: Optional[DrawTimer] = None, pool: Optional[DrawPool] = None,
                 settings: Optional[Mapping[str, Any]] = None,
                 logger: Optional[logging.Logger] = None, strict: bool = False):
        self.lock = threading.RLock()
        self.broadcaster = broadcaster
        self.settings = settings or {}
        self.logger = logger or logging.getLogger(__name__)
        self.strict = strict
        self.roster = Roster(check_credential)
        self.pool = pool or DrawPool()
        self.timer = timer or DrawTimer(logger=self.logger)

        self.status = Status.WAITING
        self.config = GameConfig.from_payload(None, self.settings)
        self.max_numbers = self.config.max_numbers
        self.called_numbers = []
        self.history = []
        self.results = Results()
        self.pending_claim: Optional[PendingClaim] = None

    # ---- Snapshot ----

    def snapshot(self):
        with self.lock:
            return {
                'status': self.status.value,
                'max_numbers': self.max_numbers,
                'called_numbers': list(self.called_numbers),
                'history': list(self.history),
                'remaining_count': len(self.pool),
                'players': self.roster.to_dict(),
                'has_admin': self.roster.has_admin,
                'has_active_screen': self.roster.has_active_screen,
                'config': self.config.to_dict(),
                'results': self.results.to_dict(),
                'pending_claim': self.pending_claim.to_dict() if self.pending_claim else None,
            }

    def send_state(self, to: str) -> None:
        with self.lock:
            self.broadcaster.sync(self.snapshot(), to=to)

    # ---- Roster ----

    def join(self, identity, name=None, role=None, chips=0, credential=None):
        with self.lock:
            try:
                participant, screen_changed = self.roster.join(identity, name, role, chips, credential)
            except JoinRejected as exc:
                self.logger.info(f"[join-rejected] sid={identity} role={role} reason={type(exc).__name__}")
                self.broadcaster.error(identity, str(exc))
                return None
            self.logger.info(
                f"[join] sid={identity} name={participant.name} role={participant.role.value} chips={participant.chips}"
            )
            if screen_changed:
                self._commit()
            self._commit()
            return participant

    def leave(self, identity) -> bool:
        with self.lock:
            participant, screen_changed = self.roster.leave(identity)
            if participant is None:
                return False
            self.logger.info(f"[leave] sid={identity} name={participant.name} role={participant.role.value}")
            if participant.is_admin:
                self.logger.warning("[admin-left] admin commands disabled until a new admin joins")
            if self.pending_claim and self.pending_claim.participant_id == identity:
                self.logger.info(f"[claim-orphaned] claimant {participant.name} left; claim kept for the admin")
            if screen_changed:
                self._commit()
            self._commit()
            return True

    # ---- Admin commands ----

    @session_command
    def start(self, requester, payload=None):
        self._require_admin(requester)
        self._require_status(Status.WAITING, Status.FINISHED)
        try:
            config = GameConfig.from_payload(payload, self.settings)
        except InvalidConfig as exc:
            self.broadcaster.error(requester, str(exc))
            raise

        self.config = config
        self.max_numbers = config.max_numbers
        self.pool.initialize(config.max_numbers)
        self.called_numbers = []
        self.history = []
        self.results = Results(total_pot=self.roster.total_chips() * config.price_per_chip)
        self.pending_claim = None
        self.status = Status.PLAYING
        self.logger.info(
            f"[start] max_numbers={config.max_numbers} winners={config.winners_count} "
            f"pot={self.results.total_pot} interval={config.draw_interval_seconds}s"
        )
        self._start_timer()
        self._commit()

    @session_command
    def verify(self, requester, approved):
        self._require_admin(requester)
        self._require_status(Status.VERIFYING)
        claim = self.pending_claim
        self.pending_claim = None

        if approved:
            place = len(self.results.winners) + 1
            prize = compute_prize(self.results.total_pot, place, self.config.winners_count)
            self.results.winners.append(Winner(claim.participant_id, claim.name, place, prize))
            self.logger.info(f"[verify] approved sid={claim.participant_id} place={place} prize={prize}")
            if len(self.results.winners) >= self.config.winners_count:
                self.status = Status.FINISHED
            else:
                self.status = Status.PLAYING
                self._start_timer()
            self.broadcaster.announce(PLACE_PHRASES.get(place, f'Lugar {place}'))
            if self.status is Status.FINISHED:
                self.broadcaster.announce(ANNOUNCE_GAME_OVER)
        else:
            self.logger.info(f"[verify] denied sid={claim.participant_id}")
            self.status = Status.PLAYING
            self._start_timer()
            self.broadcaster.announce(ANNOUNCE_DENIED)
        self._commit()

    @session_command
    def pause(self, requester):
        self._require_admin(requester)
        self._require_status(Status.PLAYING)
        self.timer.cancel()
        self.status = Status.PAUSED
        self.logger.info("[pause]")
        self._commit()

    @session_command
    def resume(self, requester):
        self._require_admin(requester)
        self._require_status(Status.PAUSED)
        self.status = Status.PLAYING
        self._start_timer()
        self.logger.info("[resume]")
        self._commit()

    @session_command
    def reset(self, requester):
        self._require_admin(requester)
        self._require_status(Status.PLAYING, Status.PAUSED, Status.VERIFYING, Status.FINISHED)
        self.timer.cancel()
        self.called_numbers = []
        self.history = []
        self.results.winners = []
        self.pending_claim = None
        self.status = Status.WAITING
        self.logger.info("[reset]")
        self._commit()

    # ---- Player commands ----

    @session_command
    def claim(self, requester):
        participant = self.roster.get(requester)
        if participant is None:
            raise PreconditionViolated('not joined')
        if participant.role is Role.SCREEN:
            raise PreconditionViolated('screens do not play')
        self._require_status(Status.PLAYING)
        if self.results.has_winner(requester):
            raise PreconditionViolated('already a winner')

        self.timer.cancel()
        self.status = Status.VERIFYING
        self.pending_claim = PendingClaim(participant_id=requester, name=participant.name)
        self.logger.info(f"[claim] sid={requester} name={participant.name} called={len(self.called_numbers)}")
        self.broadcaster.announce(f'{ANNOUNCE_CLAIM} {participant.name}')
        self._commit()

    # ---- Timer ----

    def tick(self, generation: Optional[int] = None) -> Optional[int]:
        """Call the next number; fired by the draw timer.

        A tick from a cancelled timer generation, or outside ``playing``, is
        ignored.
        """
        with self.lock:
            if generation is not None and not self.timer.is_current(generation):
                self.logger.info(f"[timer-abort] stale generation={generation}")
                return None
            if self.status is not Status.PLAYING:
                return None

            number = self.pool.draw()
            if number is None:
                self.timer.cancel()
                self.status = Status.FINISHED
                self.logger.info(f"[finish] pool drawn out after {len(self.called_numbers)} numbers")
                self.broadcaster.announce(ANNOUNCE_GAME_OVER)
                self._commit()
                return None

            self.called_numbers.append(number)
            self.history.insert(0, number)
            del self.history[HISTORY_SIZE:]
            self.broadcaster.new_number(number, self.config.voice.value)
            self._commit()
            return number

    def _start_timer(self) -> None:
        self.timer.start(self.config.draw_interval_seconds, self.tick)

    # ---- Guards ----

    def _require_admin(self, requester) -> None:
        if not self.roster.is_admin(requester):
            raise AuthorizationDenied('admin only')

    def _require_status(self, *allowed: Status) -> None:
        if self.status not in allowed:
            raise PreconditionViolated(f'status is {self.status.value}')

    def _commit(self) -> None:
        """Check the claim pairing, then push the full state to everyone."""
        self._check_claim_invariant()
        self.broadcaster.sync(self.snapshot())

    def _check_claim_invariant(self) -> None:
        verifying = self.status is Status.VERIFYING
        if verifying == (self.pending_claim is not None):
            return
        detail = f"status={self.status.value} pending_claim={self.pending_claim}"
        if self.strict:
            raise InvariantBreach(detail)
        self.logger.error(f"[invariant] {detail}; clearing claim")
        self.pending_claim = None
        if verifying:
            self.timer.cancel()
            self.status = Status.PAUSED
