from typing import Callable, Dict, Iterator, Optional, Tuple

from lota.exceptions import AdminAlreadyPresent, BadCredential, NoAdminYet
from lota.models import Participant, Role, clean_chips, clean_name


class Roster:
    """Connected participants keyed by socket sid.

    ``check_credential`` is the opaque admin check; it receives whatever the
    client sent as password and returns a bool.
    """

    def __init__(self, check_credential: Callable[[Optional[str]], bool]):
        self._check_credential = check_credential
        self._participants: Dict[str, Participant] = {}
        self.has_active_screen = False

    def __contains__(self, identity) -> bool:
        return identity in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._participants.values()))

    def __len__(self) -> int:
        return len(self._participants)

    def get(self, identity) -> Optional[Participant]:
        return self._participants.get(identity)

    @property
    def admin(self) -> Optional[Participant]:
        return next((p for p in self._participants.values() if p.is_admin), None)

    @property
    def has_admin(self) -> bool:
        return self.admin is not None

    def is_admin(self, identity) -> bool:
        participant = self._participants.get(identity)
        return bool(participant and participant.is_admin)

    def total_chips(self) -> int:
        return sum(p.chips for p in self._participants.values())

    def join(self, identity, name, role, chips=0, credential=None) -> Tuple[Participant, bool]:
        """Register (or re-register) ``identity``.

        Returns the participant and whether the screen flag changed. Raises a
        ``JoinRejected`` subclass and leaves the roster untouched on refusal.
        """
        role = role if isinstance(role, Role) else Role.parse(role)
        current_admin = self.admin
        if role is Role.ADMIN:
            if not self._check_credential(credential):
                raise BadCredential()
            if current_admin is not None and current_admin.id != identity:
                raise AdminAlreadyPresent()
        elif current_admin is None or current_admin.id == identity:
            # the admin re-joining under another role would leave no admin
            raise NoAdminYet()

        participant = Participant(
            id=identity,
            name=clean_name(name),
            chips=clean_chips(chips),
            role=role,
            is_admin=role is Role.ADMIN,
        )
        self._participants[identity] = participant
        return participant, self._refresh_screen_flag()

    def leave(self, identity) -> Tuple[Optional[Participant], bool]:
        """Drop ``identity``; unknown identities are a no-op."""
        participant = self._participants.pop(identity, None)
        if participant is None:
            return None, False
        return participant, self._refresh_screen_flag()

    def _refresh_screen_flag(self) -> bool:
        was_active = self.has_active_screen
        self.has_active_screen = any(p.role is Role.SCREEN for p in self._participants.values())
        return was_active != self.has_active_screen

    def to_dict(self):
        return {pid: p.to_dict() for pid, p in self._participants.items()}
