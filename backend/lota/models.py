import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from lota.exceptions import InvalidConfig


NAME_MAX_LEN = 24
DEFAULT_NAME = 'Anónimo'


class Status(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    VERIFYING = 'verifying'
    PAUSED = 'paused'
    FINISHED = 'finished'


class Role(str, Enum):
    PLAYER = 'player'
    ADMIN = 'admin'
    SCREEN = 'screen'

    @classmethod
    def parse(cls, value) -> 'Role':
        """Unknown or missing roles join as plain players."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PLAYER


class Voice(str, Enum):
    FEMALE = 'female'
    MALE = 'male'


def clean_name(value) -> str:
    name = str(value or '').strip()[:NAME_MAX_LEN]
    return name or DEFAULT_NAME


def clean_chips(value) -> int:
    try:
        chips = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, chips)


@dataclass
class Participant:
    id: str
    name: str
    chips: int = 0
    role: Role = Role.PLAYER
    is_admin: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'chips': self.chips,
            'role': self.role.value,
            'is_admin': self.is_admin,
        }


@dataclass
class Winner:
    participant_id: str
    name: str
    place: int
    prize: float

    def to_dict(self):
        return {
            'participant_id': self.participant_id,
            'name': self.name,
            'place': self.place,
            'prize': self.prize,
        }


@dataclass
class PendingClaim:
    participant_id: str
    name: str

    def to_dict(self):
        return {'participant_id': self.participant_id, 'name': self.name}


@dataclass
class Results:
    total_pot: float = 0.0
    winners: List[Winner] = field(default_factory=list)

    def has_winner(self, participant_id: str) -> bool:
        return any(w.participant_id == participant_id for w in self.winners)

    def to_dict(self):
        return {
            'total_pot': self.total_pot,
            'winners': [w.to_dict() for w in self.winners],
        }


def _pick(data: Mapping[str, Any], *keys):
    for key in keys:
        value = data.get(key)
        if value is not None and value != '':
            return value
    return None


@dataclass(frozen=True)
class GameConfig:
    max_numbers: int = 100
    winners_count: int = 3
    price_per_chip: float = 10.0
    draw_interval_seconds: float = 4.0
    voice: Voice = Voice.FEMALE

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]], settings: Optional[Mapping[str, Any]] = None) -> 'GameConfig':
        """Build a config from an admin's start_game payload.

        Missing fields fall back to the ``DEFAULT_*`` app settings. Both
        snake_case and the camelCase names used by the browser panel are
        accepted, and ``speed`` is an alias of the draw interval.
        """
        data = dict(payload or {})
        settings = settings or {}

        raw_max = _pick(data, 'max_numbers', 'maxNumbers')
        raw_winners = _pick(data, 'winners_count', 'winnersCount')
        raw_price = _pick(data, 'price_per_chip', 'pricePerChip')
        raw_interval = _pick(data, 'draw_interval_seconds', 'drawIntervalSeconds', 'speed')
        raw_voice = _pick(data, 'voice', 'announcement_voice', 'announcementVoice')

        try:
            max_numbers = int(raw_max if raw_max is not None else settings.get('DEFAULT_MAX_NUMBERS', cls.max_numbers))
            winners_count = int(raw_winners if raw_winners is not None else settings.get('DEFAULT_WINNERS_COUNT', cls.winners_count))
            price_per_chip = float(raw_price if raw_price is not None else settings.get('DEFAULT_PRICE_PER_CHIP', cls.price_per_chip))
            draw_interval = float(raw_interval if raw_interval is not None else settings.get('DEFAULT_DRAW_INTERVAL_SEC', cls.draw_interval_seconds))
        except (TypeError, ValueError) as exc:
            raise InvalidConfig(f'Configuración inválida: {exc}') from exc

        try:
            voice = Voice(str(raw_voice if raw_voice is not None else settings.get('DEFAULT_VOICE', cls.voice.value)).lower())
        except ValueError as exc:
            raise InvalidConfig(f'Voz desconocida: {raw_voice}') from exc

        limit = int(settings.get('MAX_NUMBERS_LIMIT', 1000))
        if not 1 <= max_numbers <= limit:
            raise InvalidConfig(f'La cantidad de números debe estar entre 1 y {limit}.')
        if winners_count not in (1, 2, 3):
            raise InvalidConfig('La cantidad de ganadores debe ser 1, 2 o 3.')
        if not math.isfinite(price_per_chip) or price_per_chip < 0:
            raise InvalidConfig('El precio por ficha no puede ser negativo.')
        min_interval = float(settings.get('MIN_DRAW_INTERVAL_SEC', 0.5))
        if not math.isfinite(draw_interval) or draw_interval < min_interval or draw_interval <= 0:
            raise InvalidConfig(f'El intervalo debe ser de al menos {min_interval} segundos.')

        return cls(
            max_numbers=max_numbers,
            winners_count=winners_count,
            price_per_chip=price_per_chip,
            draw_interval_seconds=draw_interval,
            voice=voice,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_numbers': self.max_numbers,
            'winners_count': self.winners_count,
            'price_per_chip': self.price_per_chip,
            'draw_interval_seconds': self.draw_interval_seconds,
            'voice': self.voice.value,
        }
