from typing import Dict, Tuple


# winners_count -> share per place (1st, 2nd, 3rd)
PRIZE_SHARES: Dict[int, Tuple[float, ...]] = {
    1: (1.0,),
    2: (0.6, 0.4),
    3: (0.5, 0.3, 0.2),
}


def prize_share(place: int, winners_count: int) -> float:
    """Fraction of the pot paid to ``place`` when ``winners_count`` are paid."""
    shares = PRIZE_SHARES.get(winners_count)
    if shares is None:
        raise ValueError(f'unsupported winners_count: {winners_count}')
    if not 1 <= place <= len(shares):
        raise ValueError(f'place {place} out of range for {winners_count} winners')
    return shares[place - 1]


def compute_prize(total_pot: float, place: int, winners_count: int) -> float:
    return total_pot * prize_share(place, winners_count)
