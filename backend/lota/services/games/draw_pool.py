import random
from typing import List, Optional


class DrawPool:
    """Shuffled stack of the numbers not yet called."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()
        self.numbers: List[int] = []

    def initialize(self, max_numbers: int) -> None:
        numbers = list(range(1, max_numbers + 1))
        # Fisher-Yates, in place
        for i in range(len(numbers) - 1, 0, -1):
            j = self._rng.randint(0, i)
            numbers[i], numbers[j] = numbers[j], numbers[i]
        self.numbers = numbers

    def draw(self) -> Optional[int]:
        """Pop the next number, or None once the pool is drawn out."""
        if not self.numbers:
            return None
        return self.numbers.pop()

    def __len__(self) -> int:
        return len(self.numbers)
