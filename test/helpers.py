import random

from faker import Faker

fake = Faker()

KEYS = "ABCDEFGabcdefg"
MODALITY = "#b♮"


def random_key() -> str:
    """A random musical key such as ``C#`` or ``eb``."""
    return random.choice(KEYS) + random.choice(MODALITY)


def random_track() -> dict:
    return {
        "trackName": fake.first_name(),
        "bpm": random.randint(1, 350),
        "key": random_key(),
    }


def generate_setlist_data(count: int = 7) -> dict:
    return {"tracks": [random_track() for _ in range(count)]}


def scramble(items: list) -> list:
    """Fisher-Yates shuffle of a copy; never returns the input order for len > 1."""
    items = list(items)
    if len(items) < 2:
        return items
    original = list(items)
    while items == original:
        current = len(items)
        while current:
            pick = random.randrange(current)
            current -= 1
            items[current], items[pick] = items[pick], items[current]
    return items
