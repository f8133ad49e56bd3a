import logging
import random

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "James", "Mary", "Robert", "Patricia", "Michael", "Jennifer", "William", "Linda",
    "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica", "Thomas", "Sarah",
    "Charles", "Karen", "Christopher", "Nancy", "Daniel", "Lisa", "Matthew", "Betty",
    "Mark", "Margaret", "Donald", "Sandra", "Steven", "Ashley", "Paul", "Kimberly",
    "Andrew", "Donna", "Joshua", "Carol", "Kenneth", "Michelle", "Kevin", "Emily",
    "Brian", "Melissa", "George", "Deborah", "Edward", "Stephanie", "Ronald", "Rebecca",
    "Anthony", "Sharon", "Frank", "Laura", "Ryan", "Cynthia", "Gary", "Kathleen",
    "Nicholas", "Amy", "Eric", "Angela", "Jonathan", "Shirley", "Stephen", "Anna",
    "Larry", "Brenda", "Justin", "Pamela", "Scott", "Emma", "Brandon", "Nicole",
    "Benjamin", "Helen", "Samuel", "Samantha", "Gregory", "Christine", "Alexander", "Debra",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson",
    "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson",
    "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Young",
    "Allen", "King", "Wright", "Scott", "Torres", "Peterson", "Phillips", "Campbell",
    "Parker", "Evans", "Edwards", "Collins", "Reyes", "Stewart", "Morris", "Morales",
    "Murphy", "Cook", "Rogers", "Gutierrez", "Ortiz", "Morgan", "Cooper", "Reed",
]


class Distribution:
    """Helper to generate values based on a discrete probability distribution (PMF)."""
    def __init__(self, pmf_dict):
        """
        pmf_dict: Dict {Value: Probability}
        e.g., {'ER': 0.4, 'ICU': 0.2, ...}
        """
        self.values = list(pmf_dict.keys())
        self.probabilities = list(pmf_dict.values())

        # Normalize if needed (floating point issues)
        total = sum(self.probabilities)
        if abs(total - 1.0) > 0.01:
            logger.warning("PMF sums to %s, normalizing...", total)
            self.probabilities = [p / total for p in self.probabilities]

    def sample(self, rng=random):
        """Return a value sampled from the distribution."""
        return rng.choices(self.values, weights=self.probabilities, k=1)[0]


def generate_random_name(rng=random):
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def generate_unique_names(count, rng=random):
    """Return `count` distinct display names."""
    limit = len(FIRST_NAMES) * len(LAST_NAMES)
    if count > limit:
        raise ValueError(f"Cannot generate {count} unique names (max {limit})")
    names = []
    seen = set()
    while len(names) < count:
        name = generate_random_name(rng)
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names
