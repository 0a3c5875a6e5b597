# timetable_ga/initial_population.py
import random
from typing import List

from .model import Catalog, Gene, Individual, Population


def random_timeslot(catalog: Catalog, rng: random.Random) -> int:
    return catalog.timeslots[rng.randrange(catalog.num_timeslots)].timeslot_id


def build_random_individual(catalog: Catalog, rng: random.Random) -> Individual:
    # El eje de asignaciones es fijo; solo se sortea el timeslot
    genes: List[Gene] = [
        (a.assignment_id, random_timeslot(catalog, rng)) for a in catalog.assignments
    ]
    return Individual(genes=genes)


def build_initial_population(catalog: Catalog, pop_size: int, rng: random.Random) -> Population:
    return Population([build_random_individual(catalog, rng) for _ in range(pop_size)])
