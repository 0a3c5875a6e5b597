import random
from typing import List

from .initial_population import random_timeslot
from .model import Catalog, Gene, Individual, Population


def tournament_select(population: Population, tournament_size: int, rng: random.Random) -> Individual:
    """
    Torneo sin reemplazo: se sortean tournament_size individuos distintos y
    gana el de mayor fitness (el primero sorteado en caso de empate). Con
    tournament_size == len(population) siempre gana el mejor.
    """
    best = None
    for idx in rng.sample(range(len(population)), tournament_size):
        candidate = population[idx]
        if best is None or (candidate.fitness or 0.0) > (best.fitness or 0.0):
            best = candidate
    return best


def uniform_crossover(p1: Individual, p2: Individual, rng: random.Random) -> Individual:
    """Cruce uniforme por gen: el timeslot viene de uno u otro padre, la asignación no cambia."""
    child_genes: List[Gene] = []
    for (assignment_id, t1), (_, t2) in zip(p1.genes, p2.genes):
        child_genes.append((assignment_id, t1 if rng.random() < 0.5 else t2))
    return Individual(genes=child_genes)


def mutate_reset(ind: Individual, catalog: Catalog, mutation_rate: float, rng: random.Random) -> Individual:
    """
    Mutación por reinicio: cada gen, con probabilidad mutation_rate, recibe
    un timeslot nuevo al azar. Devuelve el mismo individuo si nada cambió.
    """
    genes = list(ind.genes)
    touched = False
    for idx, (assignment_id, _) in enumerate(genes):
        if rng.random() < mutation_rate:
            genes[idx] = (assignment_id, random_timeslot(catalog, rng))
            touched = True
    if not touched:
        return ind
    return Individual(genes=genes)
