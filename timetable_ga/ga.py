import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import GAConfig
from .evaluation import evaluate
from .initial_population import build_initial_population
from .model import Catalog, Individual, Population
from .operators import mutate_reset, tournament_select, uniform_crossover


@dataclass
class SearchResult:
    best: Individual
    generations: int
    history: List[Dict] = field(default_factory=list)
    elapsed: float = 0.0
    stop_reason: str = ""

    @property
    def solved(self) -> bool:
        return self.best.clashes == 0


class GeneticSolver:
    def __init__(self, catalog: Catalog, cfg: GAConfig, rng: Optional[random.Random] = None, verbose: bool = True):
        self.catalog = catalog
        self.cfg = cfg.validate()
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.verbose = verbose
        self.history: List[Dict] = []

    def init_population(self) -> Population:
        return build_initial_population(self.catalog, self.cfg.population_size, self.rng)

    def eval_population(self, population: Population) -> None:
        # Los individuos con fitness en caché (élite, copias) no se reevalúan
        pending = [ind for ind in population if ind.fitness is None]
        if self.cfg.n_workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.cfg.n_workers) as executor:
                tasks = [executor.submit(evaluate, ind, self.catalog, self.cfg) for ind in pending]
                for task in tasks:
                    task.result()
        else:
            for ind in pending:
                evaluate(ind, self.catalog, self.cfg)

    def generation_limit_reached(self, generation: int, max_generations: Optional[int] = None) -> bool:
        cap = self.cfg.max_generations if max_generations is None else max_generations
        return generation >= cap

    def solution_found(self, population: Population) -> bool:
        return population.fittest().fitness == 1.0

    def is_termination_condition_met(self, generation: int, population: Population) -> bool:
        return self.generation_limit_reached(generation) or self.solution_found(population)

    def select_parent(self, population: Population) -> Individual:
        return tournament_select(population, self.cfg.tournament_size, self.rng)

    def crossover_population(self, population: Population) -> Population:
        ranked = population.sorted_by_fitness()
        # Elitismo: los mejores pasan intactos, con su fitness
        new_pop = Population(ranked[: self.cfg.elitism_count])

        while len(new_pop) < self.cfg.population_size:
            p1 = self.select_parent(population)
            p2 = self.select_parent(population)
            if self.rng.random() < self.cfg.crossover_rate:
                new_pop.append(uniform_crossover(p1, p2, self.rng))
            else:
                new_pop.append(p1.copy())
        return new_pop

    def mutate_population(self, population: Population) -> Population:
        ranked = population.sorted_by_fitness()
        new_pop = Population()
        for idx, ind in enumerate(ranked):
            if idx < self.cfg.elitism_count:
                new_pop.append(ind)
                continue
            new_pop.append(mutate_reset(ind, self.catalog, self.cfg.mutation_rate, self.rng))
        return new_pop

    def _record(self, generation: int, population: Population) -> Dict:
        best = population.fittest()
        row = {
            "gen": generation,
            "best_fitness": best.fitness,
            "best_clashes": best.clashes,
            "avg_fitness": population.average_fitness(),
        }
        self.history.append(row)
        return row

    def evolve(self, population: Optional[Population] = None) -> SearchResult:
        start = time.perf_counter()
        self.history = []
        if population is None:
            population = self.init_population()
        self.eval_population(population)

        best_clashes = population.fittest().clashes
        stagnation = 0
        generation = 0
        stop_reason = "max_generations"

        while True:
            row = self._record(generation, population)
            if self.verbose and self.cfg.log_every and generation % self.cfg.log_every == 0:
                print(f"G{generation} Mejor fitness: {row['best_fitness']:.5f} Choques: {row['best_clashes']}")

            if self.solution_found(population):
                stop_reason = "solved"
                break
            if self.generation_limit_reached(generation):
                stop_reason = "max_generations"
                break
            if self.cfg.max_stagnation and stagnation >= self.cfg.max_stagnation:
                stop_reason = "stagnation"
                break
            if self.cfg.time_limit_sec is not None and time.perf_counter() - start >= self.cfg.time_limit_sec:
                stop_reason = "time_limit"
                break

            population = self.crossover_population(population)
            population = self.mutate_population(population)
            self.eval_population(population)
            generation += 1

            current = population.fittest().clashes
            if current < best_clashes:
                best_clashes = current
                stagnation = 0
            else:
                stagnation += 1

        return SearchResult(
            best=population.fittest(),
            generations=generation,
            history=list(self.history),
            elapsed=time.perf_counter() - start,
            stop_reason=stop_reason,
        )
