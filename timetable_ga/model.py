# timetable_ga/model.py
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import CatalogError, UnknownAssignmentError, UnknownTimeslotError

AssignmentId = int
TimeslotId = int
Gene = Tuple[AssignmentId, TimeslotId]


@dataclass(frozen=True)
class TeachingAssignment:
    assignment_id: int
    teacher_id: int         # se repite si el docente dicta varias asignaciones
    teacher_name: str
    class_group_id: int
    subject: str


@dataclass(frozen=True)
class Timeslot:
    timeslot_id: int
    label: str
    day: int
    period: int             # 0 = primera hora del día

    @property
    def opens_day(self) -> bool:
        return self.period == 0


@dataclass(frozen=True)
class Catalog:
    """
    Datos de referencia de una corrida: asignaciones y timeslots.

    La posición i de todo cromosoma corresponde a ``assignments[i]``; el
    orden de la tupla es el orden de los genes.
    """
    assignments: Tuple[TeachingAssignment, ...]
    timeslots: Tuple[Timeslot, ...]
    periods_per_day: int = 6
    _by_assignment: Dict[int, TeachingAssignment] = field(init=False, repr=False, compare=False)
    _by_timeslot: Dict[int, Timeslot] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_by_assignment", {a.assignment_id: a for a in self.assignments})
        object.__setattr__(self, "_by_timeslot", {t.timeslot_id: t for t in self.timeslots})

    @property
    def num_assignments(self) -> int:
        return len(self.assignments)

    @property
    def num_timeslots(self) -> int:
        return len(self.timeslots)

    @property
    def assignment_ids(self) -> List[int]:
        return [a.assignment_id for a in self.assignments]

    @property
    def timeslot_ids(self) -> List[int]:
        return [t.timeslot_id for t in self.timeslots]

    @property
    def class_group_ids(self) -> List[int]:
        return sorted({a.class_group_id for a in self.assignments})

    @property
    def num_days(self) -> int:
        return len({t.day for t in self.timeslots})

    def assignment(self, assignment_id: int) -> TeachingAssignment:
        try:
            return self._by_assignment[assignment_id]
        except KeyError:
            raise UnknownAssignmentError(assignment_id) from None

    def timeslot(self, timeslot_id: int) -> Timeslot:
        try:
            return self._by_timeslot[timeslot_id]
        except KeyError:
            raise UnknownTimeslotError(timeslot_id) from None

    def has_timeslot(self, timeslot_id: int) -> bool:
        return timeslot_id in self._by_timeslot


class CatalogBuilder:
    """Arma un Catalog con llamadas add_timeslot / add_assignment."""

    def __init__(self, periods_per_day: int = 6):
        if periods_per_day < 1:
            raise CatalogError("periods_per_day debe ser >= 1")
        self.periods_per_day = periods_per_day
        self._assignments: Dict[int, TeachingAssignment] = {}
        self._timeslots: Dict[int, Timeslot] = {}

    def add_timeslot(
        self,
        timeslot_id: int,
        label: str,
        day: Optional[int] = None,
        period: Optional[int] = None,
    ) -> "CatalogBuilder":
        timeslot_id = int(timeslot_id)
        if timeslot_id in self._timeslots:
            raise CatalogError(f"Timeslot duplicado: {timeslot_id}")
        if day is None:
            day = timeslot_id // self.periods_per_day
        if period is None:
            period = timeslot_id % self.periods_per_day
        self._timeslots[timeslot_id] = Timeslot(timeslot_id, str(label), int(day), int(period))
        return self

    def add_assignment(
        self,
        assignment_id: int,
        teacher_id: int,
        teacher_name: str,
        class_group_id: int,
        subject: str,
    ) -> "CatalogBuilder":
        assignment_id = int(assignment_id)
        if assignment_id in self._assignments:
            raise CatalogError(f"Asignación duplicada: {assignment_id}")
        self._assignments[assignment_id] = TeachingAssignment(
            assignment_id=assignment_id,
            teacher_id=int(teacher_id),
            teacher_name=str(teacher_name),
            class_group_id=int(class_group_id),
            subject=str(subject),
        )
        return self

    def build(self) -> Catalog:
        if not self._assignments:
            raise CatalogError("El catálogo no tiene asignaciones")
        if not self._timeslots:
            raise CatalogError("El catálogo no tiene timeslots")
        ids = sorted(self._timeslots)
        if ids != list(range(len(ids))):
            raise CatalogError(f"Los timeslots deben ser densos 0..{len(ids) - 1}: {ids}")
        return Catalog(
            assignments=tuple(self._assignments.values()),
            timeslots=tuple(self._timeslots[i] for i in ids),
            periods_per_day=self.periods_per_day,
        )


@dataclass
class Individual:
    genes: List[Gene]
    fitness: Optional[float] = None     # None = sin evaluar
    clashes: Optional[int] = None

    def timeslot_ids(self) -> List[int]:
        return [t for _, t in self.genes]

    def assignment_ids(self) -> List[int]:
        return [a for a, _ in self.genes]

    def copy(self) -> "Individual":
        return Individual(genes=list(self.genes), fitness=self.fitness, clashes=self.clashes)


def _rank_key(ind: Individual) -> float:
    return ind.fitness if ind.fitness is not None else -1.0


class Population:
    def __init__(self, individuals: Optional[List[Individual]] = None):
        self.individuals: List[Individual] = list(individuals or [])

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, idx: int) -> Individual:
        return self.individuals[idx]

    def append(self, ind: Individual) -> None:
        self.individuals.append(ind)

    def sorted_by_fitness(self) -> List[Individual]:
        # Orden estable: a igual fitness se conserva el orden de llegada
        return sorted(self.individuals, key=_rank_key, reverse=True)

    def fittest(self, offset: int = 0) -> Individual:
        return self.sorted_by_fitness()[offset]

    def average_fitness(self) -> float:
        scored = [ind.fitness for ind in self.individuals if ind.fitness is not None]
        if not scored:
            return 0.0
        return sum(scored) / len(scored)


@dataclass(frozen=True)
class DecodedClass:
    slot_index: int
    class_group_id: int
    assignment_id: int
    timeslot_id: int
