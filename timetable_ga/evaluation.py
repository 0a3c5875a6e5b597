# timetable_ga/evaluation.py
from collections import defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from .config import GAConfig
from .encoding import decode
from .model import Catalog, DecodedClass, Individual


@dataclass
class EvaluationResult:
    clashes: int
    teacher: int            # regla 1: docente en dos clases a la vez
    teacher_class: int      # regla 2: mismo docente, mismo grupo, misma hora
    class_group: int        # regla 3: grupo con dos clases a la vez
    first_period: int       # regla 4: materia no permitida en la primera hora
    daily_repeat: int       # regla 5: materia repetida en el día
    violations: List[str] = field(default_factory=list)

    @property
    def fitness(self) -> float:
        return fitness_from_clashes(self.clashes)

    def as_dict(self) -> Dict[str, int]:
        return {
            "docente": self.teacher,
            "docente_grupo": self.teacher_class,
            "grupo": self.class_group,
            "primera_hora": self.first_period,
            "repeticion_diaria": self.daily_repeat,
            "choques": self.clashes,
        }


def fitness_from_clashes(clashes: int) -> float:
    return 1.0 / (1.0 + clashes)


def _pairs(mask: np.ndarray) -> List[Tuple[int, int]]:
    # Pares no ordenados (i < j) para el reporte; el conteo usa pares ordenados
    return [(int(i), int(j)) for i, j in np.argwhere(np.triu(mask, k=1))]


def count_clashes(
    decoded: Sequence[DecodedClass],
    catalog: Catalog,
    cfg: Optional[GAConfig] = None,
) -> EvaluationResult:
    """
    Cuenta las violaciones de las cinco reglas duras.

    Las reglas 1-3 se evalúan sobre todos los pares ordenados (i, j) con
    i != j, por lo que un par en conflicto suma 2 por regla. La regla 2 es
    un subconjunto de la 1 y se suma encima de ella.
    """
    cfg = cfg or GAConfig()
    violations: List[str] = []
    assignments = [catalog.assignment(c.assignment_id) for c in decoded]

    n = len(decoded)
    teacher = np.array([a.teacher_id for a in assignments], dtype=int)
    group = np.array([c.class_group_id for c in decoded], dtype=int)
    slot = np.array([c.timeslot_id for c in decoded], dtype=int)

    # Matrices [i][j]
    off_diag = ~np.eye(n, dtype=bool)
    same_slot = (slot[:, None] == slot[None, :]) & off_diag
    same_teacher = teacher[:, None] == teacher[None, :]
    same_group = group[:, None] == group[None, :]

    teacher_busy = same_teacher & same_slot
    teacher_group_busy = teacher_busy & same_group
    group_busy = same_group & same_slot

    teacher_clashes = int(teacher_busy.sum())
    teacher_class_clashes = int(teacher_group_busy.sum()) * cfg.teacher_class_clash_weight
    class_clashes = int(group_busy.sum())

    for i, j in _pairs(teacher_busy):
        a = assignments[i]
        violations.append(
            f"Docente {a.teacher_id} ({a.teacher_name}) con dos clases en el timeslot {decoded[i].timeslot_id}"
            f" (posiciones {i} y {j})"
        )
    for i, j in _pairs(group_busy):
        violations.append(
            f"Grupo {decoded[i].class_group_id} con dos clases en el timeslot {decoded[i].timeslot_id}"
            f" (posiciones {i} y {j})"
        )

    # Regla 4: primera hora de cada día
    allowed = set(cfg.first_period_subjects)
    first_period = 0
    if allowed:
        for c, a in zip(decoded, assignments):
            if catalog.timeslot(c.timeslot_id).opens_day and a.subject not in allowed:
                first_period += 1
                violations.append(
                    f"{a.subject} no permitido en la primera hora (grupo {c.class_group_id},"
                    f" timeslot {c.timeslot_id})"
                )

    # Regla 5: cada materia una sola vez por día y grupo
    seen: DefaultDict[Tuple[int, int], Set[str]] = defaultdict(set)
    daily_repeat = 0
    for c, a in zip(decoded, assignments):
        key = (catalog.timeslot(c.timeslot_id).day, c.class_group_id)
        if a.subject in seen[key]:
            daily_repeat += 1
            violations.append(f"{a.subject} repetido el día {key[0]} para el grupo {key[1]}")
        seen[key].add(a.subject)

    total = teacher_clashes + teacher_class_clashes + class_clashes + first_period + daily_repeat
    return EvaluationResult(
        clashes=total,
        teacher=teacher_clashes,
        teacher_class=teacher_class_clashes,
        class_group=class_clashes,
        first_period=first_period,
        daily_repeat=daily_repeat,
        violations=violations,
    )


def evaluate(ind: Individual, catalog: Catalog, cfg: Optional[GAConfig] = None) -> EvaluationResult:
    res = count_clashes(decode(ind.genes, catalog), catalog, cfg)
    ind.clashes = res.clashes
    ind.fitness = res.fitness
    return res
