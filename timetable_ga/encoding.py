"""
Codifica y decodifica el cromosoma.

Un cromosoma es una lista de genes ``(assignment_id, timeslot_id)``, uno por
asignación del catálogo y en el mismo orden. La forma plana
``[a0, t0, a1, t1, ...]`` se usa para exportar e importar soluciones.
"""
from typing import List, Sequence

from .errors import ChromosomeError, UnknownAssignmentError, UnknownTimeslotError
from .model import Catalog, DecodedClass, Gene


def decode(genes: Sequence[Gene], catalog: Catalog) -> List[DecodedClass]:
    """Convierte los genes en clases programadas. Cada llamada crea su propia lista."""
    classes: List[DecodedClass] = []
    for idx, (assignment_id, timeslot_id) in enumerate(genes):
        try:
            assignment = catalog.assignment(assignment_id)
        except UnknownAssignmentError:
            raise UnknownAssignmentError(assignment_id, idx) from None
        if not catalog.has_timeslot(timeslot_id):
            raise UnknownTimeslotError(timeslot_id, idx)
        classes.append(
            DecodedClass(
                slot_index=idx,
                class_group_id=assignment.class_group_id,
                assignment_id=assignment_id,
                timeslot_id=timeslot_id,
            )
        )
    return classes


def to_flat(genes: Sequence[Gene]) -> List[int]:
    flat: List[int] = []
    for assignment_id, timeslot_id in genes:
        flat.append(assignment_id)
        flat.append(timeslot_id)
    return flat


def from_flat(values: Sequence[int], catalog: Catalog) -> List[Gene]:
    if len(values) % 2 != 0:
        raise ChromosomeError(f"El cromosoma plano debe tener longitud par (recibido {len(values)})")
    genes = [(int(values[i]), int(values[i + 1])) for i in range(0, len(values), 2)]
    expected = catalog.assignment_ids
    if [a for a, _ in genes] != expected:
        raise ChromosomeError("El eje de asignaciones no coincide con el orden del catálogo")
    return genes


def chromosome_to_string(genes: Sequence[Gene]) -> str:
    return " ".join(f"{a}:{t}" for a, t in genes)
