# timetable_ga/errors.py


class TimetableError(Exception):
    """Base de todos los errores del planificador."""


class ConfigurationError(TimetableError, ValueError):
    """Parámetros del AG inválidos (se reporta al construir el solver)."""


class CatalogError(TimetableError, ValueError):
    """Catálogo mal formado: ids duplicados, huecos en los timeslots, columnas faltantes."""


class ChromosomeError(TimetableError, ValueError):
    """Cromosoma plano con longitud u orden de asignaciones inválido."""


class UnknownAssignmentError(TimetableError, KeyError):
    """El cromosoma referencia una asignación que no existe en el catálogo."""

    def __init__(self, assignment_id: int, position: int = -1):
        self.assignment_id = assignment_id
        self.position = position
        super().__init__(f"Asignación desconocida {assignment_id} en la posición {position}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownTimeslotError(TimetableError, KeyError):
    """El cromosoma referencia un timeslot que no existe en el catálogo."""

    def __init__(self, timeslot_id: int, position: int = -1):
        self.timeslot_id = timeslot_id
        self.position = position
        super().__init__(f"Timeslot desconocido {timeslot_id} en la posición {position}")

    def __str__(self) -> str:
        return self.args[0]
