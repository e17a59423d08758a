"""Department initials used in course codes ("CE 151" -> Computer Science And Engineering)."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

# Grouped by faculty, as listed in the university calendar.
DEFAULT_DEPARTMENTS: tuple[tuple[str, str], ...] = (
    # Faculty of Mining and Minerals
    ("MN", "Mining Engineering"),
    ("MR", "Minerals Engineering"),
    # Faculty of Engineering
    ("MC", "Mechanical Engineering"),
    ("EL", "Electrical and Electronic Engineering"),
    ("RN", "Renewable Energy Engineering"),
    ("TC", "Telecommunication Engineering"),
    ("PM", "Plant and Maintenance Engineering"),
    # Faculty of Computing and Mathematical Sciences
    ("CY", "Cyber Security"),
    ("CE", "Computer Science And Engineering"),
    ("IS", "Information Systems and Technology"),
    ("MA", "Mathematics"),
    ("SD", "Statistical Data Science"),
    # Faculty of Integrated Management Studies
    ("LT", "Logistics and Transport Management"),
    ("EC", "Economics and Industrial Organisation"),
    # Faculty of Geosciences and Environmental Studies
    ("GM", "Geomatic Engineering"),
    ("GL", "Geological Engineering"),
    ("SP", "Spatial Planning"),
    ("ES", "Environmental and Safety Engineering"),
    ("LA", "Land Administration and Information Systems"),
    # School of Petroleum Studies
    ("PE", "Petroleum Engineering"),
    ("NG", "Natural Gas Engineering"),
    ("PG", "Petroleum Geosciences and Engineering"),
    ("RP", "Petroleum Refining and Petrochemical Engineering"),
    ("CH", "Chemical Engineering"),
)


class DepartmentTable(Mapping[str, str]):
    """Read-only mapping from 2-letter initials to department names.

    Lookups are best-effort: :meth:`lookup` returns unknown initials
    unchanged instead of failing.
    """

    def __init__(self, departments: Mapping[str, str] | None = None) -> None:
        self._departments = MappingProxyType(dict(departments or {}))

    @classmethod
    def default(cls) -> "DepartmentTable":
        return cls(dict(DEFAULT_DEPARTMENTS))

    def lookup(self, initial: str) -> str:
        return self._departments.get(initial, initial)

    def __getitem__(self, initial: str) -> str:
        return self._departments[initial]

    def __iter__(self) -> Iterator[str]:
        return iter(self._departments)

    def __len__(self) -> int:
        return len(self._departments)

    def __repr__(self) -> str:
        return f"DepartmentTable({len(self)} departments)"
