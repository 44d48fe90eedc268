from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_RATE_TABLE_DIR = Path(__file__).resolve().parent / "data" / "rate_tables"


@dataclass(frozen=True)
class ContributionRates:
    employee: Dict[str, float]
    employer: Dict[str, float]

    @property
    def employee_rate(self) -> float:
        return sum(self.employee.values())

    @property
    def employer_rate(self) -> float:
        return sum(self.employer.values())


class RateTable:
    def __init__(self, version: str, gosi: dict, overtime: dict, attendance: dict, validation: dict):
        self.version = version
        self.gosi = gosi
        self.overtime = overtime
        self.attendance = attendance
        self.validation = validation

    @property
    def gosi_salary_cap(self) -> float:
        return float(self.gosi["salary_cap"])

    @property
    def saudi_nationalities(self) -> List[str]:
        return [alias.lower() for alias in self.gosi.get("saudi_nationalities", [])]

    def contribution_rates(self, is_saudi: bool) -> ContributionRates:
        group = self.gosi["saudi" if is_saudi else "non_saudi"]
        return ContributionRates(
            employee={k: float(v) for k, v in group.get("employee", {}).items()},
            employer={k: float(v) for k, v in group.get("employer", {}).items()},
        )

    def overtime_setting(self, key: str, default: Optional[float] = None) -> float:
        value = self.overtime.get(key, default)
        if value is None:
            raise KeyError(f"Overtime setting {key} not configured in rate table {self.version}")
        return float(value)

    def attendance_setting(self, key: str, default: Optional[float] = None) -> float:
        value = self.attendance.get(key, default)
        if value is None:
            raise KeyError(f"Attendance setting {key} not configured in rate table {self.version}")
        return float(value)

    def validation_threshold(self, key: str, default: float) -> float:
        return float(self.validation.get(key, default))


class RateTableRepository:
    def __init__(self, base_path: Path = DEFAULT_RATE_TABLE_DIR):
        self.base_path = base_path

    def available_versions(self) -> List[str]:
        return sorted([p.stem for p in self.base_path.glob("*.json")])

    def load(self, version: str) -> RateTable:
        file_path = self.base_path / f"{version}.json"
        if not file_path.exists():
            raise FileNotFoundError(f"Rate table version {version} not found at {file_path}")
        with file_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return RateTable(
            version=data["version"],
            gosi=data["gosi"],
            overtime=data.get("overtime", {}),
            attendance=data.get("attendance", {}),
            validation=data.get("validation", {}),
        )


def default_rate_table() -> RateTable:
    return RateTableRepository().load("2024_v1")
