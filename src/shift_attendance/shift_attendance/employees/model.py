from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as far as attendance cares.

    ``employee_type`` is the category that selects the shift catalog.
    """

    employee_id: int
    employee_name: str
    employee_type: str
    employee_code: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    organization_name: Optional[str] = None
