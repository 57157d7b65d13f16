# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    company_id: uuid.UUID
    user_id: uuid.UUID
    role: str = "employee"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def can_act_for(self, employee_id: uuid.UUID) -> bool:
        """Employees may only touch their own data; admins may touch anyone's."""
        return self.is_admin or self.user_id == employee_id
