# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class CompanyInfo(BaseModel):
    """Company metadata from the Company Service."""

    id: uuid.UUID
    name: str


@runtime_checkable
class CompanyService(Protocol):
    """Interface for the Company Service.

    The rollover worker walks every company, so listing is part of the contract.
    """

    async def get_company(self, company_id: uuid.UUID) -> CompanyInfo | None:
        """Fetch company metadata. Returns None if not found."""
        ...

    async def list_companies(self) -> list[CompanyInfo]:
        """List every company served by this deployment."""
        ...


class InMemoryCompanyService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._companies: dict[uuid.UUID, CompanyInfo] = {}

    def seed(self, company: CompanyInfo) -> None:
        """Seed a company for testing."""
        self._companies[company.id] = company

    async def get_company(self, company_id: uuid.UUID) -> CompanyInfo | None:
        return self._companies.get(company_id)

    async def list_companies(self) -> list[CompanyInfo]:
        return sorted(self._companies.values(), key=lambda c: c.name)


_company_service: CompanyService = InMemoryCompanyService()


def get_company_service() -> CompanyService:
    """Return the active Company Service."""
    return _company_service


def set_company_service(service: CompanyService) -> None:
    """Override the service (for testing or production wiring)."""
    global _company_service
    _company_service = service
