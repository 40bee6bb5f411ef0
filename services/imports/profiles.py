"""Профили источников импорта.

Каждый профиль описывает формат строки (для табличных выгрузок округа) и
значения по умолчанию, которыми заполняются поля, отсутствующие в файле.
"""

from __future__ import annotations

from dataclasses import dataclass, field

PLACEHOLDER_EMAIL = "noemail@example.com"

MATCH_BY_COMPANY = "company"
MATCH_BY_COUNTY = "county"

# значения колонки «Properties Management», которые не являются зданием
IGNORED_MANAGEMENT_NAMES = frozenset({"NOT IN  THE DRIVE", "NOT LISTED"})


@dataclass(frozen=True)
class CountyProfile:
    key: str
    county: str | None = None
    email_domain: str | None = None
    default_phone: str = "+1-555-0000"
    default_ssn: str = "XXX-XX-XXXX"
    default_date_of_birth: str = "1990-01-01"
    default_employment_status: str = "unemployed"
    default_address: str = ""
    landlord_phone: str = "+1-555-0000"
    landlord_email: str | None = None
    unit_status: str = "available"
    subsidy_status: str = "pending"
    grh_status: str = "pending"
    rent_is_max_housing_payment: bool = False
    notes_separator: str = "; "
    match_by: str = MATCH_BY_COMPANY
    match_case_number: bool = False
    columns: tuple[str, ...] = ()
    required_columns: tuple[str, ...] = ()
    header_tokens: tuple[str, ...] = ()
    ignored_management_names: frozenset[str] = field(
        default=IGNORED_MANAGEMENT_NAMES
    )

    def synthetic_email(self, first_name: str, last_name: str) -> str:
        """Адрес-заглушка для клиента без e-mail в источнике."""
        if not self.email_domain:
            return PLACEHOLDER_EMAIL
        return f"{first_name.lower()}.{last_name.lower()}@{self.email_domain}"

    def is_header(self, line: str) -> bool:
        return bool(self.header_tokens) and all(t in line for t in self.header_tokens)


GENERIC = CountyProfile(key="generic")

RAMSEY = CountyProfile(
    key="ramsey",
    county="Ramsey",
    email_domain="ramseycounty.gov",
    default_phone="(651) 000-0000",
    default_ssn="000-00-0000",
    default_employment_status="unknown",
    default_address="Address not provided",
    landlord_phone="(651) 000-0000",
    landlord_email="info@ramseycounty.gov",
    unit_status="occupied",
    subsidy_status="receiving",
    grh_status="approved",
    rent_is_max_housing_payment=True,
    match_by=MATCH_BY_COUNTY,
    columns=(
        "client_name",
        "properties",
        "rental_office_address",
        "rent_amount",
        "county_amount",
        "notes",
    ),
    required_columns=("client_name", "properties"),
    header_tokens=("Client", "Properties", "Rental Office"),
)

DAKOTA = CountyProfile(
    key="dakota",
    county="Dakota",
    email_domain="co.dakota.mn.us",
    default_phone="(651) 554-0000",
    default_ssn="000-00-0000",
    default_employment_status="unknown",
    default_address="Address not provided",
    landlord_phone="(651) 554-0000",
    landlord_email="info@co.dakota.mn.us",
    unit_status="occupied",
    subsidy_status="receiving",
    grh_status="approved",
    rent_is_max_housing_payment=True,
    match_by=MATCH_BY_COUNTY,
    match_case_number=True,
    columns=(
        "case_number",
        "client_name",
        "properties",
        "rental_office_address",
        "rent_amount",
        "county_amount",
        "notes",
    ),
    required_columns=("client_name", "properties"),
    header_tokens=("Case Number", "Client", "Properties Management"),
)

PROFILES: dict[str, CountyProfile] = {p.key: p for p in (GENERIC, RAMSEY, DAKOTA)}


def get_profile(key: str) -> CountyProfile:
    """Вернуть профиль по ключу (без учёта регистра)."""
    try:
        return PROFILES[(key or "").strip().lower()]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Неизвестный профиль импорта '{key}', доступны: {known}") from None
