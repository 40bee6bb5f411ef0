from datetime import datetime
from enum import Enum
from peewee import (
    Model,
    BooleanField,
    CharField,
    DateTimeField,
    DecimalField,
    ForeignKeyField,
    IntegerField,
    TextField,
)

from database.db import db


class BaseModel(Model):
    class Meta:
        database = db


class TimestampedModel(BaseModel):
    """Base with created_at/updated_at, updated_at refreshed on save."""

    created_at = DateTimeField(default=datetime.utcnow)
    updated_at = DateTimeField(default=datetime.utcnow)

    def save(self, *args, **kwargs):
        self.updated_at = datetime.utcnow()
        return super().save(*args, **kwargs)


class SoftDeleteModel(TimestampedModel):
    """Base with soft-delete support via is_deleted flag."""

    is_deleted = BooleanField(default=False)

    def soft_delete(self) -> None:
        """Mark instance as deleted without physical removal."""
        self.is_deleted = True
        self.save()

    @classmethod
    def active(cls):
        return cls.select().where(cls.is_deleted == False)


class Company(TimestampedModel):
    name = CharField()
    display_name = CharField(null=True)
    email = CharField(null=True)
    phone = CharField(null=True)
    status = CharField(default="active")

    def __str__(self) -> str:
        return self.display_name or self.name


class Building(TimestampedModel):
    company = ForeignKeyField(Company, backref="buildings")
    name = CharField(null=True, index=True)
    address = CharField(default="")
    landlord_name = CharField()
    landlord_phone = CharField()
    landlord_email = CharField()
    total_units = IntegerField(default=1)
    building_type = CharField(default="single_unit")
    property_manager = CharField(null=True)
    status = CharField(default="active")
    notes = TextField(null=True)

    def __str__(self) -> str:
        return f"{self.name or ''} — {self.address}"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class Property(TimestampedModel):
    company = ForeignKeyField(Company, backref="properties")
    building = ForeignKeyField(Building, backref="properties")
    name = CharField(index=True)
    unit_number = CharField(null=True)
    rent_amount = DecimalField(max_digits=10, decimal_places=2, auto_round=True)
    deposit_amount = DecimalField(max_digits=10, decimal_places=2, auto_round=True)
    bedrooms = IntegerField()
    bathrooms = IntegerField()
    square_footage = IntegerField(null=True)
    status = CharField(default=PropertyStatus.AVAILABLE.value)
    notes = TextField(null=True)

    def __str__(self) -> str:
        return f"{self.name} #{self.unit_number or ''}"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Client(SoftDeleteModel):
    company = ForeignKeyField(Company, backref="clients")
    case_number = CharField(null=True, index=True)
    first_name = CharField()
    last_name = CharField()
    email = CharField()
    phone = CharField()
    date_of_birth = CharField()
    ssn = CharField()
    current_address = TextField()
    employment_status = CharField()
    monthly_income = DecimalField(max_digits=10, decimal_places=2, auto_round=True)
    county = CharField(null=True, index=True)
    # слабые ссылки по id, без каскадов
    property_id = IntegerField(null=True)
    building_id = IntegerField(null=True)
    county_amount = DecimalField(max_digits=10, decimal_places=2, auto_round=True, null=True)
    notes = TextField(null=True)
    status = CharField(default=ClientStatus.ACTIVE.value)
    is_active = BooleanField(default=True)
    subsidy_status = CharField(default="pending")
    grh_status = CharField(default="pending")
    max_housing_payment = DecimalField(
        max_digits=10, decimal_places=2, auto_round=True, default="1220.00"
    )
    client_obligation_percent = DecimalField(
        max_digits=5, decimal_places=2, auto_round=True, default="30.00"
    )
    current_balance = DecimalField(
        max_digits=10, decimal_places=2, auto_round=True, default="0.00"
    )
    credit_limit = DecimalField(
        max_digits=10, decimal_places=2, auto_round=True, default="-100.00"
    )

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def __str__(self) -> str:
        return self.full_name


class PoolFundEntryType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    ALLOCATION = "allocation"


class PoolFundEntry(BaseModel):
    amount = DecimalField(max_digits=10, decimal_places=2, auto_round=True)
    entry_type = CharField()
    description = TextField()
    client = ForeignKeyField(Client, null=True, backref="pool_fund_entries")
    county = CharField(index=True)
    month = CharField(null=True)
    created_at = DateTimeField(default=datetime.utcnow)
