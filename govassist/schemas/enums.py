"""Closed vocabularies shared by both services."""

from enum import Enum


class ProcedureCategory(str, Enum):
    IDENTITY_DOCUMENTS = "IDENTITY_DOCUMENTS"
    BIRTH_CERTIFICATES = "BIRTH_CERTIFICATES"
    PASSPORTS = "PASSPORTS"
    EDUCATION = "EDUCATION"
    BUSINESS = "BUSINESS"
    PROPERTY = "PROPERTY"
    VEHICLE = "VEHICLE"
    HEALTH = "HEALTH"
    SOCIAL_SERVICES = "SOCIAL_SERVICES"
    OTHER = "OTHER"


class ProcedureStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"
    DRAFT = "DRAFT"
    UNDER_REVIEW = "UNDER_REVIEW"


class ProcedureDifficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class Language(str, Enum):
    EN = "EN"
    SI = "SI"
    TA = "TA"


class IntentType(str, Enum):
    PROCEDURE_INQUIRY = "procedure_inquiry"
    DOCUMENT_REQUIREMENT = "document_requirement"
    FEE_INQUIRY = "fee_inquiry"
    OFFICE_LOCATION = "office_location"
    STATUS_CHECK = "status_check"
    GENERAL_HELP = "general_help"
    GREETING = "greeting"
    UNCLEAR = "unclear"


class EntityType(str, Enum):
    DOCUMENT_TYPE = "document_type"
    LOCATION = "location"
    DATE = "date"
    PERSON_NAME = "person_name"
    PHONE_NUMBER = "phone_number"
    EMAIL = "email"
    AMOUNT = "amount"


class ActionType(str, Enum):
    SEARCH = "search"
    PROCEDURE = "procedure"
    OFFICE = "office"
    REQUIREMENT = "requirement"
    FAQ = "faq"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
