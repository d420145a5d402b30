"""Rule-based text analysis shared by the provider adapters.

Covers regex entity extraction, keyword categorization, suggested actions,
confidence scoring and the localized answer templates used when a model
cannot produce text of its own.
"""

import re
from typing import List, Optional

from govassist.schemas.ai import EntityPosition, ExtractedEntity, SuggestedAction
from govassist.schemas.enums import ActionType, EntityType, IntentType, Language, ProcedureCategory
from govassist.schemas.procedure import ProcedureRead
from govassist.utils.text import tokenize


class EntityExtractor:
    """Extracts contact details and money amounts from a message."""

    # (entity type, pattern, confidence)
    PATTERNS = [
        (EntityType.PHONE_NUMBER, re.compile(r"(?:\+94|0)[1-9][0-9]{8}"), 0.9),
        (EntityType.EMAIL, re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), 0.95),
        (
            EntityType.AMOUNT,
            re.compile(r"(?:LKR|Rs\.?)\s*\d+(?:,\d{3})*(?:\.\d{2})?", re.IGNORECASE),
            0.85,
        ),
    ]

    def extract(self, message: str) -> List[ExtractedEntity]:
        entities: List[ExtractedEntity] = []
        for entity_type, pattern, confidence in self.PATTERNS:
            for match in pattern.finditer(message):
                entities.append(
                    ExtractedEntity(
                        type=entity_type,
                        value=match.group(0),
                        confidence=confidence,
                        position=EntityPosition(start=match.start(), end=match.end()),
                    )
                )
        return entities


class RequestCategorizer:
    """Maps a message to a procedure category by keyword."""

    # Checked in order; the first category with a hit wins.
    CATEGORY_KEYWORDS = [
        (ProcedureCategory.IDENTITY_DOCUMENTS, ["nic", "national identity", "id card", "identity card"]),
        (ProcedureCategory.PASSPORTS, ["passport", "travel document", "visa"]),
        (ProcedureCategory.BIRTH_CERTIFICATES, ["birth certificate", "birth cert", "born"]),
        (ProcedureCategory.VEHICLE, ["vehicle", "car", "driving", "driving license", "driving licence"]),
        (ProcedureCategory.EDUCATION, ["degree", "certificate", "school", "university", "education"]),
        (ProcedureCategory.BUSINESS, ["business", "company", "registration", "license", "licence"]),
        (ProcedureCategory.PROPERTY, ["property", "land", "deed", "ownership"]),
    ]

    def __init__(self):
        self._compiled = [
            (category, [re.compile(rf"\b{re.escape(keyword)}\b") for keyword in keywords])
            for category, keywords in self.CATEGORY_KEYWORDS
        ]

    def categorize(self, message: str) -> ProcedureCategory:
        lowered = message.lower()
        for category, patterns in self._compiled:
            if any(pattern.search(lowered) for pattern in patterns):
                return category
        return ProcedureCategory.OTHER


def build_suggested_actions(
    intent: str,
    procedures: List[ProcedureRead],
    category: Optional[ProcedureCategory] = None,
) -> List[SuggestedAction]:
    """Follow-up actions for the client to offer after an answer."""
    actions: List[SuggestedAction] = []

    if procedures:
        actions.append(
            SuggestedAction(
                type=ActionType.PROCEDURE,
                label="View complete procedure",
                data={"procedure_id": str(procedures[0].id), "slug": procedures[0].slug},
            )
        )

    if intent == IntentType.OFFICE_LOCATION.value:
        data = {"search": True}
        if category is not None:
            data["category"] = category.value
        actions.append(SuggestedAction(type=ActionType.OFFICE, label="Find nearest office", data=data))

    if intent == IntentType.FEE_INQUIRY.value:
        actions.append(
            SuggestedAction(type=ActionType.SEARCH, label="Check all fees", data={"query": "fees charges"})
        )

    return actions


def overlap_confidence(message: str, procedures: List[ProcedureRead]) -> float:
    """Share of query tokens found in the top procedure's title and first step.

    Flat 0.3 without a procedure, otherwise never below 0.4.
    """
    if not procedures:
        return 0.3

    procedure = procedures[0]
    first_step = procedure.steps[0].instruction if procedure.steps else ""
    procedure_tokens = set(tokenize(f"{procedure.title} {first_step}"))
    tokens = tokenize(message)

    matches = [token for token in tokens if token in procedure_tokens]
    confidence = min(len(matches) / max(len(tokens), 1), 1.0)
    return max(confidence, 0.4)


GENERIC_HELP = {
    Language.EN: "I can help you with Sri Lankan government procedures. What do you need assistance with?",
    Language.SI: "මම ශ්‍රී ලංකාවේ රාජ්‍ය ක්‍රියාවලි සම්බන්ධයෙන් ඔබට උදව් කළ හැකියි. ඔබට කුමක් සඳහා සහාය අවශ්‍යද?",
    Language.TA: "இலங்கை அரசாங்க நடைமுறைகளில் நான் உங்களுக்கு உதவ முடியும். உங்களுக்கு என்ன உதவி தேவை?",
}

DEFAULT_FIRST_STEP = {
    Language.EN: "visit the relevant office",
    Language.SI: "අදාළ කාර්යාලයට යන්න",
    Language.TA: "சம்பந்தப்பட்ட அலுவலகத்திற்கு செல்ல",
}


def generic_help_message(language: Language) -> str:
    return GENERIC_HELP.get(language, GENERIC_HELP[Language.EN])


def first_step_answer(procedure: ProcedureRead, language: Language) -> str:
    """One-line answer naming the procedure and its first step."""
    title = procedure.localized_title(language)
    step = procedure.steps[0].localized(language) if procedure.steps else DEFAULT_FIRST_STEP[language]

    if language == Language.SI:
        return f"{title} සඳහා, ඔබට: {step} අවශ්‍යයි"
    if language == Language.TA:
        return f"{title} க்கு, நீங்கள்: {step} வேண்டும்"
    return f"For {title}, you need to: {step}"


def step_list_answer(procedure: ProcedureRead, language: Language, max_steps: int = 3) -> str:
    """Numbered answer with the first steps and the main fee."""
    lines = [f"To {procedure.title.lower()}:", ""]
    for index, step in enumerate(procedure.steps[:max_steps], start=1):
        lines.append(f"{index}. {step.localized(language)}")

    answer = "\n".join(lines)
    if procedure.fees:
        answer += f"\n\nFees: {procedure.fees[0].currency} {procedure.fees[0].amount}"
    return answer
