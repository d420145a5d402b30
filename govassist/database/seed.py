"""Sample offices and procedures for local development.

Run with ``python -m govassist.database.seed``. Seeding is skipped when the
catalog already holds procedures.
"""

import asyncio
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from govassist.core.config import settings
from govassist.core.database import DatabaseClient
from govassist.database.models import Fee, Office, Procedure, ProcedureOffice, ProcedureStep, Requirement
from govassist.repositories.procedure_repository import ProcedureRepository
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

WORKING_HOURS = "Monday to Friday: 8:30 AM - 4:15 PM"

OFFICES = {
    "rgd": {
        "name": "Registrar General's Department",
        "name_si": "ලේඛකාධිකාරී ජනරාල් දෙපාර්තමේන්තුව",
        "name_ta": "பதிவாளர் ஜெனரல் திணைக்களம்",
        "address": "No. 7, Independence Avenue, Colombo 07",
        "district": "Colombo",
        "province": "Western",
        "contact_numbers": ["+94112691185", "+94112688211"],
        "email": "info@rgd.gov.lk",
        "website": "http://www.rgd.gov.lk",
        "latitude": 6.9147,
        "longitude": 79.8774,
    },
    "immigration": {
        "name": "Department of Immigration and Emigration",
        "name_si": "ආගමන හා විගමන දෙපාර්තමේන්තුව",
        "name_ta": "குடியேற்ற மற்றும் குடியகற்றல் திணைக்களம்",
        "address": "No. 41, Ananda Rajakaruna Mawatha, Colombo 10",
        "district": "Colombo",
        "province": "Western",
        "contact_numbers": ["+94112329300", "+94112329400"],
        "email": "info@immigration.gov.lk",
        "website": "http://www.immigration.gov.lk",
        "latitude": 6.9355,
        "longitude": 79.851,
    },
    "pubad": {
        "name": "Ministry of Public Services, Provincial Councils and Local Government",
        "name_si": "රාජ්‍ය සේවා, පළාත් සභා සහ පළාත් පාලන අමාත්‍යංශය",
        "name_ta": "பொது சேவைகள், மாகாண சபைகள் மற்றும் உள்ளூர் அரசாங்க அமைச்சு",
        "address": "Independence Square, Colombo 07",
        "district": "Colombo",
        "province": "Western",
        "contact_numbers": ["+94112694031", "+94112694032"],
        "email": "info@pubad.gov.lk",
        "website": "http://www.pubad.gov.lk",
        "latitude": 6.9147,
        "longitude": 79.8774,
    },
    "kandy": {
        "name": "District Secretariat - Kandy",
        "name_si": "දිස්ත්‍රික් ලේකම් කාර්යාලය - මහනුවර",
        "name_ta": "மாவட்ட செயலகம் - கண்டி",
        "address": "District Secretariat, Kandy",
        "district": "Kandy",
        "province": "Central",
        "contact_numbers": ["+94812222771", "+94812222772"],
        "email": "info@kandy.dist.gov.lk",
        "website": "http://www.kandy.dist.gov.lk",
        "latitude": 7.2906,
        "longitude": 80.6337,
    },
    "roc": {
        "name": "Registrar of Companies",
        "name_si": "සමාගම් ලේඛකාධිකාරී",
        "name_ta": "நிறுவனங்களின் பதிவாளர்",
        "address": "No. 5, Baladaksha Mawatha, Colombo 03",
        "district": "Colombo",
        "province": "Western",
        "contact_numbers": ["+94112136873", "+94112136874"],
        "email": "info@roc.gov.lk",
        "website": "http://www.roc.gov.lk",
        "latitude": 6.927,
        "longitude": 79.8612,
    },
}

PROCEDURES = [
    {
        "title": "Apply for New National Identity Card",
        "title_si": "නව ජාතික හැඳුනුම්පත සඳහා අයදුම් කිරීම",
        "title_ta": "புதிய தேசிய அடையாள அட்டைக்கு விண்ணப்பிக்கவும்",
        "slug": "apply-new-national-identity-card",
        "description": "Complete guide to apply for a new National Identity Card for Sri Lankan citizens",
        "category": "IDENTITY_DOCUMENTS",
        "keywords": ["NIC", "national identity card", "ID card", "identity", "birth certificate"],
        "search_tags": ["nic", "ident", "card", "nation", "id"],
        "estimated_duration": "7-14 days",
        "difficulty": "EASY",
        "offices": [("rgd", True), ("kandy", False)],
        "steps": [
            {
                "instruction": "Visit the nearest Divisional Secretariat office with required documents",
                "instruction_si": "අවශ්‍ය ලියකියවිලි සමග ආසන්නතම ප්‍රාදේශීය ලේකම් කාර්යාලයට පිවිසෙන්න",
                "instruction_ta": "தேவையான ஆவணங்களுடன் அருகிலுள்ள பிரதேச செயலர் அலுவலகத்திற்கு செல்லவும்",
                "estimated_time": "30-45 minutes",
                "required_docs": ["Birth Certificate", "Proof of Address", "Parent NIC copies"],
                "tips": ["Visit early morning to avoid queues", "Bring photocopies of all documents"],
            },
            {
                "instruction": "Fill the application form (Form 1) completely and accurately",
                "instruction_si": "අයදුම්පත (ආකෘති පත්‍ර 1) සම්පූර්ණයෙන් සහ නිවැරදිව පුරවන්න",
                "instruction_ta": "விண்ணப்ப படிவத்தை (படிவம் 1) முழுமையாக மற்றும் துல்லியமாக நிரப்பவும்",
                "estimated_time": "15-20 minutes",
                "tips": ["Use black ink pen only", "Double-check all information"],
            },
            {
                "instruction": "Submit application with documents and pay the required fee",
                "instruction_si": "ලියකියවිලි සමග අයදුම්පත ඉදිරිපත් කර අවශ්‍ය ගාස්තුව ගෙවන්න",
                "instruction_ta": "ஆவணங்களுடன் விண்ணப்பத்தை சமர்ப்பித்து தேவையான கட்டணம் செலுத்தவும்",
                "estimated_time": "15 minutes",
                "tips": ["Get receipt for payment", "Note down reference number"],
            },
            {
                "instruction": "Collect your new NIC after the processing period",
                "instruction_si": "සැකසුම් කාලයෙන් පසු ඔබේ නව ජා.හැ.කා එකතු කරගන්න",
                "instruction_ta": "செயலாக்க காலத்திற்குப் பிறகு உங்கள் புதிய NIC ஐ சேகரிக்கவும்",
                "estimated_time": "10 minutes",
                "tips": ["Verify all details on new NIC"],
            },
        ],
        "requirements": [
            ("Original Birth Certificate", "මුල් උප්පැන්න සහතිකය", "அசல் பிறப்பு சான்றிதழ்",
             "Certified copy issued by Registrar General or authorized officer", True),
            ("Proof of Current Address", "වර්තමාන ලිපිනයේ සාක්ෂිය", "தற்போதைய முகவரி ஆதாரம்",
             "Utility bill, bank statement, or Grama Niladhari certificate within 3 months", True),
            ("Parent/Guardian NIC Copies", "මාපිය/භාරකරුගේ ජා.හැ.කා පිටපත්", "பெற்றோர்/பாதுகாவலர் NIC நகல்கள்",
             "Photocopies of both parents' NICs (if applicable)", False),
            ("Passport Size Photographs", "ගමන් බලපත්‍ර ප්‍රමාණයේ ඡායාරූප", "பாஸ்போர்ட் அளவு புகைப்படங்கள்",
             "2 recent passport-size color photographs", True),
        ],
        "fees": [("Application Processing Fee", "100", False)],
    },
    {
        "title": "Apply for Sri Lankan Passport",
        "title_si": "ශ්‍රී ලංකන් ගමන් බලපත්‍රය සඳහා අයදුම් කිරීම",
        "title_ta": "இலங்கை கடவுச்சீட்டிற்கு விண்ணப்பிக்கவும்",
        "slug": "apply-sri-lankan-passport",
        "description": "Complete guide to apply for a Sri Lankan passport for travel abroad",
        "category": "PASSPORTS",
        "keywords": ["passport", "travel document", "visa", "travel", "immigration"],
        "search_tags": ["passport", "travel", "document", "visa", "immigr"],
        "estimated_duration": "3-45 days",
        "difficulty": "MEDIUM",
        "offices": [("immigration", True)],
        "steps": [
            {
                "instruction": "Submit online application via epassport.gov.lk",
                "instruction_si": "epassport.gov.lk හරහා මාර්ගගත අයදුම්පත ඉදිරිපත් කිරීම",
                "instruction_ta": "epassport.gov.lk மூலம் ஆன்லைன் விண்ணப்பம் சமர்ப்பிக்கவும்",
                "estimated_time": "20-30 minutes",
                "tips": ["Have all documents scanned and ready"],
            },
            {
                "instruction": "Pay application fee online and print receipt",
                "instruction_si": "අයදුම් ගාස්තුව මාර්ගගතව ගෙවා රිසිට්පත මුද්‍රණය කරන්න",
                "instruction_ta": "ஆன்லைனில் விண்ணப்ப கட்டணம் செலுத்தி ரசீதை அச்சிடவும்",
                "estimated_time": "5-10 minutes",
                "tips": ["Keep payment receipt safe"],
            },
            {
                "instruction": "Visit passport office for biometric data collection",
                "instruction_si": "ජීවමිතික දත්ත එකතු කිරීම සඳහා ගමන් බලපත්‍ර කාර්යාලයට පිවිසෙන්න",
                "instruction_ta": "உயிரியல் தரவு சேகரிப்பிற்காக கடவுச்சீட்டு அலுவலகத்திற்கு செல்லவும்",
                "estimated_time": "45-60 minutes",
                "required_docs": ["All original documents", "Online application print", "Payment receipt"],
                "tips": ["Book appointment online", "Arrive 15 minutes early"],
            },
            {
                "instruction": "Collect passport after processing completion",
                "instruction_si": "සැකසුම් සම්පූර්ණ කිරීමෙන් පසු ගමන් බලපත්‍රය එකතු කරගන්න",
                "instruction_ta": "செயலாக்கம் முடிந்ததும் கடவுச்சீட்டை சேகரிக்கவும்",
                "estimated_time": "10-15 minutes",
                "tips": ["Sign passport immediately"],
            },
        ],
        "requirements": [
            ("National Identity Card", "ජාතික හැඳුනුම්පත", "தேசிய அடையாள அட்டை",
             "Valid Sri Lankan NIC (original and certified photocopy)", True),
            ("Birth Certificate", "උප්පැන්න සහතිකය", "பிறப்பு சான்றிதழ்",
             "Original birth certificate issued by Registrar General", True),
            ("Previous Passport", "පෙර ගමන් බලපත්‍රය", "முந்தைய கடவுச்சீட்டு",
             "If renewing existing passport", False),
        ],
        "fees": [
            ("Normal Processing (45 days)", "3500", False),
            ("Fast Track (7 days)", "7000", True),
            ("Express Service (3 days)", "10000", True),
        ],
    },
    {
        "title": "Business Registration Certificate",
        "title_si": "ව්‍යාපාර ලියාපදිංචි සහතිකය",
        "title_ta": "வணிக பதிவு சான்றிதழ்",
        "slug": "business-registration-certificate",
        "description": "Step-by-step guide to register a new business in Sri Lanka",
        "category": "BUSINESS",
        "keywords": ["business registration", "company", "enterprise", "license", "trade"],
        "search_tags": ["busi", "registr", "compani", "licens", "trade"],
        "estimated_duration": "3-7 days",
        "difficulty": "MEDIUM",
        "offices": [("roc", True)],
        "steps": [
            {
                "instruction": "Reserve business name through ROC online system",
                "instruction_si": "ROC මාර්ගගත පද්ධතිය හරහා ව්‍යාපාරික නාමය රක්ෂිත කරන්න",
                "instruction_ta": "ROC ஆன்லைன் அமைப்பு மூலம் வணிக பெயரை முன்பதிவு செய்யவும்",
                "estimated_time": "15-30 minutes",
                "tips": ["Have 3 alternative names ready"],
            },
            {
                "instruction": "Prepare and submit required documents",
                "instruction_si": "අවශ්‍ය ලියකියවිලි සකසා ඉදිරිපත් කරන්න",
                "instruction_ta": "தேவையான ஆவணங்களை தயாரித்து சமர்ப்பிக்கவும்",
                "estimated_time": "60-90 minutes",
                "required_docs": ["Application form", "NIC copies", "Address proof"],
            },
            {
                "instruction": "Visit ROC office for document submission and verification",
                "instruction_si": "ලියකියවිලි ඉදිරිපත් කිරීම සහ සත්‍යාපනය සඳහා ROC කාර්යාලයට පිවිසෙන්න",
                "instruction_ta": "ஆவண சமர்ப்பிப்பு மற்றும் சரிபார்ப்பிற்காக ROC அலுவலகத்திற்கு செல்லவும்",
                "estimated_time": "45-60 minutes",
                "tips": ["Bring all original documents"],
            },
        ],
        "requirements": [
            ("Completed Application Form", "සම්පුර්ණ අයදුම්පත", "நிரப்பப்பட்ட விண்ணப்ப படிவம்",
             "Form ROC 1 duly filled and signed", True),
            ("National Identity Card", "ජාතික හැඳුනුම්පත", "தேசிய அடையாள அட்டை",
             "NIC of proprietor/partners (certified copies)", True),
            ("Proof of Business Address", "ව්‍යාපාරික ලිපිනයේ සාක්ෂිය", "வணிக முகவரி ஆதாரம்",
             "Lease agreement or property ownership documents", True),
        ],
        "fees": [("Registration Fee", "2500", False), ("Name Reservation Fee", "500", False)],
    },
    {
        "title": "Obtain Birth Certificate",
        "title_si": "උප්පැන්න සහතිකය ලබා ගැනීම",
        "title_ta": "பிறப்பு சான்றிதழ் பெறுதல்",
        "slug": "obtain-birth-certificate",
        "description": "Guide to obtain a certified copy of birth certificate from Registrar General",
        "category": "BIRTH_CERTIFICATES",
        "keywords": ["birth certificate", "certified copy", "registrar general", "vital records"],
        "search_tags": ["birth", "certif", "copi", "registrar", "vital"],
        "estimated_duration": "3-7 days",
        "difficulty": "EASY",
        "offices": [("rgd", True), ("kandy", False)],
        "steps": [
            {
                "instruction": "Visit Registrar General Department or authorized office",
                "instruction_si": "ලේඛකාධිකාරී ජනරාල් දෙපාර්තමේන්තුව හෝ බලයලත් කාර්යාලයට පිවිසෙන්න",
                "instruction_ta": "பதிவாளர் ஜெனரல் திணைக்களம் அல்லது அங்கீகரிக்கப்பட்ட அலுவலகத்திற்கு செல்லவும்",
                "estimated_time": "30 minutes",
                "required_docs": ["Application form", "ID proof", "Relationship proof"],
            },
            {
                "instruction": "Fill application form with accurate details",
                "instruction_si": "නිවැරදි විස්තර සහිත අයදුම්පත පුරවන්න",
                "instruction_ta": "சரியான விவரங்களுடன் விண்ணப்ப படிவத்தை நிரப்பவும்",
                "estimated_time": "10-15 minutes",
            },
            {
                "instruction": "Submit application and collect receipt",
                "instruction_si": "අයදුම්පත ඉදිරිපත් කර රිසිට්පත එකතු කරගන්න",
                "instruction_ta": "விண்ணப்பத்தை சமர்ப்பித்து ரசீதை சேகரிக்கவும்",
                "estimated_time": "10 minutes",
                "tips": ["Keep receipt safely", "Note collection date"],
            },
        ],
        "requirements": [
            ("Application Form", "අයදුම්පත", "விண்ணப்ப படிவம்",
             "Completed application form for birth certificate", True),
            ("Applicant ID Proof", "අයදුම්කරුගේ හැඳුනුම්පත", "விண்ணப்பதாரர் அடையாள ஆதாரம்",
             "Valid NIC or passport of applicant", True),
        ],
        "fees": [("Certified Copy Fee", "50", False)],
    },
]


def build_procedure(data: dict, offices: dict) -> Procedure:
    """Build a procedure with its children from a seed entry."""
    procedure = Procedure(
        title=data["title"],
        title_si=data["title_si"],
        title_ta=data["title_ta"],
        slug=data["slug"],
        description=data["description"],
        category=data["category"],
        status="ACTIVE",
        keywords=data["keywords"],
        search_tags=data["search_tags"],
        estimated_duration=data["estimated_duration"],
        difficulty=data["difficulty"],
    )
    procedure.steps = [
        ProcedureStep(
            order=order,
            instruction=step["instruction"],
            instruction_si=step.get("instruction_si"),
            instruction_ta=step.get("instruction_ta"),
            estimated_time=step.get("estimated_time"),
            tips=step.get("tips", []),
            required_docs=step.get("required_docs", []),
        )
        for order, step in enumerate(data["steps"], start=1)
    ]
    procedure.requirements = [
        Requirement(
            name=name,
            name_si=name_si,
            name_ta=name_ta,
            description=description,
            is_required=is_required,
            order=order,
        )
        for order, (name, name_si, name_ta, description, is_required) in enumerate(data["requirements"], start=1)
    ]
    procedure.fees = [
        Fee(description=description, amount=Decimal(amount), currency="LKR", is_optional=is_optional)
        for description, amount, is_optional in data["fees"]
    ]
    procedure.office_links = [
        ProcedureOffice(office=offices[key], is_main=is_main) for key, is_main in data["offices"]
    ]
    return procedure


async def seed_database(session: AsyncSession) -> int:
    """Insert sample offices and procedures into an empty catalog.

    Returns:
        Number of procedures inserted
    """
    existing = await ProcedureRepository(session).count()
    if existing:
        LOGGER.info("Catalog already populated, skipping seed", extra={"procedures": existing})
        return 0

    offices = {
        key: Office(working_hours=WORKING_HOURS, **fields) for key, fields in OFFICES.items()
    }
    session.add_all(offices.values())
    session.add_all(build_procedure(data, offices) for data in PROCEDURES)
    await session.commit()

    LOGGER.info("Seeded catalog", extra={"offices": len(offices), "procedures": len(PROCEDURES)})
    return len(PROCEDURES)


async def main() -> None:
    db = DatabaseClient.from_settings(settings.db)
    try:
        await db.connect()
        await db.auto_migrate()
        async with db.session_maker() as session:
            await seed_database(session)
    finally:
        await db.disconnect()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
