import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cleanbook.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Frontend origins allowed by CORS (comma separated)
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
).split(",")

# Business hours for the booking calendar (24h clock, end exclusive)
BUSINESS_START_HOUR = int(os.getenv("BUSINESS_START_HOUR", "9"))
BUSINESS_END_HOUR = int(os.getenv("BUSINESS_END_HOUR", "18"))
SLOT_MINUTES = int(os.getenv("SLOT_MINUTES", "60"))

# Pricing
PRICING_BASE_AREA = float(os.getenv("PRICING_BASE_AREA", "50"))  # square meters covered by base price
QUOTE_COMPLEXITY_THRESHOLD = int(os.getenv("QUOTE_COMPLEXITY_THRESHOLD", "100"))  # characters
QUOTE_COMPLEXITY_SURCHARGE = float(os.getenv("QUOTE_COMPLEXITY_SURCHARGE", "0.20"))

# Florida sales tax: 6% state + 1% discretionary surtax (varies by county)
STATE_TAX_RATE = float(os.getenv("STATE_TAX_RATE", "0.06"))
DISCRETIONARY_TAX_RATE = float(os.getenv("DISCRETIONARY_TAX_RATE", "0.01"))

# Invoicing
DEFAULT_DUE_DAYS = int(os.getenv("DEFAULT_DUE_DAYS", "30"))  # Net 30
INVOICE_NUMBER_PREFIX = os.getenv("INVOICE_NUMBER_PREFIX", "PP")
INVOICE_NUMBER_MAX_ATTEMPTS = int(os.getenv("INVOICE_NUMBER_MAX_ATTEMPTS", "5"))
BUSINESS_TAX_ID = os.getenv("BUSINESS_TAX_ID", "FL-59-123456789")
DEFAULT_BILLING_COUNTRY = os.getenv("DEFAULT_BILLING_COUNTRY", "United States")
DEFAULT_SERVICE_STATE = os.getenv("DEFAULT_SERVICE_STATE", "FL")
INVOICE_TERMS = os.getenv(
    "INVOICE_TERMS",
    "Payment Terms: Net 30 days\n"
    "Late Payment: 1.5% per month on past due amounts\n"
    "Florida Sales Tax included where applicable\n"
    "\n"
    "Premier Prime Cleaning Services\n"
    "Licensed & Insured in Florida\n"
    "Thank you for your business!",
)
