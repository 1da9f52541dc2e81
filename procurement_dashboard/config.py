"""API Configuration Module"""

import os
from typing import List

from dotenv import load_dotenv

from .models.entities import Company

load_dotenv()

# Shared production spreadsheet; tenants may override it per company.
DEFAULT_SPREADSHEET_ID = os.getenv(
    "SPREADSHEET_ID", "1tAdkO29iGKe0g3xy0TbhNS_mkR3L4VQKHbj6A1Fgi_c"
)


class Settings:
    """API Settings and Configuration"""

    # API Settings
    API_TITLE = "Procurement Dashboard API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = """
    Inventory, supplier and customer master data backed by Google Sheets,
    MRP shortage planning and AI-assisted procurement analysis.
    """
    SERVICE_NAME = "procurement-dashboard-api"
    API_KEY = os.getenv("API_KEY")

    # Google Sheets
    SHEETS_API_BASE_URL = os.getenv("SHEETS_API_BASE_URL", "https://sheets.googleapis.com/v4")
    SHEETS_ACCESS_TOKEN = os.getenv("SHEETS_ACCESS_TOKEN")  # optional bootstrap token
    SHEETS_TIMEOUT_SECONDS = float(os.getenv("SHEETS_TIMEOUT_SECONDS", "30"))
    SHEETS_VALUE_INPUT_OPTION = "USER_ENTERED"
    # Numbers arrive as numbers, not as locale-formatted text.
    SHEETS_VALUE_RENDER_OPTION = "UNFORMATTED_VALUE"

    # Paging
    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "1000"))
    MRP_PAGE_SIZE = int(os.getenv("MRP_PAGE_SIZE", "50"))
    SEARCH_DEBOUNCE_SECONDS = float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "0.4"))

    # LLM Configuration
    LLM_MODEL_NAME = os.getenv("LLM_MODEL_NAME", "gemini-2.5-flash")
    LLM_SCOUTING_MODEL_NAME = os.getenv("LLM_SCOUTING_MODEL_NAME", "gemini-2.5-pro")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "90"))

    # API client
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

    # CORS Settings
    CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"
    CORS_ALLOW_METHODS = ["*"]
    CORS_ALLOW_HEADERS = ["*"]

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Multi-tenant configuration
    COMPANIES: List[Company] = [
        Company(id="c1", name="EcoCompact Spa", spreadsheet_id=DEFAULT_SPREADSHEET_ID),
        Company(id="c2", name="UrbanWaste Solutions", spreadsheet_id=DEFAULT_SPREADSHEET_ID),
        Company(id="c3", name="HeavyDuty Trucks Ltd", spreadsheet_id=DEFAULT_SPREADSHEET_ID),
    ]


settings = Settings()
