import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent.parent


class Config:
    # --- Application Settings ---
    APP_TITLE = os.getenv("APP_TITLE", "Laboratory Report Download")
    APP_LAYOUT = os.getenv("APP_LAYOUT", "wide")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Report Output ---
    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "reports")))
    REPORTS_DIR = Path(os.getenv("REPORTS_DIR", str(BASE_DIR / "data")))

    # --- Rasterisation ---
    RASTER_SCALE = float(os.getenv("RASTER_SCALE", "2"))
    RASTER_DPI = int(os.getenv("RASTER_DPI", "100"))
    # 0 disables the per-run time budget
    PDF_TIMEOUT_S = float(os.getenv("PDF_TIMEOUT_S", "0"))

    # --- Fonts ---
    # Matplotlib's bundled DejaVu has no Bengali glyphs; point this at a
    # Bengali TTF (e.g. Noto Sans Bengali) for readable output.
    BANGLA_FONT_PATH = os.getenv("BANGLA_FONT_PATH", "")

    # --- Institute identity ---
    INSTITUTE_NAME = os.getenv("INSTITUTE_NAME", "আঞ্চলিক গবেষণাগার")
    INSTITUTE_ADDRESS = os.getenv("INSTITUTE_ADDRESS", "যশোর")
    INSTITUTE_ISSUED_BY = os.getenv("INSTITUTE_ISSUED_BY", "")
    INSTITUTE_PHONE = os.getenv("INSTITUTE_PHONE", "")
    INSTITUTE_WEBSITE = os.getenv("INSTITUTE_WEBSITE", "http://srdilabjessore.gov.bd")
    # Office memo number printed on the cover letter
    INSTITUTE_MEMO_NUMBER = os.getenv("INSTITUTE_MEMO_NUMBER", "১২,০৩,৪০৪২,০৭১,৫৭,২০১,২০")


@dataclass(frozen=True)
class InstituteConfig:
    """Read-only institute identity printed on report headers and signatures."""
    name: str = ""
    address: str = ""
    issued_by: str = ""
    phone: str = ""
    website: str = "http://srdilabjessore.gov.bd"
    memo_number: str = ""

    @classmethod
    def from_env(cls) -> "InstituteConfig":
        return cls(
            name=Config.INSTITUTE_NAME,
            address=Config.INSTITUTE_ADDRESS,
            issued_by=Config.INSTITUTE_ISSUED_BY,
            phone=Config.INSTITUTE_PHONE,
            website=Config.INSTITUTE_WEBSITE,
            memo_number=Config.INSTITUTE_MEMO_NUMBER,
        )


@dataclass
class ReportConfig:
    """Per-run options for PDF generation."""
    raster_scale: float = Config.RASTER_SCALE
    raster_dpi: int = Config.RASTER_DPI
    timeout_s: Optional[float] = Config.PDF_TIMEOUT_S or None
    author: str = "labreport"
