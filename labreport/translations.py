"""
Bangla translations and numeral helpers for printed reports.

Lookups return the input unchanged when it is already Bangla or has no
entry, so report rendering never fails on an unknown label.
"""
import re
from datetime import datetime
from typing import Dict, Optional, Union

_BANGLA_CHARS = re.compile(r"[ঀ-৿]")
_BANGLA_DIGITS = "০১২৩৪৫৬৭৮৯"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "test_elements": {
        "pH": "পিএইচ",
        "Organic Matter": "জৈব পদার্থ",
        "Nitrogen": "নাইট্রোজেন",
        "Phosphorus": "ফসফরাস",
        "Potassium": "পটাশিয়াম",
        "Sulfur": "সালফার",
        "Calcium": "ক্যালসিয়াম",
        "Magnesium": "ম্যাগনেসিয়াম",
        "Iron": "আয়রন",
        "Manganese": "ম্যাঙ্গানিজ",
        "Copper": "কপার",
        "Zinc": "জিঙ্ক",
        "Boron": "বোরন",
        "Molybdenum": "মলিবডেনাম",
        "Chlorine": "ক্লোরিন",
        "Sodium": "সোডিয়াম",
        "Lead": "সীসা",
        "Arsenic": "আর্সেনিক",
        "Cadmium": "ক্যাডমিয়াম",
        "Chromium": "ক্রোমিয়াম",
        "EC": "ইসি",
        "TDS": "টিডিএস",
        "Salinity": "লবণাক্ততা",
        "Hardness": "কঠোরতা",
        "Alkalinity": "ক্ষারত্ব",
        "Turbidity": "ঘোলাটে",
        "Nitrate": "নাইট্রেট",
        "Phosphate": "ফসফেট",
        "Sulfate": "সালফেট",
        "Chloride": "ক্লোরাইড",
        "Total Nitrogen": "মোট নাইট্রোজেন",
        "Total Phosphorus": "মোট ফসফরাস",
        "Total Potassium": "মোট পটাশিয়াম",
        "Total Sulfur": "মোট সালফার",
        "Total Zinc": "মোট জিঙ্ক",
        "Total Boron": "মোট বোরন",
    },
    "analysis_types": {
        "ROUTINE": "রুটিন",
        "SPECIAL": "বিশেষ",
        "RESEARCH": "গবেষণা",
    },
    "units": {
        "pH": "পিএইচ",
        "%": "%",
        "mg/L": "মিলিগ্রাম/লিটার",
        "ppm": "পিপিএম",
        "g/L": "গ্রাম/লিটার",
        "kg/ha": "কিলোগ্রাম/হেক্টর",
        "meq/100g": "মিলিইকুইভ্যালেন্ট/১০০ গ্রাম",
        "cmol/kg": "সেন্টিমোল/কিলোগ্রাম",
        "dS/m": "ডেসিসিমেন্স/মিটার",
        "NTU": "এনটিইউ",
        "mg/kg": "মিলিগ্রাম/কিলোগ্রাম",
        "g/kg": "গ্রাম/কিলোগ্রাম",
        "μg/L": "মাইক্রোগ্রাম/লিটার",
    },
}

_UNITS = [
    "", "এক", "দুই", "তিন", "চার", "পাঁচ", "ছয়", "সাত", "আট", "নয়", "দশ",
    "এগারো", "বারো", "তেরো", "চৌদ্দ", "পনেরো", "ষোল", "সতেরো", "আঠারো", "উনিশ", "বিশ",
]
_TENS = ["", "", "বিশ", "ত্রিশ", "চল্লিশ", "পঞ্চাশ", "ষাট", "সত্তর", "আশি", "নব্বই"]


def _translate(text: str, table: str) -> str:
    if not text:
        return ""
    if _BANGLA_CHARS.search(text):
        return text
    return TRANSLATIONS[table].get(text, text)


def translate_test_element(name: str) -> str:
    return _translate(name, "test_elements")


def translate_unit(unit: str) -> str:
    return _translate(unit, "units")


def translate_analysis_type(analysis_type: str) -> str:
    return _translate(analysis_type, "analysis_types")


def to_bangla_number(value: Union[int, float, str]) -> str:
    """Replace ASCII digits with Bangla digits, keeping everything else."""
    return re.sub(r"\d", lambda m: _BANGLA_DIGITS[int(m.group())], str(value))


def format_value(value, decimals: int = 2, missing: str = "-") -> str:
    """Format a measured value in Bangla digits; None renders as ``missing``."""
    if value is None:
        return missing
    return to_bangla_number(f"{value:.{decimals}f}")


def number_to_bangla_words(num: Union[int, float]) -> str:
    """Spell a non-negative whole number in Bangla (Indian grouping).

    Fractions are truncated; lakh (10^5) and crore (10^7) are used above
    a thousand, as on printed invoices.
    """
    num = int(num)
    if num == 0:
        return "শূন্য"
    if num <= 20:
        return _UNITS[num]
    if num < 100:
        ten, unit = divmod(num, 10)
        return _TENS[ten] if unit == 0 else f"{_TENS[ten]} {_UNITS[unit]}"
    if num < 1000:
        hundred, rest = divmod(num, 100)
        head = "একশত" if hundred == 1 else f"{_UNITS[hundred]}শত"
        return head + (f" {number_to_bangla_words(rest)}" if rest else "")

    for size, word in ((10_000_000, "কোটি"), (100_000, "লক্ষ"), (1000, "হাজার")):
        if num >= size:
            count, rest = divmod(num, size)
            # crore can itself exceed a hundred crore
            head = f"এক {word}" if count == 1 else f"{number_to_bangla_words(count)} {word}"
            return head + (f" {number_to_bangla_words(rest)}" if rest else "")
    return ""  # unreachable for num >= 1000


def format_number(value, missing: str = "-") -> str:
    """Shortest form of a rule bound or price in Bangla digits (1.5 -> ১.৫)."""
    if value is None:
        return missing
    return to_bangla_number(f"{value:g}")


def format_bangla_date(value: Optional[datetime], missing: str = "-") -> str:
    """Day/month/year in Bangla digits, as printed in memo lines."""
    if value is None:
        return missing
    return to_bangla_number(f"{value.day}/{value.month}/{value.year}")
