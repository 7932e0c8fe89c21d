import datetime as dt
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


KENYAN_PASSPORT_TEXT = (
    "PASSPORT JOHN SMITH NATIONALITY KEN DATE OF BIRTH: 15 JAN 1990 "
    "PASSPORT NO AK1626595"
)

NOISY_PASSPORT_TEXT = """JAMHURI YA KENYA REPUBLIC OF KENYA
PASSPORT/PASIPASSEPORT   Type P   Code KEN
Surname / Given names
WANJIKU MARY AKINYI
Nationality KENYAN
Date of birth 17 0CT 2001
Sex F
Date of issue 12 MAR 2019   Date of expiry 11 MAR 2029
AK1626595
"""

NO_DATE_TEXT = "REPUBLIC OF UTOPIA NATIONAL IDENTITY CARD HOLDER JANE DOE ID NO X12345678"


@pytest.fixture
def today() -> dt.date:
    return dt.date(2025, 6, 1)


@pytest.fixture
def kenyan_passport_text() -> str:
    return KENYAN_PASSPORT_TEXT


@pytest.fixture
def noisy_passport_text() -> str:
    return NOISY_PASSPORT_TEXT


@pytest.fixture
def no_date_text() -> str:
    return NO_DATE_TEXT
