"""
Configuration and prompt templates for the sub-source validator
"""
import os

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.1"))
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "50"))
NORMALIZE_WORKERS = int(os.getenv("NORMALIZE_WORKERS", "4"))
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "100"))

EXPORT_FILENAME = "Substitution_Analysis_Report.csv"
MISSING_FILE_PLACEHOLDER = "N/A (Missing File)"


def get_api_key() -> str:
    """Read the key at call time so tests and .env reloads are honoured"""
    return (os.getenv("OPENAI_API_KEY") or "").strip()


def get_log_directory() -> str:
    return os.getenv("ANALYSIS_LOG_DIR") or os.path.join(PACKAGE_DIR, "logs")


def analysis_log_enabled() -> bool:
    return os.getenv("ANALYSIS_LOG_ENABLED", "true").strip().lower() not in {"0", "false", "no", "off"}


COMPLETENESS_PROMPT = """
Role: Procurement Document Assistant.

Task:
1. Analyze the provided 'Master List' content (CSV/Table) row by row.
2. Each row usually represents a comparison group with:
   - One "Original Part" (Component A).
   - ONE OR MORE "Substitute Parts" (Component B, Component C, etc.).
3. You MUST identify ALL substitutes listed in the row. Do not stop after finding just one.
4. For every part found (Original and ALL Substitutes), check if a file in the "Uploaded Filenames" list matches it.

Uploaded Filenames List:
{filenames}

Rules:
- Loose Matching: If Master List says "NTTFS080N10" and filename is "NTTFS080N10GTAG.pdf", count it as "Provided".
- Matching is by substring / approximate part number, never exact string equality.
- When a part is "Provided", set "matchedFilename" to the matching filename; otherwise set it to null.
- If a part name is found in the Master List but NO file matches, status is "Missing".
- "allProvided" is true only when every original and substitute part is "Provided".
- Output MUST group result by Master List row.
"""

ANALYSIS_PROMPT = """
Role: Senior Procurement & R&D Validation Assistant.
Goal: Compare electronic components (Original vs Substitutes) for EVERY row in the 'Master List'.

Uploaded Datasheets:
{filenames}

Instructions:
1. **Iterate Master List Rows**: The Master List may contain multiple distinct comparison groups (e.g. Row 1: MOSFET A vs B/C; Row 2: Diode X vs Y).
   - You MUST generate a "Comparison Group" for EACH row found in the master list.
   - DO NOT combine different component series into one table.

2. **Component Identification (Smart Mapping)**:
   - For each row, identify Original Part (A) and Substitutes (B, C...).
   - Use "Fuzzy Matching" to find the correct datasheet from the Uploaded Datasheets list.
   - Example: If Master List says "NTTFS080" and file is "NTTFS080N10GTAG.pdf", map them together.

3. **Comparison Table (15 Items)**:
   - For EACH group, generate a specific comparison table with ids 1 to 15, most critical first.
   - Items 1-10: Critical Specs (Matches the component type, e.g., Vds, Id, Rds for MOSFET; Vz, Pd for Zener).
   - Items 11-13: Secondary Specs.
   - Items 14-15: Info/Lifecycle.
   - Determine compliance for each substitute: "Fully Compliant", "Partial / Review Needed" or "Non-Compliant".

4. **Handling Missing Files**:
   - If a datasheet is missing for Component C, you must still include "Spec C" column but mark values as "{missing_placeholder}".
   - Do not omit the column.
   - List every part number without an attached datasheet in "missingFiles".

Output Format: JSON with an array of groups.
"""
