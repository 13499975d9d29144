"""Formal pipeline invariants.

This file documents what each stage MUST produce. This is architecture, not code.
Use this file as a reviewer anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "staging": [
        "Record count equals raw record count",
        "Raw input table is not mutated",
        "row_num is 1..k within each group identical on all nine business fields",
        "Absent values group together",
    ],

    "deduplication": [
        "Only row_num == 1 survives",
        "No two records match on all nine business fields",
        "Record count never increases",
    ],

    "standardization": [
        "company carries no leading/trailing whitespace",
        "Industry values with a configured prefix are collapsed to the canonical label",
        "Configured country names carry no trailing periods",
        "date is datetime64 (absent on parse failure, never a raw string)",
        "total_laid_off is a non-negative nullable integer",
        "percentage_laid_off is a nullable fraction in [0, 1]",
        "funds_raised_millions is a non-negative nullable number",
    ],

    "reconciliation": [
        "No text field holds a null token",
        "Absent industry backfilled from a record sharing the backfill key, single pass",
        "No record lacks both total_laid_off and percentage_laid_off",
        "row_num is dropped",
        "No two output records match on all nine business fields",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "staging": "REQUIRED",
    "deduplication": "REQUIRED",
    "standardization": "REQUIRED",
    "reconciliation": "REQUIRED",
}
