# src/docstruct/observability/names.py

"""Standard metric names for docstruct observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# Parser Metrics
# ============================================================================

# Duration
PARSE_DURATION = "docstruct_parse_duration"

# Counters
PARSES_TOTAL = "docstruct_parses_total"
PARSE_ERRORS_TOTAL = "docstruct_parse_errors_total"
PARSE_RECOVERED_ISSUES_TOTAL = "docstruct_parse_recovered_issues_total"

# Gauges
DOCUMENT_CONFIDENCE = "docstruct_document_confidence"
DOCUMENT_CHAPTERS = "docstruct_document_chapters"


# ============================================================================
# Tokenizer Metrics
# ============================================================================

# Duration
TOKENIZE_DURATION = "docstruct_tokenize_duration"

# Counters (tokens accumulate over time)
TOKENS_CREATED = "docstruct_tokens_created"


# ============================================================================
# Validation Metrics
# ============================================================================

# Duration
VALIDATION_DURATION = "docstruct_validation_duration"

# Counters
VALIDATIONS_TOTAL = "docstruct_validations_total"
VALIDATION_ERRORS_TOTAL = "docstruct_validation_errors_total"
VALIDATION_WARNINGS_TOTAL = "docstruct_validation_warnings_total"

# Gauges
VALIDATION_SCORE = "docstruct_validation_score"
