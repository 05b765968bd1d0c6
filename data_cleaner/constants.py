# Application constants
import logging

# ---------------------------------------------------------------------
# Page configuration
# ---------------------------------------------------------------------
PAGE_TITLE = "AI-Powered Data Cleaning Tool"
PAGE_ICON = "🧹"
PAGE_LAYOUT = "wide"

LOG_LEVEL = logging.INFO

# ---------------------------------------------------------------------
# Workflow steps
# ---------------------------------------------------------------------
STEP_UPLOAD = "upload"
STEP_ANALYSIS = "analysis"
STEP_CLEANING = "cleaning"
STEPS = [STEP_UPLOAD, STEP_ANALYSIS, STEP_CLEANING]
STEP_LABELS = {
    STEP_UPLOAD: "Step 1 · Upload Data",
    STEP_ANALYSIS: "Step 2 · Quality Analysis",
    STEP_CLEANING: "Step 3 · Clean & Export",
}

# ---------------------------------------------------------------------
# Quality analysis heuristics
# ---------------------------------------------------------------------
CASE_MIN_STRING_VALUES = 5
CASE_PROBLEM_WEIGHT = 0.3
SPACES_PROBLEM_WEIGHT = 0.5

# ---------------------------------------------------------------------
# Transform parameters
# ---------------------------------------------------------------------
CASE_MODES = ("upper", "lower", "proper")
OUTLIER_LOWER_QUANTILE = 0.25
OUTLIER_UPPER_QUANTILE = 0.75
OUTLIER_IQR_MULTIPLIER = 1.5
PHONE_DIGITS = 10
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# ---------------------------------------------------------------------
# Input / output
# ---------------------------------------------------------------------
UPLOAD_EXTENSIONS = ["csv", "xlsx"]
CSV_ENCODINGS = ["utf-8", "latin-1", "cp1252"]
EXPORT_FORMATS = {
    "xlsx": ("cleaned_data.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "csv": ("cleaned_data.csv", "text/csv"),
    "json": ("cleaned_data.json", "application/json"),
}
EXPORT_LABELS = {"xlsx": "Excel", "csv": "CSV", "json": "JSON"}
EXCEL_SHEET_NAME = "Cleaned Data"

PREVIEW_ROW_LIMIT = 100
