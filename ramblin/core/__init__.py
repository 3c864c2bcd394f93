"""
Core Modules
=============
Contains the core business logic:
- result.py         : Ok / Err result types and the error taxonomy
- response_parser.py: Markdown fence cleaning and JSON extraction
- coercion.py       : Coercion of parsed JSON into domain shapes
- generation.py     : call → clean → extract → coerce for every call site
- prompts.py        : System prompts and per-call-site sampling settings
- statement.py      : Bank statement validity / analysis / merchant pipeline
- investments.py    : Buy / hold / sell opinions for merchants
- url_checker.py    : Redirect resolution and URL risk assessment
- chat.py           : Finance assistant chat turn
- pdf_text.py       : PDF text extraction (PyMuPDF)
"""
