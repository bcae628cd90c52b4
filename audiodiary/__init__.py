"""
Audio diary speech-to-text core.

Turns a recorded diary clip into text: quality analysis, admission checks,
provider selection and a single normalized TranscriptionResult.
"""

__version__ = "0.3.0"
