"""
Services package initialization
"""
from .session_state import SessionState, ValidationController
from .validation_service import analyze_datasheets, check_completeness

__all__ = ['SessionState', 'ValidationController', 'analyze_datasheets', 'check_completeness']
