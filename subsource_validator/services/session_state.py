"""
Session State - One explicit state object per user session and the pure
transitions between phases, plus the controller that drives them
"""
import itertools
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config import MAX_SESSIONS, analysis_log_enabled
from ..errors import InputValidationError, InvalidTransitionError
from ..models import AnalysisResult, CompletenessResult, IngestedFile
from . import analysis_logger
from .ai_service import GenerationClient, OpenAIGenerationClient
from .validation_service import analyze_datasheets, check_completeness


class Phase(str, Enum):
    IDLE = "Idle"
    CHECKING = "Checking"
    CHECKED = "Checked"
    ANALYZING = "Analyzing"
    ANALYZED = "Analyzed"
    FAILED = "Failed"


IN_PROGRESS = (Phase.CHECKING, Phase.ANALYZING)

# Every phase start gets a token no earlier or later run can share
_run_ids = itertools.count(1)


@dataclass(frozen=True)
class SessionState:
    phase: Phase = Phase.IDLE
    master_list: Optional[IngestedFile] = None
    datasheets: Tuple[IngestedFile, ...] = ()
    check_result: Optional[CompletenessResult] = None
    analysis_result: Optional[AnalysisResult] = None
    error: Optional[str] = None
    run_id: int = 0

    @property
    def in_progress(self) -> bool:
        return self.phase in IN_PROGRESS

    def to_payload(self) -> dict:
        return {
            "phase": self.phase.value,
            "is_checking": self.phase is Phase.CHECKING,
            "is_analyzing": self.phase is Phase.ANALYZING,
            "master_list": self.master_list.describe() if self.master_list else None,
            "datasheets": [ds.describe() for ds in self.datasheets],
            "check_result": self.check_result.to_payload() if self.check_result else None,
            "analysis_result": self.analysis_result.to_payload() if self.analysis_result else None,
            "error": self.error,
        }


def _require_idle(state: SessionState, action: str) -> None:
    if state.in_progress:
        raise InvalidTransitionError(f"Cannot {action} while {state.phase.value.lower()} is in progress.")


def _with_files(state: SessionState, **changes) -> SessionState:
    # Any change to the inputs invalidates both results
    return replace(state, phase=Phase.IDLE, check_result=None, analysis_result=None, error=None, **changes)


def set_master_list(state: SessionState, master_list: IngestedFile) -> SessionState:
    _require_idle(state, "replace the master list")
    return _with_files(state, master_list=master_list)


def add_datasheets(state: SessionState, datasheets: List[IngestedFile]) -> SessionState:
    _require_idle(state, "add datasheets")
    return _with_files(state, datasheets=state.datasheets + tuple(datasheets))


def remove_datasheet(state: SessionState, file_id: str) -> SessionState:
    _require_idle(state, "remove datasheets")
    remaining = tuple(ds for ds in state.datasheets if ds.id != file_id)
    if len(remaining) == len(state.datasheets):
        raise KeyError(file_id)
    return _with_files(state, datasheets=remaining)


def clear_datasheets(state: SessionState) -> SessionState:
    _require_idle(state, "clear datasheets")
    return _with_files(state, datasheets=())


def _is_stale(state: SessionState, run_id: Optional[int]) -> bool:
    return run_id is not None and run_id != state.run_id


def begin_check(state: SessionState) -> SessionState:
    _require_idle(state, "start a completeness check")
    return replace(
        state,
        phase=Phase.CHECKING,
        check_result=None,
        analysis_result=None,
        error=None,
        run_id=next(_run_ids),
    )


def complete_check(state: SessionState, result: CompletenessResult, run_id: Optional[int] = None) -> SessionState:
    """Store a check result; a result from a superseded run leaves the state as it is"""
    if _is_stale(state, run_id):
        return state
    if state.phase is not Phase.CHECKING:
        raise InvalidTransitionError(f"No completeness check in progress (phase {state.phase.value}).")
    return replace(state, phase=Phase.CHECKED, check_result=result)


def begin_analysis(state: SessionState) -> SessionState:
    _require_idle(state, "start an analysis")
    return replace(state, phase=Phase.ANALYZING, analysis_result=None, error=None, run_id=next(_run_ids))


def complete_analysis(state: SessionState, result: AnalysisResult, run_id: Optional[int] = None) -> SessionState:
    if _is_stale(state, run_id):
        return state
    if state.phase is not Phase.ANALYZING:
        raise InvalidTransitionError(f"No analysis in progress (phase {state.phase.value}).")
    return replace(state, phase=Phase.ANALYZED, analysis_result=result)


def fail(state: SessionState, message: str, run_id: Optional[int] = None) -> SessionState:
    if _is_stale(state, run_id):
        return state
    if not state.in_progress:
        raise InvalidTransitionError(f"Nothing in progress to fail (phase {state.phase.value}).")
    return replace(state, phase=Phase.FAILED, error=message)


def reset(state: SessionState) -> SessionState:
    return SessionState()


class ValidationController:
    """
    Owns the session states and runs phases against them. The caller is
    expected to serialize phases per session; a second start while one is in
    flight is rejected.

    A phase's outcome is only stored if the session is still on the run that
    started it. After a reset or a newer run, the late result goes back to
    its own caller and nowhere else.
    """

    def __init__(self, client_factory: Callable[[], GenerationClient] = OpenAIGenerationClient,
                 max_sessions: Optional[int] = None):
        self.client_factory = client_factory
        self.max_sessions = max_sessions or MAX_SESSIONS
        self._states: "OrderedDict[str, SessionState]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> SessionState:
        with self._lock:
            return self._states.get(session_id, SessionState())

    def apply(self, session_id: str, transition: Callable[..., SessionState], *args) -> SessionState:
        with self._lock:
            state = transition(self._states.get(session_id, SessionState()), *args)
            self._states[session_id] = state
            self._states.move_to_end(session_id)
            self._evict(keep=session_id)
            return state

    def reset(self, session_id: str) -> SessionState:
        """Drop the session entirely, files included"""
        with self._lock:
            state = self._states.pop(session_id, None)
        return reset(state)

    def session_count(self) -> int:
        with self._lock:
            return len(self._states)

    def _evict(self, keep: str) -> None:
        # Least recently touched first; sessions with a call in flight are kept
        while len(self._states) > self.max_sessions:
            victim = next(
                (sid for sid, st in self._states.items() if sid != keep and not st.in_progress),
                None,
            )
            if victim is None:
                return
            print(f"Evicting idle session {victim}")
            del self._states[victim]

    def _settle(self, session_id: str, transition: Callable[..., SessionState], *args) -> Optional[SessionState]:
        """Apply a completion to a session that still exists; a reset session stays gone"""
        with self._lock:
            current = self._states.get(session_id)
            if current is None:
                return None
            state = transition(current, *args)
            self._states[session_id] = state
            return state

    @staticmethod
    def _require_inputs(state: SessionState) -> None:
        if state.master_list is None:
            raise InputValidationError("No master list provided.")
        if not state.datasheets:
            raise InputValidationError("No datasheets provided.")

    def run_check(self, session_id: str) -> CompletenessResult:
        self._require_inputs(self.get(session_id))

        state = self.apply(session_id, begin_check)
        try:
            client = self.client_factory()
            result = check_completeness(state.master_list, list(state.datasheets), client)
        except Exception as e:
            self._settle(session_id, fail, "Check Failed: " + str(e), state.run_id)
            raise

        settled = self._settle(session_id, complete_check, result, state.run_id)
        if settled is None or settled.check_result is not result:
            print(f"Discarding completeness result for session {session_id}: inputs changed during the check")
            return result

        if analysis_log_enabled():
            analysis_logger.log_completeness_result(result, [ds.original_name for ds in state.datasheets])
        return result

    def run_analysis(self, session_id: str) -> AnalysisResult:
        self._require_inputs(self.get(session_id))

        state = self.apply(session_id, begin_analysis)
        try:
            client = self.client_factory()
            result = analyze_datasheets(state.master_list, list(state.datasheets), client)
        except Exception as e:
            self._settle(session_id, fail, "AI Analysis Failed: " + str(e), state.run_id)
            raise

        settled = self._settle(session_id, complete_analysis, result, state.run_id)
        if settled is None or settled.analysis_result is not result:
            print(f"Discarding analysis result for session {session_id}: inputs changed during the analysis")
            return result

        if analysis_log_enabled():
            analysis_logger.log_analysis_results(result, [ds.original_name for ds in state.datasheets])
        return result
