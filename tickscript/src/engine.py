"""
Public entry points for validating and running TickScript.

    engine = TickScriptEngine()
    engine.validate(source)                     -> ValidationResult
    script = engine.compile(source)             -> CompiledScript (raises DSLSyntaxError)
    engine.execute(script, bars, parameters)    -> ExecutionResult
    engine.execute_script(source, bars, params) -> ExecutionResult
    engine.run_script(source, bars, params)     -> pd.Series (raises DSLError)

A CompiledScript is immutable and may be executed many times, including from
several threads, since each execution builds its own context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import pandas as pd
from loguru import logger

from .ast_nodes import StudyDeclaration
from .config import EngineSettings
from .context import BarsLike
from .errors import DSLError, DSLSyntaxError
from .evaluator import Evaluator, ExecutionResult
from .parser import parse_script


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None
    line: Optional[int] = None


@dataclass(frozen=True)
class CompiledScript:
    source: str
    statements: Tuple[Any, ...]

    @property
    def study(self) -> Optional[StudyDeclaration]:
        """The last study declaration in the script, if any."""
        studies = [s for s in self.statements if isinstance(s, StudyDeclaration)]
        return studies[-1] if studies else None


class TickScriptEngine:
    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.evaluator = Evaluator(self.settings)

    def compile(self, source: str) -> CompiledScript:
        statements = parse_script(source, max_depth=self.settings.max_nesting_depth)
        logger.debug("Compiled TickScript into {} statements", len(statements))
        return CompiledScript(source=source, statements=tuple(statements))

    def validate(self, source: str) -> ValidationResult:
        """Check that ``source`` lexes and parses; nothing is evaluated."""
        try:
            self.compile(source)
        except DSLSyntaxError as exc:
            return ValidationResult(is_valid=False, error=str(exc), line=exc.line)
        return ValidationResult(is_valid=True)

    def execute(
        self,
        script: CompiledScript,
        bars: BarsLike,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> ExecutionResult:
        return self.evaluator.execute(list(script.statements), bars, parameters)

    def execute_script(
        self,
        source: str,
        bars: BarsLike,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> ExecutionResult:
        """Compile and run ``source``; syntax and runtime errors land in the result."""
        try:
            script = self.compile(source)
        except DSLSyntaxError as exc:
            logger.warning("TickScript compilation failed: {}", exc)
            return ExecutionResult(series=pd.Series([], dtype=float), error=exc)
        return self.execute(script, bars, parameters)

    def run_script(
        self,
        source: str,
        bars: BarsLike,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> pd.Series:
        """Compile and run ``source``, raising the first DSLError encountered."""
        result = self.execute_script(source, bars, parameters)
        result.raise_for_error()
        return result.series


def validate_script(source: str) -> ValidationResult:
    return TickScriptEngine().validate(source)


def execute_script(source: str, bars: BarsLike, parameters: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
    return TickScriptEngine().execute_script(source, bars, parameters)


__all__ = [
    "CompiledScript",
    "DSLError",
    "TickScriptEngine",
    "ValidationResult",
    "execute_script",
    "validate_script",
]
