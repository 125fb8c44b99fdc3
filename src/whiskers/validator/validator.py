"""Whiskers validator: semantic analysis of a parsed ``Program``.

The ``Validator`` runs a configurable set of validation rules against a
``ValidationContext`` and returns a list of ``Diagnostic`` objects.  In
strict mode, warnings are promoted to errors so that classroom or CI
setups can refuse programs with undeclared variables or empty loops.

Usage
-----
::

    from whiskers.parser import parse_source
    from whiskers.validator import validate

    program, diagnostics = parse_source(source)
    diagnostics += validate(program, source)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from whiskers.ast.nodes import Program, Span
from whiskers.diagnostics import Diagnostic, DiagnosticSeverity, ErrorCode, error
from whiskers.validator.context import ValidationContext
from whiskers.validator.rules import DEFAULT_RULES, Rule

logger = logging.getLogger(__name__)


class Validator:
    """Semantic validator for Whiskers programs.

    Parameters
    ----------
    rules:
        The list of validation rules to run.  Defaults to all built-in
        rules (``DEFAULT_RULES``).  Pass a custom list to extend or
        restrict which rules apply.
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR
        severity.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        strict: bool = False,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict: bool = strict

    def validate(self, context: ValidationContext) -> list[Diagnostic]:
        """Run all rules against ``context`` and return the collected diagnostics.

        Parameters
        ----------
        context:
            The program and sprite information to validate.

        Returns
        -------
        list[Diagnostic]
            All findings, sorted by source line then column.  May be
            empty if the program is valid.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                all_diagnostics.extend(rule(context))
            except Exception as exc:  # noqa: BLE001
                # A broken rule must not hide the findings of the others.
                logger.exception("Validator rule %s failed", rule.__name__)
                all_diagnostics.append(error(
                    ErrorCode.INTERNAL_ERROR,
                    f"Internal validator error in rule {rule.__name__!r}: {exc}",
                    Span(0, 0, 1, 1),
                    suggestion="Please report this as a bug",
                    rule=rule.__name__,
                ))

        if self._strict:
            all_diagnostics = [
                replace(d, severity=DiagnosticSeverity.ERROR)
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        # Sort by line, then column for deterministic output
        all_diagnostics.sort(key=lambda d: (d.span.line, d.span.col))
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance.

        Parameters
        ----------
        rule:
            A callable ``(ValidationContext) -> list[Diagnostic]``.
        """
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate(
    program: Program,
    source: str = "",
    procedures: dict[str, list[str]] | None = None,
    *,
    sprite_name: str = "Sprite1",
    is_stage: bool = False,
    costume_names: Iterable[str] = (),
    sound_names: Iterable[str] = (),
    known_variables: Iterable[str] = (),
    known_lists: Iterable[str] = (),
    strict: bool = False,
) -> list[Diagnostic]:
    """Convenience function: validate one sprite with the default rules.

    Parameters
    ----------
    program:
        The parsed sprite.
    source:
        The sprite's source text.
    procedures:
        Procedure table; defaults to ``program.procedures``.
    sprite_name, is_stage, costume_names, sound_names:
        Sprite information, see ``ValidationContext``.
    known_variables, known_lists:
        Names declared by the other sprites of a project.
    strict:
        If ``True``, warnings become errors.

    Returns
    -------
    list[Diagnostic]
        Sorted list of all findings.
    """
    context = ValidationContext(
        program=program,
        source=source,
        procedures=dict(program.procedures if procedures is None else procedures),
        sprite_name=sprite_name,
        is_stage=is_stage,
        costume_names=tuple(costume_names),
        sound_names=tuple(sound_names),
        known_variables=frozenset(known_variables),
        known_lists=frozenset(known_lists),
    )
    return Validator(strict=strict).validate(context)
