"""Condition evaluation for live-preview rendering.

Conditions use a deliberately small grammar shared with the template compiler:

    Cond := Cond "||" Cond | Cond "&&" Cond | "!" Cond | PathExpression

There are no parentheses. Evaluation checks operators in a fixed order:
``||`` is split first, then ``&&``, then a leading ``!`` negates the rest of
the term, and anything else is a path looked up in the data. As a consequence
``a && b || c`` evaluates as the two disjuncts ``a && b`` and ``c``.

Example usage:
    evaluator = ConditionEvaluator()
    evaluator.evaluate("order.items", {"order": {"items": []}})   # False
    evaluator.evaluate("!user.vip || coupon", data)
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterator, List

from ..exceptions import MalformedConditionError
from .paths import ABSENT, resolve

OR = "||"
AND = "&&"
NOT = "!"

# A path term: no whitespace, quotes, braces, angle brackets or operator characters.
_PATH_TERM = re.compile(r"^[^\s!&|{}()<>\"']+$")


def is_truthy(value: Any) -> bool:
    """Template truthiness for a resolved value.

    Absent and empty sequences are false; mappings are true (as in the
    template runtime); NaN is false; everything else uses ``bool()``.
    """
    if value is ABSENT or value is None:
        return False
    if isinstance(value, (str, bytes)):
        return bool(value)
    if isinstance(value, Mapping):
        return True
    if isinstance(value, Sequence):
        return len(value) > 0
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


class ConditionEvaluator:
    """Evaluate condition expressions against a data value.

    Stateless: expressions are parsed on every call and never cached.
    """

    def evaluate(self, expr: Any, data: Any) -> bool:
        """Evaluate a condition expression.

        Args:
            expr: Condition string such as ``"a.b && !c"``; non-strings use
                their own truthiness
            data: Data the paths are resolved against

        Returns:
            Boolean result. Always True when ``data`` is None/absent: previews
            rendered without data show every branch.
        """
        if not isinstance(expr, str):
            return bool(expr)
        if data is None or data is ABSENT:
            return True

        expr = expr.strip()

        if OR in expr:
            # Every disjunct is evaluated; the split already scanned the whole string.
            results = [self.evaluate(part.strip(), data) for part in expr.split(OR)]
            return any(results)

        if AND in expr:
            results = [self.evaluate(part.strip(), data) for part in expr.split(AND)]
            return all(results)

        if expr.startswith(NOT):
            return not self.evaluate(expr[1:].strip(), data)

        return is_truthy(resolve(expr, data))


def iter_terms(expr: str) -> Iterator[str]:
    """Yield the path terms of ``expr`` with operators and negations removed."""
    for disjunct in expr.split(OR):
        for conjunct in disjunct.split(AND):
            yield conjunct.strip().lstrip(NOT).strip()


def validate_condition(expr: Any) -> str:
    """Return the stripped condition, or raise if it cannot be compiled.

    Raises:
        MalformedConditionError: If the condition is missing, empty, or has an
            empty or non-path term (``"a &&"``, ``"!"``, ``"a b"``)
    """
    if not isinstance(expr, str) or not expr.strip():
        raise MalformedConditionError("Empty condition", context={"condition": expr})
    stripped = expr.strip()
    bad: List[str] = [term for term in iter_terms(stripped) if not _PATH_TERM.match(term)]
    if bad:
        raise MalformedConditionError(
            f"Invalid condition {stripped!r}: unusable term(s) {bad!r}",
            context={"condition": stripped, "terms": bad},
        )
    return stripped


def split_conjuncts(expr: str) -> List[str]:
    """Split a condition on ``&&`` into trimmed conjuncts (one when there is none)."""
    if AND in expr:
        return [part.strip() for part in expr.split(AND)]
    return [expr.strip()]


_default_evaluator = ConditionEvaluator()


def evaluate_condition(expr: Any, data: Any) -> bool:
    """Convenience wrapper around a shared :class:`ConditionEvaluator`."""
    return _default_evaluator.evaluate(expr, data)


__all__ = [
    "ConditionEvaluator",
    "evaluate_condition",
    "is_truthy",
    "iter_terms",
    "split_conjuncts",
    "validate_condition",
]
