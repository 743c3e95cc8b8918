__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .literals import evaluate_literal, parse_literal_expression, LiteralError
from .candidates import candidate_paths, resolve_binding, normalize_alias
from .idioms import IdiomDetector, DetectionContext
from .pregyp import find_binary, is_locator_available, LOCATOR_PACKAGES
from .patch import TextPatch, Edit
from .rewriter import rewrite, replacement_for
from .resolution import resolve_match

__all__ = [
    "evaluate_literal",
    "parse_literal_expression",
    "LiteralError",
    "candidate_paths",
    "resolve_binding",
    "normalize_alias",
    "IdiomDetector",
    "DetectionContext",
    "find_binary",
    "is_locator_available",
    "LOCATOR_PACKAGES",
    "TextPatch",
    "Edit",
    "rewrite",
    "replacement_for",
    "resolve_match",
]
