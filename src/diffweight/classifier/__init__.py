"""Classification rule chain and weight table."""

from diffweight.classifier.rules import RULES, classify
from diffweight.classifier.weights import calculate_weight

__all__ = ["RULES", "calculate_weight", "classify"]
