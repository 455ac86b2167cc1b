"""
Selector dialect implementations.
"""

__all__ = [
    "CssSelector",
    "JsonPathSelector",
    "RegexSelector",
    "XPathSelector",
]

from .css import CssSelector
from .jsonpath import JsonPathSelector
from .regex import RegexSelector
from .xpath import XPathSelector
