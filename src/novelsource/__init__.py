from .version import __version__ as __version__

__title__ = "NovelSource"
__description__ = "A rule-driven engine for searching and reading novels from configurable book sources."  # noqa: E501
__author__ = "Saudade Z"
__email__ = "saudadez217@gmail.com"
__license__ = "Apache-2.0"
