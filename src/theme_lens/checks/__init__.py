from theme_lens.checks.asset_size_app_block_css import AssetSizeAppBlockCSS
from theme_lens.checks.json_syntax_error import JSONSyntaxError
from theme_lens.checks.liquid_syntax_error import LiquidHTMLSyntaxError
from theme_lens.checks.translation_key_exists import TranslationKeyExists
from theme_lens.checks.unknown_filter import UnknownFilter
from theme_lens.core.ports.check import CheckDefinition

ALL_CHECKS: list[CheckDefinition] = [
    AssetSizeAppBlockCSS(),
    JSONSyntaxError(),
    LiquidHTMLSyntaxError(),
    TranslationKeyExists(),
    UnknownFilter(),
]

__all__ = [
    "ALL_CHECKS",
    "AssetSizeAppBlockCSS",
    "JSONSyntaxError",
    "LiquidHTMLSyntaxError",
    "TranslationKeyExists",
    "UnknownFilter",
]
