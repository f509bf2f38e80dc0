import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from theme_lens.core.check import CheckContext
from theme_lens.core.errors import JSONParseError
from theme_lens.core.json_ast import JSONLiteral, JSONObject, parse_json
from theme_lens.core.liquid_ast import Document, LiquidRawTag
from theme_lens.core.paths import join
from theme_lens.core.ports.check import CheckMeta
from theme_lens.models import Offense, Severity, SourceKind

logger = logging.getLogger(__name__)


class AssetSizeAppBlockCSSOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    threshold_in_bytes: int = Field(default=100_000, alias="thresholdInBytes")


class AssetSizeAppBlockCSS:
    """Stylesheets referenced by app blocks should stay small."""

    meta = CheckMeta(
        code="AssetSizeAppBlockCSS",
        name="Prevent large CSS bundles",
        severity=Severity.ERROR,
        source_kinds=frozenset({SourceKind.LIQUID}),
        options_schema=AssetSizeAppBlockCSSOptions,
    )

    async def visit(self, node: Any, context: CheckContext) -> list[Offense]:
        if not isinstance(node, Document):
            return []
        offenses: list[Offense] = []
        for child in node.children:
            if isinstance(child, LiquidRawTag) and child.name == "schema":
                offenses += await self._check_schema(child, context)
        return offenses

    async def _check_schema(self, schema: LiquidRawTag, context: CheckContext) -> list[Offense]:
        try:
            body = parse_json(schema.body)
        except JSONParseError:
            return []
        if not isinstance(body, JSONObject):
            return []
        stylesheet = body.get("stylesheet")
        if stylesheet is None or not isinstance(stylesheet.value, JSONLiteral):
            return []
        name = stylesheet.value.value
        if not isinstance(name, str):
            return []

        # Span of the path text inside the quotes.
        start = schema.body_start + stylesheet.value.start + 1
        end = schema.body_start + stylesheet.value.end - 1
        asset = join(context.root, "assets", name)

        if await context.file_exists(asset) is False:
            return [context.offense(f"'{name}' does not exist.", start, end)]

        size = await context.file_size(asset)
        if size is None:
            return []
        options = context.options
        assert isinstance(options, AssetSizeAppBlockCSSOptions)
        if size > options.threshold_in_bytes:
            logger.debug("%s is %d bytes (threshold %d)", asset, size, options.threshold_in_bytes)
            return [context.offense("The CSS file size exceeds the configured threshold.", start, end)]
        return []
