"""Write rendered documentation to disk."""

import json
import logging
from enum import Enum
from pathlib import Path

from api_documentor.analyzer.base import Endpoint
from api_documentor.generator.info import ApiInfo
from api_documentor.generator.markdown import render_markdown
from api_documentor.generator.swagger import render_swagger

logger = logging.getLogger(__name__)


class DocumentFormat(str, Enum):
    MARKDOWN = "markdown"
    SWAGGER = "swagger"


EXTENSIONS = {
    DocumentFormat.MARKDOWN: "md",
    DocumentFormat.SWAGGER: "json",
}


def render_documentation(endpoints: list[Endpoint], fmt: DocumentFormat | str, info: ApiInfo) -> str:
    """Render ``endpoints`` to text in the given format."""
    fmt = DocumentFormat(fmt)
    if fmt is DocumentFormat.MARKDOWN:
        return render_markdown(endpoints, info)
    return json.dumps(render_swagger(endpoints, info), indent=2)


def generate_documentation(
    endpoints: list[Endpoint],
    fmt: DocumentFormat | str,
    output_path: Path,
    info: ApiInfo,
) -> Path:
    """Render and write documentation, creating parent directories."""
    logger.info("Generating %s documentation...", DocumentFormat(fmt).value)
    content = render_documentation(endpoints, fmt, info)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info("Documentation generated successfully at %s", output_path)
    return output_path
