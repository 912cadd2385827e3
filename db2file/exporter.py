import codecs
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from db2file.errors import RenderError
from db2file.generator import generate_json, generate_xml
from db2file.logger import get_logger
from db2file.types import RowSet

FILE_FORMATS: tuple[str, ...] = ("json", "xml", "csv")

# Database charset names Python knows under another name
CHARSET_CODECS: dict[str, str] = {
    "utf8mb3": "utf-8",
    "utf8mb4": "utf-8",
}

logger = get_logger(__name__)


def resolve_codec(charset: str) -> str:
    """
    Maps a database charset name to a Python codec name.

    Unknown charsets fall back to utf-8.
    """
    charset = CHARSET_CODECS.get(charset.lower(), charset)
    try:
        return codecs.lookup(charset).name
    except LookupError:
        logger.warning(f"Unknown charset '{charset}', writing utf-8")
        return "utf-8"


def rows_to_dataframe(rows: RowSet) -> pd.DataFrame:
    """
    Converts fetched rows to a DataFrame keeping the column order of the
    first row.
    """
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame.from_records(rows, columns=list(rows[0]))


def render_document(rows: RowSet, file_format: str, **xml_options: Any) -> str:
    """
    Renders rows in one of FILE_FORMATS.

    Args:
        rows: The rows to render.
        file_format: One of 'json', 'xml' or 'csv'.
        **xml_options: Keyword arguments for generate_xml.

    Raises:
        ValueError: If the format is not supported.
    """
    if file_format == "json":
        return generate_json(rows)
    elif file_format == "xml":
        return generate_xml(rows, **xml_options)
    elif file_format == "csv":
        return rows_to_dataframe(rows).to_csv(index=False)
    raise ValueError(f"Unsupported file format '{file_format}'!")


def export_data(
    save_path: Union[str, Path],
    rows: RowSet,
    file_format: Optional[str] = None,
    **xml_options: Any,
) -> Path:
    """
    Writes rows to a file.

    Args:
        save_path: Destination file.
        rows: The rows to write.
        file_format: One of FILE_FORMATS. Inferred from the suffix of
            `save_path` when omitted.
        **xml_options: Keyword arguments for generate_xml.

    Returns:
        The path written to.
    """
    save_path = Path(save_path)
    if file_format is None:
        file_format = save_path.suffix.lstrip(".").lower()

    document = render_document(rows, file_format, **xml_options)

    encoding = "utf-8"
    if file_format == "xml":
        encoding = resolve_codec(xml_options.get("charset", "utf8"))

    try:
        content = document.encode(encoding)
    except UnicodeEncodeError as e:
        raise RenderError(f"Document cannot be encoded as {encoding}: {e}") from e

    save_path.parent.mkdir(parents=True, exist_ok=True)
    save_path.write_bytes(content)

    logger.info(f"Exported {len(rows)} rows to {save_path}")
    return save_path
