"""
Font Embedding
==============

Registers the TrueType/OpenType fonts of a directory with a PDF renderer.
Unusable font directories or files degrade rendering to default fonts.
"""

from typing import Any, List, TYPE_CHECKING, Union
from pathlib import Path

from PIL import ImageFont  # type: ignore

from docrender.config.logging import get_logger
from docrender.core.errors import degradable
from docrender.models.schemas import FONT_SUFFIXES, FontFace, PdfOptions

if TYPE_CHECKING:
    from docrender.core.rendering.pdf_generator import BasePdfRenderer

logger = get_logger(__name__)


def is_font_file(path: Path) -> bool:
    """True for regular files with a .ttf or .otf suffix, in any case."""
    return path.suffix.lower() in FONT_SUFFIXES and path.is_file()


def read_font_family(path: Union[str, Path]) -> str:
    """
    Read the family name stored in a font file.

    Falls back to the file stem when the font has no usable name record.

    Raises:
        OSError: If the file cannot be opened as a font
    """
    font = ImageFont.truetype(str(path), size=12)
    family, _style = font.getname()
    return family or Path(path).stem


def configure_fonts(renderer: "BasePdfRenderer", options: PdfOptions) -> List[FontFace]:
    """
    Register every font file directly inside ``options.font_dir``.

    Subdirectories are not searched. Failures are logged and skipped.

    Returns:
        The fonts that were registered
    """
    registered: List[FontFace] = []
    if options.font_dir is None:
        return registered

    font_dir = Path(options.font_dir)
    log: Any = logger.bind(component="font_embedder", font_dir=str(font_dir))

    entries: List[Path] = []
    with degradable(log, "Error loading fonts"):
        if not font_dir.is_dir():
            raise NotADirectoryError(f"Font directory does not exist: {font_dir}")
        entries = sorted(font_dir.iterdir())

    for entry in entries:
        if not is_font_file(entry):
            continue
        with degradable(log, "Error loading font", font=entry.name):
            registered.append(renderer.add_font(entry))
            log.debug("Loaded font", font=entry.name)

    log.info("Fonts configured", count=len(registered))
    return registered
