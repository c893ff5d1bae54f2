"""Text Fixer Gateway - applies byte-span edits to files on disk."""

import logging
import shutil
from pathlib import Path

from ruby_structure_linter.domain.entities import Edit, TextEdits
from ruby_structure_linter.domain.protocols import FixerGatewayProtocol

logger = logging.getLogger(__name__)


class TextFixerGateway(FixerGatewayProtocol):
    """Gateway for applying non-overlapping text edits to one file."""

    BACKUP_SUFFIX: str = ".bak"

    def apply_edits(
        self, file_path: str, edits: list[Edit], create_backup: bool = True
    ) -> bool:
        """
        Apply edits to a file.

        Args:
            file_path: Path to the file to modify
            edits: Non-overlapping edits with byte offsets into the current content
            create_backup: Copy the original to `<file>.bak` before writing

        Returns:
            True if the file was modified, False otherwise
        """
        path = Path(file_path)
        original = path.read_bytes().decode("utf-8")
        updated = TextEdits.apply(original, edits)
        if updated == original:
            return False
        if create_backup:
            shutil.copy2(path, path.with_name(path.name + self.BACKUP_SUFFIX))
        path.write_bytes(updated.encode("utf-8"))
        logger.info("applied %d edit(s) to %s", len(edits), file_path)
        return True
