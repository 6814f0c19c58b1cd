"""
Persists the generated operation and fragment collections as JSON.

Both payloads are serialized and written to temporary files in the output
directory before either target is touched, then moved into place with
os.replace. A failure while serializing or writing leaves both previous files
as they were.
"""

import json
import os
import stat
import tempfile
from typing import Any, List, Sequence, Tuple

from models import FragmentRecord, OperationRecord


class OutputWriteError(RuntimeError):
    """Writing the generated files failed."""


def to_json(records: Sequence[Any]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)


def _write_temp(directory: str, contents: str) -> str:
    fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(contents)
    except Exception:
        os.unlink(temp_path)
        raise
    return temp_path


def _target_mode(target: str) -> int:
    """Mode for a generated file: the existing file's, else 0o666 minus the umask."""
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_files(output_dir: str, files: Sequence[Tuple[str, str]]) -> List[str]:
    """
    Write (file name, contents) pairs into output_dir, all or nothing.

    Returns the written paths.
    """
    written: List[Tuple[str, str]] = []
    try:
        os.makedirs(output_dir, exist_ok=True)
        for file_name, contents in files:
            written.append((_write_temp(output_dir, contents), file_name))
        targets = []
        for temp_path, file_name in written:
            target = os.path.join(output_dir, file_name)
            # mkstemp creates 0600 files
            os.chmod(temp_path, _target_mode(target))
            os.replace(temp_path, target)
            targets.append(target)
        return targets
    except OSError as e:
        for temp_path, _ in written:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
        raise OutputWriteError(
            f"error occurred when trying to write generated files to {output_dir}: {e}"
        ) from e


def write_collections(
    operations: Sequence[OperationRecord],
    fragments: Sequence[FragmentRecord],
    output_dir: str,
    queries_file: str,
    fragments_file: str,
) -> List[str]:
    """Write the operations and fragments files, overwriting previous contents."""
    try:
        queries_json = to_json(operations)
        fragments_json = to_json(fragments)
    except (TypeError, ValueError) as e:
        raise OutputWriteError(f"error occurred when serializing collections: {e}") from e
    return write_files(
        output_dir,
        [(queries_file, queries_json), (fragments_file, fragments_json)],
    )
