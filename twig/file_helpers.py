from pathlib import Path
import gzip
import hashlib
import logging
from .errors import FileMissingInWorkingTree, ObjectNotFound

logger = logging.getLogger(__name__)

def get_objects_dir(twig_root: Path) -> Path:
    return twig_root / ".twig" / "objects"

def hash_content(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()

def get_file_hash(filepath: Path) -> str:
    hasher = hashlib.sha256()
    with open(filepath, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)
    return hasher.hexdigest()

def put_blob(twig_root: Path, content: bytes) -> str:
    """Store content in the object store and return its hash.

    Objects are write-once: storing bytes that are already present is a no-op.
    """
    blob_hash = hash_content(content)
    dest_path = get_objects_dir(twig_root) / blob_hash
    if dest_path.exists():
        return blob_hash
    tmp_path = dest_path.with_name(f"{blob_hash}.tmp")
    with gzip.open(tmp_path, "wb") as f_out:
        f_out.write(content)
    tmp_path.replace(dest_path)
    logger.debug(f"stored blob {blob_hash[:12]} ({len(content)} bytes)")
    return blob_hash

def get_blob(twig_root: Path, blob_hash: str) -> bytes:
    blob_path = get_objects_dir(twig_root) / blob_hash
    if not blob_path.is_file():
        raise ObjectNotFound(f"No object with hash {blob_hash} exists.")
    with gzip.open(blob_path, "rb") as f:
        return f.read()

# working tree

def read_working_file(twig_root: Path, path: str) -> bytes:
    filepath = twig_root / path
    if not filepath.is_file():
        raise FileMissingInWorkingTree()
    return filepath.read_bytes()

def write_working_file(twig_root: Path, path: str, content: bytes) -> None:
    filepath = twig_root / path
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(content)

def delete_working_file(twig_root: Path, path: str) -> None:
    filepath = twig_root / path
    if filepath.is_file():
        filepath.unlink()
    # drop directories the deletion left empty, never the root itself
    parent = filepath.parent
    while parent != twig_root and parent.is_dir() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent

def list_working_files(twig_root: Path) -> list[str]:
    files = []
    for path in twig_root.rglob("*"):
        relative = path.relative_to(twig_root)
        if relative.parts[0] == ".twig" or not path.is_file():
            continue
        files.append(relative.as_posix())
    return sorted(files)
